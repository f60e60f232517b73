# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Enumerations describing the progress of day-folders through the sync pipeline.
"""
