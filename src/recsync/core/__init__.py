# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core infrastructure for recsync.

This module collects the foundational pieces shared by all recsync
components: configuration, deployment settings, the clock driving the
recurring tasks, error types, formatting helpers, and structured logging.
"""
