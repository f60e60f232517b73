# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Supervision of the external capture program.

The capture program (ffmpeg by default) records audio into segment files
named by a strftime pattern under the local root. `CaptureSupervisor`
launches it, relays its output into the recsync log and reports its exit code.
"""

from .supervisor import CaptureSupervisor

__all__ = [
    "CaptureSupervisor",
]
