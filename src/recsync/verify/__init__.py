# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Verification of day-folders against their copies on the remote host.

`ChecksumVerifier` computes SHA-256 digests of local files and of their
remote counterparts. `FolderVerifier` uses it to decide whether a whole
day-folder is present on the remote host with byte-identical content.
Verification only reads data; it never modifies either side.
"""

from .checksum import ChecksumVerifier
from .verifier import FolderVerifier, VerificationResult

__all__ = [
    "ChecksumVerifier",
    "FolderVerifier",
    "VerificationResult",
]
