"""
Network Mount Module

Components:
- BaseMounter: interface for the external mount operation
- SshfsMounter: sshfs implementation, one process per attempt
"""

from .base_mounter import BaseMounter
from .sshfs_mounter import SshfsMounter

__all__ = [
    "BaseMounter",
    "SshfsMounter",
]
