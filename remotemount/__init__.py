"""
remotemount - bring a set of sshfs mount targets up in parallel and show
their progress live, one terminal line per target.
"""

__version__ = "0.3.0"
