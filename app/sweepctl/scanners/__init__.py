"""Entity scanners for the live system.

This module exports the scanner classes for enumerating users and groups.
"""

from sweepctl.scanners.base import Scanner
from sweepctl.scanners.group import GroupScanner
from sweepctl.scanners.user import UserScanner

__all__ = ["GroupScanner", "Scanner", "UserScanner"]
