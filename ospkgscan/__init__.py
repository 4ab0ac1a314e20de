"""
ospkgscan - OS package vulnerability scanning

This package matches the packages installed in an operating-system image
against distribution security advisories, and reports whether the
distribution release is still within its security-support window.
"""

__version__ = "1.0.0"
__author__ = "Security Automation"

from .errors import (
    AdvisoryStoreError,
    LookupFailure,
    ScanError,
    UnsupportedFamilyError,
    VersionParseFailure,
)
from .models import Advisory, DetectedVulnerability, Package, ScanResult
from .scanner import new_scanner, register_scanner, supported_families

__all__ = [
    "__version__",
    "Advisory",
    "AdvisoryStoreError",
    "DetectedVulnerability",
    "LookupFailure",
    "Package",
    "ScanError",
    "ScanResult",
    "UnsupportedFamilyError",
    "VersionParseFailure",
    "new_scanner",
    "register_scanner",
    "supported_families",
]
