"""Exception types raised while scanning OS packages."""

from typing import Optional


class ScanError(Exception):
    """Base class for errors that abort a scan."""


class AdvisoryStoreError(Exception):
    """Raised by an advisory store when a lookup cannot be served."""


class LookupFailure(ScanError):
    """An advisory lookup failed for one package, invalidating the whole scan."""

    def __init__(self, family: str, release: str, package: str, reason: str = ""):
        self.family = family
        self.release = release
        self.package = package
        message = f"failed to get {family} advisories for {package} ({family} {release})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class VersionParseFailure(ScanError):
    """A version string could not be parsed by the family's comparator."""

    def __init__(self, version: str, scheme: str, package: Optional[str] = None):
        self.version = version
        self.scheme = scheme
        self.package = package
        message = f"failed to parse {scheme} version {version!r}"
        if package:
            message = f"{message} of package {package}"
        super().__init__(message)


class UnsupportedFamilyError(ScanError):
    """No scanner is registered for the requested OS family."""

    def __init__(self, family: str):
        self.family = family
        super().__init__(f"unsupported OS family: {family}")
