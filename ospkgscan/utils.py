"""
Release and version string helpers shared by the distro scanners.
"""

from .models import Package


def normalize_release(os_version: str, truncate: bool = True) -> str:
    """
    Reduce an OS release string to the granularity advisories are indexed at.

    When truncating, a release with more than one dot is cut at its last dot,
    so "3.10.2" becomes "3.10" while "3.10" and "3" are left alone.

    Args:
        os_version: Raw release string (e.g. "3.10.2").
        truncate: Whether the family indexes at major.minor granularity.

    Returns:
        Normalized release string.
    """
    if truncate and os_version.count(".") > 1:
        return os_version[:os_version.rindex(".")]
    return os_version


def format_version(epoch: int, version: str, release: str) -> str:
    """Combine epoch, version and release into "epoch:version-release"."""
    formatted = version
    if release:
        formatted = f"{formatted}-{release}"
    if epoch:
        formatted = f"{epoch}:{formatted}"
    return formatted


def format_pkg_version(pkg: Package) -> str:
    """Installed version string of the binary package."""
    return format_version(pkg.epoch, pkg.version, pkg.release)


def format_src_version(pkg: Package) -> str:
    """
    Installed version string of the source package.

    Packages without source version information fall back to the binary
    package's fields.
    """
    if not pkg.src_version:
        return format_pkg_version(pkg)
    return format_version(pkg.src_epoch, pkg.src_version, pkg.src_release)
