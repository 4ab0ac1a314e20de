"""
Data models for OS package scanning.

These Pydantic models describe the installed package inventory handed in
by the caller, the advisories served by an advisory store, and the
vulnerabilities reported back.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Package(BaseModel):
    """An installed OS package as reported by the package manager."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Binary package name")
    version: str = Field(description="Installed version, without epoch or release")
    release: str = Field(default="", description="Package release (e.g. r0)")
    epoch: int = Field(default=0, ge=0, description="Package epoch")

    # Source package the binary was built from
    src_name: str = Field(default="", description="Source package name")
    src_version: str = Field(default="", description="Source package version")
    src_release: str = Field(default="", description="Source package release")
    src_epoch: int = Field(default=0, ge=0, description="Source package epoch")

    @property
    def source_name(self) -> str:
        """Source package name, falling back to the binary name."""
        return self.src_name or self.name


class Advisory(BaseModel):
    """
    A record linking a vulnerability to the version that fixes it.

    An empty fixed_version means no fix has been published yet.
    """

    model_config = ConfigDict(frozen=True)

    vulnerability_id: str = Field(description="Vulnerability identifier (e.g. CVE-2019-1549)")
    fixed_version: str = Field(default="", description="First fixed version, empty if unfixed")


class DetectedVulnerability(BaseModel):
    """A vulnerability found in an installed package."""

    model_config = ConfigDict(frozen=True)

    vulnerability_id: str
    pkg_name: str
    installed_version: str
    fixed_version: str = ""

    @property
    def is_unfixed(self) -> bool:
        """Check if no fixed version has been published."""
        return not self.fixed_version


class ScanResult(BaseModel):
    """Outcome of scanning one OS image."""

    family: str
    release: str
    supported: bool = Field(description="Whether the release still receives security fixes")
    vulnerabilities: List[DetectedVulnerability] = Field(default_factory=list)

    @property
    def vulnerability_count(self) -> int:
        return len(self.vulnerabilities)
