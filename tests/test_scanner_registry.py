"""Tests for scanner selection by OS family."""

from datetime import datetime, timezone

import pytest

from ospkgscan.advisory.store import MemoryAdvisoryStore
from ospkgscan.eol import EOLTable
from ospkgscan.errors import UnsupportedFamilyError
from ospkgscan.scanner import (
    AlpineScanner,
    UbuntuScanner,
    _SCANNERS,
    new_scanner,
    register_scanner,
    supported_families,
)
from ospkgscan.versioning import ApkVersionComparator, DebianVersionComparator


class TestNewScanner:
    """Tests for new_scanner."""

    def test_alpine(self):
        scanner = new_scanner("alpine", MemoryAdvisoryStore())
        assert isinstance(scanner, AlpineScanner)
        assert isinstance(scanner.comparator, ApkVersionComparator)

    def test_ubuntu(self):
        scanner = new_scanner("ubuntu", MemoryAdvisoryStore())
        assert isinstance(scanner, UbuntuScanner)
        assert isinstance(scanner.comparator, DebianVersionComparator)

    def test_case_insensitive(self):
        assert isinstance(new_scanner("Alpine", MemoryAdvisoryStore()), AlpineScanner)

    def test_unknown_family(self):
        with pytest.raises(UnsupportedFamilyError) as exc_info:
            new_scanner("haiku", MemoryAdvisoryStore())
        assert exc_info.value.family == "haiku"

    def test_injected_comparator_and_table(self, comparator):
        table = EOLTable("alpine", {})
        scanner = new_scanner("alpine", MemoryAdvisoryStore(), comparator=comparator, eol_table=table)
        assert scanner.comparator is comparator
        assert scanner.eol_table is table

    def test_supported_families(self):
        assert {"alpine", "ubuntu"} <= set(supported_families())


class TestRegisterScanner:
    """Tests for registering new families."""

    @pytest.fixture
    def restore_registry(self):
        saved = dict(_SCANNERS)
        yield
        _SCANNERS.clear()
        _SCANNERS.update(saved)

    def test_register_new_family(self, restore_registry):
        """Test a new family is dispatched without touching new_scanner."""

        class DebianScanner(UbuntuScanner):
            family = "debian"

            def __init__(self, store, comparator=None, eol_table=None):
                super().__init__(
                    store,
                    comparator=comparator,
                    eol_table=eol_table or EOLTable("debian", {
                        "10": datetime(2024, 6, 30, 23, 59, 59, tzinfo=timezone.utc),
                    }),
                )

        register_scanner("debian", DebianScanner)

        scanner = new_scanner("debian", MemoryAdvisoryStore())
        assert isinstance(scanner, DebianScanner)
        assert "debian" in supported_families()
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert scanner.is_supported_version("debian", "10", now=now) is True
