"""Tests for scan orchestration and the command-line entry point."""

import json
from datetime import datetime, timezone

import pytest
import structlog

from ospkgscan import main as main_module
from ospkgscan.advisory.store import SQLiteAdvisoryDB
from ospkgscan.config import Config
from ospkgscan.errors import UnsupportedFamilyError
from ospkgscan.main import ScanOrchestrator, load_inventory, main
from ospkgscan.models import Advisory, Package


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "advisories.db"
    db = SQLiteAdvisoryDB(str(path))
    db.put_advisories("alpine", "3.10", "openssl", [
        Advisory(vulnerability_id="CVE-2019-1549", fixed_version="1.1.1d-r0"),
        Advisory(vulnerability_id="CVE-2019-1563", fixed_version="1.1.1a-r0"),
    ])
    db.put_advisory("alpine", "3.10", "busybox", Advisory(vulnerability_id="CVE-2019-5747"))
    db.close()
    return path


@pytest.fixture
def orchestrator(db_path):
    orch = ScanOrchestrator(Config(advisory_db_path=str(db_path)), structlog.get_logger("test"))
    yield orch
    orch.cleanup()


PACKAGES = [
    Package(name="openssl", version="1.1.1c", release="r0"),
    Package(name="busybox", version="1.30.1", release="r2"),
    Package(name="musl", version="1.1.22", release="r3"),
]


class TestScanOrchestrator:
    """Tests for ScanOrchestrator.scan."""

    def test_scan(self, orchestrator):
        now = datetime(2020, 1, 1, tzinfo=timezone.utc)

        result = orchestrator.scan("alpine", "3.10.2", PACKAGES, now=now)

        assert result.family == "alpine"
        assert result.release == "3.10.2"
        assert result.supported is True
        assert sorted(v.vulnerability_id for v in result.vulnerabilities) == [
            "CVE-2019-1549", "CVE-2019-5747"
        ]

    def test_unsupported_release(self, orchestrator):
        now = datetime(2022, 1, 1, tzinfo=timezone.utc)
        result = orchestrator.scan("alpine", "3.10.2", PACKAGES, now=now)
        assert result.supported is False

    def test_eol_overrides_applied(self, db_path):
        eol = datetime(2030, 1, 1, tzinfo=timezone.utc)
        config = Config(advisory_db_path=str(db_path), eol_overrides={"alpine": {"3.10": eol}})
        orch = ScanOrchestrator(config, structlog.get_logger("test"))
        try:
            result = orch.scan("alpine", "3.10.2", [], now=datetime(2025, 1, 1, tzinfo=timezone.utc))
        finally:
            orch.cleanup()

        assert result.supported is True
        assert result.vulnerabilities == []

    def test_families_isolated(self, orchestrator):
        """Test Alpine advisories never match Ubuntu packages."""
        result = orchestrator.scan("ubuntu", "3.10", PACKAGES)
        assert result.vulnerabilities == []

    def test_unknown_family(self, orchestrator):
        with pytest.raises(UnsupportedFamilyError):
            orchestrator.scan("haiku", "r1", PACKAGES)


class TestLoadInventory:
    """Tests for load_inventory."""

    def test_valid(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps({
            "family": "alpine",
            "release": "3.10.2",
            "packages": [{"name": "openssl", "version": "1.1.1c", "release": "r0"}],
        }))

        family, release, packages = load_inventory(str(path))

        assert family == "alpine"
        assert release == "3.10.2"
        assert packages == [Package(name="openssl", version="1.1.1c", release="r0")]

    def test_missing_family(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps({"release": "3.10"}))
        with pytest.raises(ValueError):
            load_inventory(str(path))

    def test_invalid_package(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps({"family": "alpine", "release": "3.10", "packages": [{"name": "x"}]}))
        with pytest.raises(ValueError):
            load_inventory(str(path))

    def test_non_string_release(self, tmp_path):
        """Test a numeric release is rejected instead of reaching the normalizer."""
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps({"family": "ubuntu", "release": 3.10, "packages": []}))
        with pytest.raises(ValueError, match="must be strings"):
            load_inventory(str(path))

    def test_non_string_family(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps({"family": ["alpine"], "release": "3.10", "packages": []}))
        with pytest.raises(ValueError, match="must be strings"):
            load_inventory(str(path))

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps(["alpine", "3.10"]))
        with pytest.raises(ValueError):
            load_inventory(str(path))


class TestMain:
    """Tests for the main entry point."""

    @pytest.fixture
    def env(self, monkeypatch, tmp_path, db_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ADVISORY_DB_PATH", str(db_path))
        monkeypatch.setenv("EOL_OVERRIDES_PATH", str(tmp_path / "none.yaml"))
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        monkeypatch.setenv("LOG_FILE", "")
        monkeypatch.setattr(main_module, "configure_logging", lambda config: structlog.get_logger("test"))
        return tmp_path

    def test_usage(self, capsys):
        assert main([]) == 2
        assert "Usage" in capsys.readouterr().err

    def test_scan_prints_json(self, env, capsys):
        inventory = env / "inventory.json"
        inventory.write_text(json.dumps({
            "family": "alpine",
            "release": "3.10.2",
            "packages": [p.model_dump() for p in PACKAGES],
        }))
        # Drop anything the fixtures wrote while seeding the database
        capsys.readouterr()

        assert main([str(inventory)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["family"] == "alpine"
        assert len(output["vulnerabilities"]) == 2

    def test_scan_failure(self, env):
        inventory = env / "inventory.json"
        inventory.write_text(json.dumps({"family": "haiku", "release": "r1", "packages": []}))

        assert main([str(inventory)]) == 1

    def test_numeric_release_fails_cleanly(self, env):
        """Test a malformed inventory exits with status 1 rather than raising."""
        inventory = env / "inventory.json"
        inventory.write_text(json.dumps({"family": "ubuntu", "release": 3.10, "packages": []}))

        assert main([str(inventory)]) == 1

    def test_invalid_config(self, env, monkeypatch, capsys):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert main(["whatever.json"]) == 1
        assert "LOG_LEVEL" in capsys.readouterr().err
