"""Unit tests for the evote-verify command line."""

import json
from pathlib import Path

import pytest
from structlog.testing import capture_logs
from typer.testing import CliRunner

from evote_verifier import cli
from evote_verifier.cli import app
from tests.helpers.dataset import GROUP_BIT_LENGTH

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Small groups, no configured trust directory, and no global logging setup."""
    for key in (
        "VERIFIER_DIRECT_TRUST_DIR",
        "VERIFIER_ENVIRONMENT",
        "VERIFIER_PARALLEL_WORKERS",
        "VERIFIER_CHECK_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("VERIFIER_GROUP_BIT_LENGTH", str(GROUP_BIT_LENGTH))
    monkeypatch.setattr(cli, "configure_structlog", lambda environment, level: None)


def _invoke(*args: str):
    with capture_logs() as entries:
        result = runner.invoke(app, list(args))
    return result, entries


class TestVersionAndList:
    """Tests for --version and the list command."""

    def test_version(self, project_version: str) -> None:
        result, _ = _invoke("--version")

        assert result.exit_code == 0
        assert f"evote-verify version {project_version}" in result.stdout

    def test_list_json(self) -> None:
        """Every manifest entry is listed."""
        result, _ = _invoke("list", "--format", "json")

        assert result.exit_code == 0
        entries = json.loads(result.stdout)
        assert len(entries) == 31
        assert entries[0]["id"] == "01.01"

    def test_list_one_period(self) -> None:
        result, _ = _invoke("list", "--period", "tally", "--format", "json")

        entries = json.loads(result.stdout)
        assert len(entries) == 13
        assert {e["period"] for e in entries} == {"tally"}

    def test_list_text(self) -> None:
        result, _ = _invoke("list")

        assert result.exit_code == 0
        assert "05.01" in result.stdout


class TestSetupCommand:
    """Tests for the setup command."""

    def test_without_proof_verifier_is_inconclusive(
        self, setup_dataset: Path, direct_trust_dir: Path
    ) -> None:
        """Schnorr proofs cannot be checked from the command line alone."""
        result, _ = _invoke(
            "setup", str(setup_dataset), "--direct-trust", str(direct_trust_dir), "-o", "json"
        )

        assert result.exit_code == 2
        document = json.loads(result.stdout)
        assert document["ok"] is False
        assert document["period"] == "setup"
        errored = [v["id"] for v in document["verifications"] if v["errors"]]
        assert errored == ["05.04"]

    def test_clean_run_with_exclusion(self, setup_dataset: Path, direct_trust_dir: Path) -> None:
        result, _ = _invoke(
            "setup", str(setup_dataset), "--direct-trust", str(direct_trust_dir), "-e", "05.04"
        )

        assert result.exit_code == 0
        assert "All 17 verifications passed" in result.stdout

    def test_failures_exit_with_one(
        self, setup_dataset: Path, direct_trust_dir: Path
    ) -> None:
        """A deleted node file is a protocol violation."""
        (setup_dataset / "context" / "controlComponentPublicKeysPayload.4.json").unlink()

        result, _ = _invoke(
            "setup", str(setup_dataset), "--direct-trust", str(direct_trust_dir), "-e", "05.04"
        )

        assert result.exit_code == 1
        assert "FAILURE" in result.stdout

    def test_missing_trust_directory_is_logged(self, setup_dataset: Path) -> None:
        """Without a keystore the run goes on and the authenticity checks error."""
        result, entries = _invoke("setup", str(setup_dataset), "-e", "05.04", "-o", "json")

        assert result.exit_code == 2
        warnings = [e for e in entries if e["event"] == "trust_store_unavailable"]
        assert warnings[0]["log_level"] == "warning"

    def test_require_trust_without_directory(self, setup_dataset: Path) -> None:
        result, _ = _invoke("setup", str(setup_dataset), "--require-trust")

        assert result.exit_code == 3
        assert "direct-trust" in result.stdout

    def test_missing_dataset_is_fatal(self, tmp_path: Path, direct_trust_dir: Path) -> None:
        result, entries = _invoke(
            "setup", str(tmp_path / "absent"), "--direct-trust", str(direct_trust_dir)
        )

        assert result.exit_code == 3
        assert any(e["event"] == "run_aborted" for e in entries)

    def test_unknown_exclusion_is_fatal(
        self, setup_dataset: Path, direct_trust_dir: Path
    ) -> None:
        result, _ = _invoke(
            "setup", str(setup_dataset), "--direct-trust", str(direct_trust_dir), "-e", "42.42"
        )

        assert result.exit_code == 3

    def test_invalid_parallel_option_is_fatal(self, setup_dataset: Path) -> None:
        result, _ = _invoke("setup", str(setup_dataset), "--parallel", "-1")

        assert result.exit_code == 3


class TestTallyCommand:
    """Tests for the tally command."""

    def test_clean_run(self, tally_dataset: Path, direct_trust_dir: Path) -> None:
        """With the mix-net checks excluded the tally run passes."""
        result, _ = _invoke(
            "tally",
            str(tally_dataset),
            "--direct-trust",
            str(direct_trust_dir),
            "-e",
            "10.01",
            "-e",
            "10.02",
            "-o",
            "json",
        )

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document["ok"] is True
        assert document["skipped"] == ["10.01", "10.02"]

    def test_parallel_run(self, tally_dataset: Path, direct_trust_dir: Path) -> None:
        result, _ = _invoke(
            "tally",
            str(tally_dataset),
            "--direct-trust",
            str(direct_trust_dir),
            "--parallel",
            "4",
            "--timeout",
            "60",
            "-e",
            "10.01",
            "-e",
            "10.02",
        )

        assert result.exit_code == 0
