"""Unit tests for loading the verification metadata manifest."""

import json
from pathlib import Path

import pytest

from evote_verifier.application.services.metadata_loader import (
    load_metadata,
    parse_metadata,
)
from evote_verifier.application.verifications.table import verification_table
from evote_verifier.domain.errors import MetadataLoadError
from evote_verifier.domain.models.verification_meta_data import (
    VerificationCategory,
    VerificationPeriod,
)

RECORD = {
    "id": "01.01",
    "name": "VerifySetupCompleteness",
    "algorithm": "3.1",
    "description": "All setup files are present",
    "period": "setup",
    "category": "completeness",
}


class TestPackagedManifest:
    """Tests for the manifest shipped with the package."""

    def test_holds_all_verifications(self) -> None:
        """18 setup and 13 tally verifications."""
        metadata = load_metadata()

        assert len(metadata) == 31
        assert len(metadata.for_period(VerificationPeriod.SETUP)) == 18
        assert len(metadata.for_period(VerificationPeriod.TALLY)) == 13

    @pytest.mark.parametrize("period", list(VerificationPeriod))
    def test_matches_check_table(self, period: VerificationPeriod) -> None:
        """Every manifest record has an implementation with the same name."""
        metadata = load_metadata()
        table = {descriptor.id: descriptor for descriptor in verification_table(period)}

        for meta_data in metadata.for_period(period):
            assert meta_data.id in table
            assert table[meta_data.id].name == meta_data.name
            assert table[meta_data.id].category == meta_data.category

    def test_record_fields(self) -> None:
        """Records carry period, category and algorithm reference."""
        meta_data = load_metadata().get("05.01")

        assert meta_data is not None
        assert meta_data.period is VerificationPeriod.SETUP
        assert meta_data.category is VerificationCategory.EVIDENCE
        assert meta_data.algorithm


class TestParseMetadata:
    """Tests for parsing manifest text."""

    def test_parse_single_record(self) -> None:
        """A valid record parses into metadata."""
        metadata = parse_metadata(json.dumps([RECORD]))

        assert metadata.ids() == ["01.01"]

    def test_unknown_period_raises(self) -> None:
        """Periods are a closed set."""
        with pytest.raises(MetadataLoadError):
            parse_metadata(json.dumps([{**RECORD, "period": "voting"}]))

    def test_extra_field_raises(self) -> None:
        """Unknown fields are rejected."""
        with pytest.raises(MetadataLoadError):
            parse_metadata(json.dumps([{**RECORD, "owner": "someone"}]))

    def test_duplicate_id_raises(self) -> None:
        """Ids are unique."""
        with pytest.raises(MetadataLoadError) as exc_info:
            parse_metadata(json.dumps([RECORD, RECORD]))

        assert "01.01" in str(exc_info.value)

    def test_malformed_id_raises(self) -> None:
        """Ids look like NN.NN."""
        with pytest.raises(MetadataLoadError):
            parse_metadata(json.dumps([{**RECORD, "id": "1.1"}]))

    def test_not_json_raises(self) -> None:
        """Text that is not JSON is rejected."""
        with pytest.raises(MetadataLoadError):
            parse_metadata("[{")


class TestLoadFromFile:
    """Tests for loading a manifest file."""

    def test_load_from_path(self, tmp_path: Path) -> None:
        """An explicit path overrides the packaged manifest."""
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps([RECORD]), encoding="utf-8")

        assert len(load_metadata(path)) == 1

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """A missing manifest is a MetadataLoadError naming the file."""
        path = tmp_path / "absent.json"

        with pytest.raises(MetadataLoadError) as exc_info:
            load_metadata(path)

        assert str(path) in str(exc_info.value)
