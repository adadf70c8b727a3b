"""Loading of the verification metadata manifest.

The manifest is a JSON list of records:

    {"id": "03.09", "name": "VerifyElectionEventIdConsistency",
     "algorithm": "3.9", "description": "...",
     "period": "setup", "category": "consistency"}

The packaged manifest lives in evote_verifier/resources/verification_list.json.
A missing or malformed manifest is fatal.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from evote_verifier.domain.errors.runner import MetadataLoadError
from evote_verifier.domain.models.verification_meta_data import (
    VerificationCategory,
    VerificationMetaData,
    VerificationMetaDataList,
    VerificationPeriod,
)

logger = structlog.get_logger()

RESOURCE_PACKAGE = "evote_verifier.resources"
MANIFEST_NAME = "verification_list.json"


class MetaDataRecord(BaseModel):
    """One manifest record as found in the JSON file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    algorithm: str
    description: str
    period: VerificationPeriod
    category: VerificationCategory

    def to_domain(self) -> VerificationMetaData:
        return VerificationMetaData(
            id=self.id,
            name=self.name,
            algorithm=self.algorithm,
            description=self.description,
            period=self.period,
            category=self.category,
        )


_MANIFEST = TypeAdapter(list[MetaDataRecord])


def parse_metadata(text: str, source: str = "<string>") -> VerificationMetaDataList:
    """Parse manifest JSON text.

    Raises:
        MetadataLoadError: If the text is not a valid manifest.
    """
    try:
        records = _MANIFEST.validate_json(text)
        return VerificationMetaDataList(record.to_domain() for record in records)
    except ValidationError as exc:
        raise MetadataLoadError(source, f"{exc.error_count()} validation error(s)") from exc
    except ValueError as exc:
        raise MetadataLoadError(source, str(exc)) from exc


def load_metadata(path: Path | None = None) -> VerificationMetaDataList:
    """Load the manifest from a file, or the packaged manifest by default.

    Raises:
        MetadataLoadError: If the manifest is missing or malformed.
    """
    if path is None:
        source = f"{RESOURCE_PACKAGE}/{MANIFEST_NAME}"
        try:
            text = resources.files(RESOURCE_PACKAGE).joinpath(MANIFEST_NAME).read_text(encoding="utf-8")
        except (OSError, ModuleNotFoundError) as exc:
            raise MetadataLoadError(source, str(exc)) from exc
    else:
        source = str(path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise MetadataLoadError(source, exc.strerror or str(exc)) from exc

    metadata = parse_metadata(text, source)
    logger.debug("verification_metadata_loaded", source=source, count=len(metadata))
    return metadata
