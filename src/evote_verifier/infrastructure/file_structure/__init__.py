"""Dataset file structure: directories, payload files, numbered file groups."""

from evote_verifier.infrastructure.file_structure.directories import (
    BallotBoxDirectory,
    ContextDirectory,
    ContextVCSDirectory,
    SetupDirectory,
    SetupVCSDirectory,
    TallyDirectory,
    VerificationDirectory,
)
from evote_verifier.infrastructure.file_structure.payload_file import (
    FileGroup,
    FileGroupEntry,
    PayloadFile,
)

__all__ = [
    "BallotBoxDirectory",
    "ContextDirectory",
    "ContextVCSDirectory",
    "FileGroup",
    "FileGroupEntry",
    "PayloadFile",
    "SetupDirectory",
    "SetupVCSDirectory",
    "TallyDirectory",
    "VerificationDirectory",
]
