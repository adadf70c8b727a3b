"""Dataset directory tree.

    <root>/context/electionEventContextPayload.json
    <root>/context/setupComponentPublicKeysPayload.json
    <root>/context/controlComponentPublicKeysPayload.{n}.json
    <root>/context/verificationCardSets/<vcs>/setupComponentTallyDataPayload.json
    <root>/setup/verificationCardSets/<vcs>/setupComponentVerificationDataPayload.{n}.json
    <root>/setup/verificationCardSets/<vcs>/controlComponentCodeSharesPayload.{n}.json
    <root>/tally/ballotBoxes/<bb>/tallyComponentVotesPayload.json
    <root>/tally/ballotBoxes/<bb>/tallyComponentShufflePayload.json
    <root>/tally/ballotBoxes/<bb>/controlComponentBallotBoxPayload_{n}.json
    <root>/tally/ballotBoxes/<bb>/controlComponentShufflePayload_{n}.json

The tree is read-only for the whole run and is shared by all verifications.
"""

from __future__ import annotations

from pathlib import Path

from evote_verifier.application.dtos.payloads import (
    ControlComponentBallotBoxPayload,
    ControlComponentCodeSharesPayload,
    ControlComponentPublicKeysPayload,
    ControlComponentShufflePayload,
    ElectionEventContextPayload,
    SetupComponentPublicKeysPayload,
    SetupComponentTallyDataPayload,
    SetupComponentVerificationDataPayload,
    TallyComponentShufflePayload,
    TallyComponentVotesPayload,
)
from evote_verifier.domain.errors.dataset import WrongPeriodError
from evote_verifier.domain.models.verification_meta_data import VerificationPeriod
from evote_verifier.infrastructure.file_structure.payload_file import FileGroup, PayloadFile

CONTEXT_DIR_NAME = "context"
SETUP_DIR_NAME = "setup"
TALLY_DIR_NAME = "tally"
VCS_DIR_NAME = "verificationCardSets"
BB_DIR_NAME = "ballotBoxes"

ELECTION_EVENT_CONTEXT_PAYLOAD = "electionEventContextPayload.json"
SETUP_COMPONENT_PUBLIC_KEYS_PAYLOAD = "setupComponentPublicKeysPayload.json"
SETUP_COMPONENT_TALLY_DATA_PAYLOAD = "setupComponentTallyDataPayload.json"
TALLY_COMPONENT_VOTES_PAYLOAD = "tallyComponentVotesPayload.json"
TALLY_COMPONENT_SHUFFLE_PAYLOAD = "tallyComponentShufflePayload.json"


def _subdirectories(location: Path) -> list[Path]:
    if not location.is_dir():
        return []
    return sorted(entry for entry in location.iterdir() if entry.is_dir())


class ContextVCSDirectory:
    """Context data of one verification card set."""

    def __init__(self, location: Path) -> None:
        self.location = location
        self.setup_component_tally_data_payload_file = PayloadFile(
            location / SETUP_COMPONENT_TALLY_DATA_PAYLOAD, SetupComponentTallyDataPayload
        )

    @property
    def name(self) -> str:
        return self.location.name


class ContextDirectory:
    """The context directory, shared by setup and tally datasets."""

    def __init__(self, location: Path) -> None:
        self.location = location
        self.election_event_context_payload_file = PayloadFile(
            location / ELECTION_EVENT_CONTEXT_PAYLOAD, ElectionEventContextPayload
        )
        self.setup_component_public_keys_payload_file = PayloadFile(
            location / SETUP_COMPONENT_PUBLIC_KEYS_PAYLOAD, SetupComponentPublicKeysPayload
        )
        self.control_component_public_keys_payload_group = FileGroup(
            location, "controlComponentPublicKeysPayload.", ".json", ControlComponentPublicKeysPayload
        )

    def vcs_directories(self) -> list[ContextVCSDirectory]:
        return [ContextVCSDirectory(p) for p in _subdirectories(self.location / VCS_DIR_NAME)]


class SetupVCSDirectory:
    """Setup data of one verification card set."""

    def __init__(self, location: Path) -> None:
        self.location = location
        self.setup_component_verification_data_payload_group = FileGroup(
            location,
            "setupComponentVerificationDataPayload.",
            ".json",
            SetupComponentVerificationDataPayload,
        )
        self.control_component_code_shares_payload_group = FileGroup(
            location, "controlComponentCodeSharesPayload.", ".json", ControlComponentCodeSharesPayload
        )

    @property
    def name(self) -> str:
        return self.location.name


class SetupDirectory:
    def __init__(self, location: Path) -> None:
        self.location = location

    def vcs_directories(self) -> list[SetupVCSDirectory]:
        return [SetupVCSDirectory(p) for p in _subdirectories(self.location / VCS_DIR_NAME)]


class BallotBoxDirectory:
    """Tally data of one ballot box."""

    def __init__(self, location: Path) -> None:
        self.location = location
        self.tally_component_votes_payload_file = PayloadFile(
            location / TALLY_COMPONENT_VOTES_PAYLOAD, TallyComponentVotesPayload
        )
        self.tally_component_shuffle_payload_file = PayloadFile(
            location / TALLY_COMPONENT_SHUFFLE_PAYLOAD, TallyComponentShufflePayload
        )
        self.control_component_ballot_box_payload_group = FileGroup(
            location, "controlComponentBallotBoxPayload_", ".json", ControlComponentBallotBoxPayload
        )
        self.control_component_shuffle_payload_group = FileGroup(
            location, "controlComponentShufflePayload_", ".json", ControlComponentShufflePayload
        )

    @property
    def name(self) -> str:
        return self.location.name


class TallyDirectory:
    def __init__(self, location: Path) -> None:
        self.location = location

    def bb_directories(self) -> list[BallotBoxDirectory]:
        return [BallotBoxDirectory(p) for p in _subdirectories(self.location / BB_DIR_NAME)]


class VerificationDirectory:
    """Root of a setup or tally dataset.

    Both periods share the context directory. The setup directory exists only
    on setup datasets and the tally directory only on tally datasets.
    """

    def __init__(self, root: Path, period: VerificationPeriod) -> None:
        self.root = Path(root)
        self.period = period
        self.context = ContextDirectory(self.root / CONTEXT_DIR_NAME)
        self._setup = SetupDirectory(self.root / SETUP_DIR_NAME)
        self._tally = TallyDirectory(self.root / TALLY_DIR_NAME)

    def __repr__(self) -> str:
        return f"VerificationDirectory({self.root}, {self.period.value})"

    @property
    def setup(self) -> SetupDirectory:
        """The setup directory.

        Raises:
            WrongPeriodError: On a tally dataset.
        """
        if self.period is not VerificationPeriod.SETUP:
            raise WrongPeriodError(VerificationPeriod.SETUP.value, self.period.value)
        return self._setup

    @property
    def tally(self) -> TallyDirectory:
        """The tally directory.

        Raises:
            WrongPeriodError: On a setup dataset.
        """
        if self.period is not VerificationPeriod.TALLY:
            raise WrongPeriodError(VerificationPeriod.TALLY.value, self.period.value)
        return self._tally

    @property
    def period_location(self) -> Path:
        """Location of the period directory (setup/ or tally/)."""
        name = SETUP_DIR_NAME if self.period is VerificationPeriod.SETUP else TALLY_DIR_NAME
        return self.root / name
