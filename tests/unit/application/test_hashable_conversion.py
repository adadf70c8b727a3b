"""Unit tests for payload to hashable conversion."""

import pytest

from evote_verifier.application.dtos.payloads import Signature
from evote_verifier.application.services.hashable_conversion import (
    ciphertext_hashable,
    encryption_group_hashable,
    hashable_of,
    signed_content,
)
from evote_verifier.domain.models.certificate_authority import CertificateAuthority
from evote_verifier.domain.models.hashable import (
    HashableInteger,
    HashableSequence,
    HashableString,
)
from evote_verifier.domain.services.recursive_hash import recursive_hash
from tests.helpers.dataset import (
    BALLOT_BOX_ID,
    ELECTION_EVENT_ID,
    VCS_ID,
    DatasetBuilder,
)


class TestBuildingBlocks:
    """Tests for shared conversions."""

    def test_encryption_group_order(self, dataset_builder: DatasetBuilder) -> None:
        """A group converts to (p, q, g)."""
        group = dataset_builder.group

        assert encryption_group_hashable(group) == HashableSequence.of(
            HashableInteger(group.p), HashableInteger(group.q), HashableInteger(group.g)
        )

    def test_ciphertext_is_gamma_then_phis(self, dataset_builder: DatasetBuilder) -> None:
        """A ciphertext converts to (gamma, phi_0, ...) flattened."""
        ciphertext = dataset_builder.ciphertext(5)

        converted = ciphertext_hashable(ciphertext)

        assert converted.elements[0] == HashableInteger(ciphertext.gamma)
        assert converted.elements[1:] == tuple(HashableInteger(phi) for phi in ciphertext.phis)


class TestSignedContent:
    """Tests for the signed content of each payload type."""

    def test_signature_is_excluded(self, dataset_builder: DatasetBuilder) -> None:
        """Adding a signature does not change the hashable form."""
        payload = dataset_builder.election_event_context_payload()
        signed = payload.model_copy(
            update={"signature": Signature(signature_contents=b"\x01" * 256)}
        )

        assert hashable_of(payload) == hashable_of(signed)
        assert recursive_hash(hashable_of(payload)) == recursive_hash(hashable_of(signed))

    def test_content_changes_with_fields(self, dataset_builder: DatasetBuilder) -> None:
        """Any field change changes the hashable form."""
        payload = dataset_builder.election_event_context_payload()
        changed = payload.model_copy(update={"seed": "other-seed"})

        assert hashable_of(payload) != hashable_of(changed)

    def test_election_event_context(self, dataset_builder: DatasetBuilder) -> None:
        """Signed by the setup component with the election event context label."""
        content = signed_content(dataset_builder.election_event_context_payload())

        assert content.authority is CertificateAuthority.SDM_CONFIG
        assert content.context == HashableSequence.of(
            HashableString("election event context"), HashableString(ELECTION_EVENT_ID)
        )

    def test_control_component_public_keys_authority(
        self, dataset_builder: DatasetBuilder
    ) -> None:
        """Each control component signs its own keys."""
        content = signed_content(dataset_builder.control_component_public_keys_payload(3))

        assert content.authority is CertificateAuthority.CONTROL_COMPONENT_3
        assert content.context == HashableSequence.of(
            HashableString("OnlineCC keys"),
            HashableInteger(3),
            HashableString(ELECTION_EVENT_ID),
        )

    def test_setup_component_tally_data(self, dataset_builder: DatasetBuilder) -> None:
        """Tally data is bound to its verification card set."""
        content = signed_content(dataset_builder.setup_component_tally_data_payload())

        assert content.context == HashableSequence.of(
            HashableString("tally data"),
            HashableString(ELECTION_EVENT_ID),
            HashableString(VCS_ID),
        )

    def test_code_shares_inner_payload(self, dataset_builder: DatasetBuilder) -> None:
        """Each inner code shares entry is signed by its node."""
        inner = list(dataset_builder.control_component_code_shares_payload())[1]

        content = signed_content(inner)

        assert content.authority is CertificateAuthority.CONTROL_COMPONENT_2
        assert content.context.elements[:2] == (
            HashableString("encrypted code shares"),
            HashableInteger(2),
        )

    def test_tally_component_payloads(self, dataset_builder: DatasetBuilder) -> None:
        """The offline tally component signs shuffle and votes payloads."""
        shuffle = signed_content(dataset_builder.tally_component_shuffle_payload())
        votes = signed_content(dataset_builder.tally_component_votes_payload())

        assert shuffle.authority is CertificateAuthority.SDM_TALLY
        assert votes.authority is CertificateAuthority.SDM_TALLY
        assert shuffle.context == HashableSequence.of(
            HashableString("shuffle"),
            HashableString("offline"),
            HashableString(ELECTION_EVENT_ID),
            HashableString(BALLOT_BOX_ID),
        )

    def test_invalid_node_id_raises(self, dataset_builder: DatasetBuilder) -> None:
        """A node id outside 1..4 has no authority."""
        payload = dataset_builder.control_component_ballot_box_payload(1).model_copy(
            update={"node_id": 7}
        )

        with pytest.raises(ValueError):
            signed_content(payload)

    def test_unknown_type_raises(self) -> None:
        """Objects without a registered conversion are rejected."""
        with pytest.raises(TypeError):
            signed_content(object())
