"""Certificate authorities bound to protocol roles.

Each signed payload type is verified against the certificate of exactly one
authority. Control components are numbered 1..4 and map bijectively to the
node ids found in control component payloads.
"""

from __future__ import annotations

from enum import Enum

CONTROL_COMPONENT_NODE_IDS: tuple[int, ...] = (1, 2, 3, 4)


class CertificateAuthority(Enum):
    """Closed enumeration of signing authorities.

    The value is the name under which the certificate is stored in the
    direct-trust keystore.
    """

    CANTON = "canton"
    SDM_CONFIG = "sdm_config"
    SDM_TALLY = "sdm_tally"
    VOTING_SERVER = "voting_server"
    CONTROL_COMPONENT_1 = "control_component_1"
    CONTROL_COMPONENT_2 = "control_component_2"
    CONTROL_COMPONENT_3 = "control_component_3"
    CONTROL_COMPONENT_4 = "control_component_4"

    @property
    def keystore_name(self) -> str:
        """Name of the certificate entry in the keystore."""
        return self.value

    @property
    def node_id(self) -> int | None:
        """Control component node id, or None for other authorities."""
        for node_id, authority in _NODE_AUTHORITIES.items():
            if authority is self:
                return node_id
        return None

    @classmethod
    def from_node_id(cls, node_id: int) -> CertificateAuthority:
        """Return the control component authority for a node id.

        Args:
            node_id: Control component node id (1..4).

        Raises:
            ValueError: If node_id is not a control component node id.
        """
        try:
            return _NODE_AUTHORITIES[node_id]
        except KeyError:
            raise ValueError(
                f"Node id {node_id} is not a control component node id "
                f"{CONTROL_COMPONENT_NODE_IDS}"
            ) from None

    @classmethod
    def from_keystore_name(cls, name: str) -> CertificateAuthority:
        """Return the authority stored under a keystore name."""
        return cls(name)


_NODE_AUTHORITIES: dict[int, CertificateAuthority] = {
    1: CertificateAuthority.CONTROL_COMPONENT_1,
    2: CertificateAuthority.CONTROL_COMPONENT_2,
    3: CertificateAuthority.CONTROL_COMPONENT_3,
    4: CertificateAuthority.CONTROL_COMPONENT_4,
}
