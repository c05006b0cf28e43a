"""Application ports (abstract interfaces) for causality-ssz."""

from causality_ssz.application.ports.node_hasher import NodeHasherProtocol

__all__: list[str] = ["NodeHasherProtocol"]
