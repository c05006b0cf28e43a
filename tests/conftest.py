"""
Pytest configuration and shared fixtures for causality-ssz tests.

Testing Standards:
- Unit tests go in tests/unit/, mirroring the package layout
- Property tests use hypothesis
- Services are built per test; none of them hold mutable state
"""

import pytest
import structlog

from causality_ssz.application.services.codec_service import SszCodecService
from causality_ssz.application.services.identity_service import IdentityService
from causality_ssz.application.services.merkle_hasher_service import (
    MerkleHasherService,
)
from causality_ssz.config.codec_config import TEST_CODEC_CONFIG
from causality_ssz.domain.models.content_id import CONTENT_ID_SCHEMA, DomainId
from causality_ssz.domain.models.schema import IntSchema, RecordSchema, StringSchema
from causality_ssz.domain.models.value import Int, Record, String


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from causality_ssz import __version__

    return __version__


@pytest.fixture
def codec() -> SszCodecService:
    return SszCodecService()


@pytest.fixture
def shallow_codec() -> SszCodecService:
    """Codec with TEST_CODEC_CONFIG's shallow depth limit."""
    return SszCodecService(TEST_CODEC_CONFIG)


@pytest.fixture
def hasher() -> MerkleHasherService:
    return MerkleHasherService()


@pytest.fixture
def identity() -> IdentityService:
    return IdentityService()


@pytest.fixture
def token_schema() -> RecordSchema:
    """Schema of the token resource record used across tests."""
    return RecordSchema.of(
        type=StringSchema(),
        domain_id=CONTENT_ID_SCHEMA,
        quantity=IntSchema(),
    )


@pytest.fixture
def token_record() -> Record:
    """A token resource: {type: "token", domain_id: <32 zero bytes>, quantity: 100}."""
    return Record.of(
        type=String("token"),
        domain_id=DomainId.null().to_value(),
        quantity=Int(100),
    )
