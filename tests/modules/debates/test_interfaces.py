"""Tests for debates module interfaces."""

from unittest.mock import MagicMock

from modules.debates.interfaces import IDebateRepository, IDebateService
from modules.debates.repository import DebateRepository

from tests.conftest import (
    FakeProvider,
    InMemoryDebateRepository,
    InMemoryProfileRepository,
    build_debate_service,
)


class TestIDebateService:
    def test_protocol_is_runtime_checkable(self):
        """Should be able to check if instance implements protocol."""
        service = build_debate_service(
            InMemoryDebateRepository(), FakeProvider(), InMemoryProfileRepository()
        )
        assert isinstance(service, IDebateService)

    def test_interface_methods(self):
        for method in ["create_debate", "take_turn"]:
            assert hasattr(IDebateService, method)


class TestIDebateRepository:
    def test_supabase_repository_implements_protocol(self):
        repository = DebateRepository(MagicMock())
        assert isinstance(repository, IDebateRepository)

    def test_in_memory_repository_implements_protocol(self):
        assert isinstance(InMemoryDebateRepository(), IDebateRepository)
