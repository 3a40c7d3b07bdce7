"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
JWT helpers, in-memory repositories and a scripted model provider.
"""

import asyncio
import threading
import uuid
import pytest
from datetime import datetime, timezone, timedelta
from typing import AsyncIterator, Optional
import jwt  # PyJWT

from api.dependencies import reset_container
from modules.billing.entitlements import EntitlementResolver
from modules.billing.models import Plan, Profile
from modules.budget.calculator import TokenBudgetCalculator
from modules.debates.exceptions import DebateNotFoundError
from modules.debates.models import Debate, NewDebate, NewTurn, Speaker, Turn
from modules.debates.service import DebateService
from providers.base import ChatMessage, LLMProvider
from providers.factory import reset_model_provider
from shared.config import Settings


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def make_debate(
    debate_id: str = "debate-123",
    model: str = "gpt-4o-mini",
    user_id: Optional[str] = "test-user-123",
) -> Debate:
    """Helper to create a debate."""
    return Debate(
        id=debate_id,
        topic="Pineapple belongs on pizza",
        short_topic="Pineapple Pizza",
        persona="Socrates",
        model=model,
        user_id=user_id,
        created_at=datetime.now(timezone.utc),
    )


def make_turns(debate_id: str, *speakers: Speaker) -> list[Turn]:
    """Helper to create stored turns with contiguous order numbers."""
    return [
        Turn(
            id=f"turn-{i}",
            debate_id=debate_id,
            speaker=speaker,
            content=f"{speaker.value} says {i}",
            order_number=i,
            model="gpt-4o-mini",
            user_id="test-user-123",
        )
        for i, speaker in enumerate(speakers, start=1)
    ]


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment and any .env file."""
    values = {
        "default_model": "gpt-4o-mini",
        "pro_trial_limit": 5,
        "min_completion_tokens": 50,
        "provider_timeout_seconds": 2.0,
        "persist_partial_turns": True,
        "allow_validation_bypass": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def fixed_counter(tokens: int = 100):
    """Token counter that reports the same prompt size for every call."""
    def count(messages: list[ChatMessage], model: str) -> int:
        return tokens
    return count


# =============================================================================
# In-memory fakes
# =============================================================================


class InMemoryDebateRepository:
    """IDebateRepository backed by dicts, with a unique (debate, order) check."""

    def __init__(
        self,
        debates: Optional[list[Debate]] = None,
        turns: Optional[list[Turn]] = None,
    ):
        self.debates = {debate.id: debate for debate in debates or []}
        self.turns: list[Turn] = list(turns or [])
        self.fail_turn_inserts = False
        self._lock = threading.Lock()

    def get_debate(self, debate_id: str) -> Debate:
        if debate_id not in self.debates:
            raise DebateNotFoundError(debate_id)
        return self.debates[debate_id]

    def get_turns(self, debate_id: str) -> list[Turn]:
        with self._lock:
            turns = [turn for turn in self.turns if turn.debate_id == debate_id]
        return sorted(turns, key=lambda turn: turn.order_number)

    def insert_turn(self, turn: NewTurn) -> Turn:
        if self.fail_turn_inserts:
            raise RuntimeError("database unavailable")
        with self._lock:
            for existing in self.turns:
                if (existing.debate_id, existing.order_number) == (turn.debate_id, turn.order_number):
                    raise ValueError(f"duplicate order_number {turn.order_number}")
            stored = Turn(id=str(uuid.uuid4()), **turn.model_dump())
            self.turns.append(stored)
        return stored

    def create_debate(self, debate: NewDebate) -> Debate:
        stored = Debate(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **debate.model_dump(),
        )
        self.debates[stored.id] = stored
        return stored


class InMemoryProfileRepository:
    """IProfileRepository with an atomic compare-and-increment."""

    def __init__(self, *profiles: Profile):
        self.profiles = {profile.id: profile for profile in profiles}
        self.cas_attempts = 0
        self._lock = threading.Lock()

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.profiles.get(user_id)

    def compare_and_increment_trial(self, user_id: str, expected_count: int) -> Optional[Profile]:
        with self._lock:
            self.cas_attempts += 1
            current = self.profiles.get(user_id)
            if current is None or current.pro_trial_count != expected_count:
                return None
            updated = current.model_copy(update={"pro_trial_count": expected_count + 1})
            self.profiles[user_id] = updated
            return updated


class FakeProvider(LLMProvider):
    """
    Scripted model provider.

    Streams the given fragments. With fail_after=n it raises error after n
    fragments (n=0 fails before the first one). With gate set, it waits on
    the event before each fragment after the first. Each fragment is
    preceded by a sleep of delay seconds.
    """

    name = "fake"

    def __init__(
        self,
        fragments: tuple[str, ...] = ("Counter", "point", "!"),
        title: str = "Pineapple Pizza",
        fail_after: Optional[int] = None,
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
        delay: float = 0,
    ):
        self.fragments = fragments
        self.title = title
        self.fail_after = fail_after
        self.error = error
        self.gate = gate
        self.delay = delay
        self.calls: list[dict] = []
        self.title_calls: list[dict] = []
        self.closed = 0

    async def stream_completion(
        self,
        model_id: str,
        messages: list[ChatMessage],
        max_tokens: int,
        metadata: Optional[dict[str, str]] = None,
    ) -> AsyncIterator[str]:
        self.calls.append({
            "model_id": model_id,
            "messages": messages,
            "max_tokens": max_tokens,
            "metadata": metadata,
        })
        try:
            for i, fragment in enumerate(self.fragments):
                if self.fail_after == i:
                    raise self.error
                if i > 0 and self.gate is not None:
                    await self.gate.wait()
                await asyncio.sleep(self.delay)
                yield fragment
            if self.fail_after == len(self.fragments):
                raise self.error
        finally:
            self.closed += 1

    async def generate_title(
        self,
        model_id: str,
        topic: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        self.title_calls.append({"model_id": model_id, "topic": topic, "metadata": metadata})
        if self.error is not None and self.fail_after == 0:
            raise self.error
        return self.title


def build_debate_service(
    repository: InMemoryDebateRepository,
    provider: Optional[LLMProvider] = None,
    profiles: Optional[InMemoryProfileRepository] = None,
    settings: Optional[Settings] = None,
    prompt_tokens: int = 100,
) -> DebateService:
    """Wire a DebateService to in-memory collaborators."""
    settings = settings or make_settings()
    return DebateService(
        repository=repository,
        provider=provider or FakeProvider(),
        entitlements=EntitlementResolver(
            profiles or InMemoryProfileRepository(),
            trial_limit=settings.pro_trial_limit,
            allow_bypass=settings.allow_validation_bypass,
        ),
        budget=TokenBudgetCalculator(
            min_completion_tokens=settings.min_completion_tokens,
            counter=fixed_counter(prompt_tokens),
        ),
        settings=settings,
    )


def free_profile(user_id: str = "test-user-123", trials: int = 0) -> Profile:
    return Profile(id=user_id, plan=Plan.FREE, pro_trial_count=trials)


def pro_profile(user_id: str = "test-user-123") -> Profile:
    return Profile(id=user_id, plan=Plan.PRO)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_container_singleton():
    """Reset the service container and provider before and after each test."""
    reset_container()
    reset_model_provider()
    yield
    reset_container()
    reset_model_provider()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
