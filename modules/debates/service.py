"""
Debates service implementation.

Orchestrates one turn end to end:

    lock debate -> assemble context -> resolve model -> build plan
    -> budget tokens -> prime provider stream -> use trial
    -> store user turn -> relay stream -> store generated turn -> unlock

Every check runs before the model is called. A debate's lock is held from
assembly until its generated turn is stored, so concurrent requests for the
same debate can never compute the same order number.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

from modules.auth.exceptions import UserNotFoundError
from modules.auth.models import CallerIdentity
from modules.billing.entitlements import EntitlementResolver
from modules.budget.calculator import TokenBudgetCalculator
from providers.base import LLMProvider
from providers.exceptions import ProviderUnavailableError
from shared.config import Settings, get_settings

from .context import TurnContext, TurnContextAssembler
from .conversation import build_turn_plan
from .interfaces import IDebateRepository, IDebateService
from .locks import DebateLockRegistry
from .models import (
    CreateDebateRequest,
    Debate,
    NewDebate,
    NewTurn,
    Speaker,
    TurnPlan,
)
from .relay import RelayResult, StreamingRelay

logger = logging.getLogger(__name__)


_QUOTES = re.compile(r"^[\"']|[\"']$")
_TITLE_PREFIX = re.compile(r"^Debate Name: ")


def clean_title(title: str) -> str:
    """Strip wrapping quotes and a leading "Debate Name: " from a generated title."""
    title = _QUOTES.sub("", title.strip())
    title = _TITLE_PREFIX.sub("", title)
    return title.strip()


@dataclass
class TurnStream:
    """A started turn: the model it runs on and the stream to send back."""

    model: str
    speaker: Speaker
    order_number: int
    relay: StreamingRelay


class DebateService(IDebateService):
    """
    Debate service.

    Implements IDebateService with injected storage, provider and policy
    collaborators.
    """

    def __init__(
        self,
        repository: IDebateRepository,
        provider: LLMProvider,
        entitlements: EntitlementResolver,
        budget: TokenBudgetCalculator,
        settings: Optional[Settings] = None,
        locks: Optional[DebateLockRegistry] = None,
    ):
        self._repository = repository
        self._provider = provider
        self._entitlements = entitlements
        self._budget = budget
        self._settings = settings or get_settings()
        self._locks = locks or DebateLockRegistry()
        self._assembler = TurnContextAssembler(repository)

    # -------------------------------------------------------------------------
    # Debate creation
    # -------------------------------------------------------------------------

    async def create_debate(
        self,
        request: CreateDebateRequest,
        caller: CallerIdentity,
    ) -> Debate:
        """Create a debate with a model-generated short title."""
        user_id = caller.resolve_user_id(request.user_id)
        if user_id is None:
            raise UserNotFoundError()

        model = self._settings.default_model
        timeout = self._settings.provider_timeout_seconds
        try:
            title = await asyncio.wait_for(
                self._provider.generate_title(model, request.topic, {"user_id": user_id}),
                timeout,
            )
        except asyncio.TimeoutError:
            raise ProviderUnavailableError(
                self._provider.name, f"No title within {timeout:g}s"
            )

        short_topic = clean_title(title or request.topic) or request.topic
        debate = await asyncio.to_thread(
            self._repository.create_debate,
            NewDebate(
                topic=request.topic,
                short_topic=short_topic,
                persona=request.persona,
                model=model,
                user_id=user_id,
            ),
        )
        logger.info(f"Created debate {debate.id} ({short_topic!r}) for user {user_id}")
        return debate

    # -------------------------------------------------------------------------
    # Turns
    # -------------------------------------------------------------------------

    async def take_turn(
        self,
        debate_id: str,
        raw_body: bytes,
        caller: CallerIdentity,
    ) -> TurnStream:
        """Take one turn and start streaming the reply."""
        lock = self._locks.get(debate_id)
        await lock.acquire()
        try:
            return await self._start_turn(debate_id, raw_body, caller, lock)
        except BaseException:
            lock.release()
            raise

    async def _start_turn(
        self,
        debate_id: str,
        raw_body: bytes,
        caller: CallerIdentity,
        lock: asyncio.Lock,
    ) -> TurnStream:
        context = await self._assembler.assemble(debate_id, raw_body, caller)
        request = context.request

        grant = self._entitlements.resolve(
            request.model or context.debate.model,
            caller.user,
            caller.profile,
            default_model=self._settings.default_model,
            explicit=request.model is not None,
            bypass=request.heh,
        )
        model_id = grant.model.model_id

        plan = build_turn_plan(context.debate, context.turns, request)
        max_tokens = self._budget.budget(plan.messages, grant.model)

        logger.info(
            f"Turn {plan.order_number} ({plan.case.value}) for debate {debate_id} "
            f"on {model_id}, max_tokens={max_tokens}"
        )

        fragments = self._provider.stream_completion(
            model_id,
            plan.messages,
            max_tokens,
            {"debate_id": debate_id, "user_id": context.user_id},
        )
        relay = StreamingRelay(
            fragments,
            on_complete=self._completion_handler(context, plan, model_id, lock),
            timeout=self._settings.provider_timeout_seconds,
            stream_timeout=self._settings.provider_stream_timeout_seconds,
            persist_partial=self._settings.persist_partial_turns,
            provider_name=self._provider.name,
        )
        await relay.prime()

        # Trials are spent only once the provider has produced text. A trial
        # lost to a concurrent turn still fails here, before any byte is sent.
        try:
            await asyncio.to_thread(self._entitlements.commit, grant, caller.profile)
            if plan.pending_user_turn is not None:
                await asyncio.to_thread(
                    self._repository.insert_turn,
                    NewTurn(
                        debate_id=debate_id,
                        speaker=Speaker.USER,
                        content=plan.pending_user_turn.content,
                        order_number=plan.pending_user_turn.order_number,
                        model=model_id,
                        user_id=context.user_id,
                    ),
                )
        except BaseException:
            await relay.aclose()
            raise

        relay.start()
        return TurnStream(
            model=model_id,
            speaker=plan.speaker,
            order_number=plan.order_number,
            relay=relay,
        )

    def _completion_handler(
        self,
        context: TurnContext,
        plan: TurnPlan,
        model_id: str,
        lock: asyncio.Lock,
    ):
        debate_id = context.debate.id

        async def store_generated_turn(result: RelayResult) -> None:
            try:
                if not result.should_persist:
                    logger.warning(
                        f"Not storing turn {plan.order_number} for debate {debate_id} "
                        f"(empty={not result.content}, cancelled={result.cancelled})"
                    )
                    return
                await asyncio.to_thread(
                    self._repository.insert_turn,
                    NewTurn(
                        debate_id=debate_id,
                        speaker=plan.speaker,
                        content=result.content,
                        order_number=plan.order_number,
                        model=model_id,
                        user_id=context.user_id,
                    ),
                )
                logger.info(
                    f"Stored turn {plan.order_number} for debate {debate_id} "
                    f"({result.fragments} fragments)"
                )
            finally:
                lock.release()

        return store_generated_turn

