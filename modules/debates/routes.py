"""
Debate API endpoints.

Provides REST endpoints for debate creation and streamed turns.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from api.dependencies import get_debate_service
from api.middleware.auth import get_caller_identity
from modules.auth.models import CallerIdentity
from modules.billing.exceptions import PlanRequiredError
from modules.budget.exceptions import InsufficientBudgetError
from providers.exceptions import ProviderRejectedError, ProviderUnavailableError
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    RiposteError,
    ValidationError,
)

from .interfaces import IDebateService
from .models import CreateDebateRequest, Debate

router = APIRouter()

TURN_MODEL_HEADER = "Riposte-Turn-Model"
PROVIDER_RETRY_AFTER_SECONDS = 5


def to_http_exception(error: RiposteError) -> HTTPException:
    """Map a domain error to the HTTP error returned to the client."""
    if isinstance(error, InsufficientBudgetError):
        status_code = 413
    elif isinstance(error, PlanRequiredError):
        status_code = 402
    elif isinstance(error, ProviderRejectedError):
        status_code = 429 if error.rate_limited else 400
    elif isinstance(error, ProviderUnavailableError):
        status_code = 503
    elif isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, ConflictError):
        status_code = 409
    elif isinstance(error, AuthenticationError):
        status_code = 401
    elif isinstance(error, AuthorizationError):
        status_code = 403
    elif isinstance(error, ValidationError):
        status_code = 400
    elif isinstance(error, ExternalServiceError):
        status_code = 502
    else:
        status_code = 500
    headers = {"Retry-After": str(PROVIDER_RETRY_AFTER_SECONDS)} if error.retryable else None
    return HTTPException(status_code=status_code, detail=error.to_dict(), headers=headers)


@router.post("", response_model=Debate, status_code=201)
async def create_debate(
    request: CreateDebateRequest,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: IDebateService = Depends(get_debate_service),
) -> Debate:
    """
    Create a new debate.

    A short title is generated from the topic. Anonymous callers must send
    a userId in the body.
    """
    try:
        return await service.create_debate(request, caller)
    except RiposteError as e:
        raise to_http_exception(e)


@router.post("/{debate_id}/turn")
async def take_turn(
    debate_id: str,
    request: Request,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: IDebateService = Depends(get_debate_service),
) -> StreamingResponse:
    """
    Take a turn in a debate.

    The body is a JSON TurnRequest. The reply streams back as raw UTF-8
    text and the model used is reported in the Riposte-Turn-Model header.
    The generated turn is stored once the stream completes.
    """
    raw_body = await request.body()
    try:
        turn = await service.take_turn(debate_id, raw_body, caller)
    except RiposteError as e:
        raise to_http_exception(e)

    return StreamingResponse(
        turn.relay.iter_bytes(),
        media_type="application/octet-stream",
        headers={TURN_MODEL_HEADER: turn.model},
    )
