"""Challenge-confirmed purge of operational data."""

from __future__ import annotations

from fastapi import APIRouter

from dispatch_terminal.api.v1.dependencies import (
    ChangeFeedDep,
    PrincipalDep,
    PurgeGuardDep,
    SessionDep,
    raise_http,
)
from dispatch_terminal.schemas.purge import (
    PurgeChallengeResponse,
    PurgeConfirmRequest,
    PurgeConfirmResponse,
)
from dispatch_terminal.services.errors import DispatchError
from dispatch_terminal.services.purge import Challenge, PurgeGuard, purge_operational_data

router = APIRouter(prefix="/purge", tags=["purge"])


def _challenge_response(challenge: Challenge, guard: PurgeGuard) -> PurgeChallengeResponse:
    return PurgeChallengeResponse(
        code=challenge.code,
        expires_at=challenge.expires_at,
        seconds_left=challenge.seconds_left(guard.now()),
    )


@router.post("/challenge", response_model=PurgeChallengeResponse)
async def request_challenge(
    principal: PrincipalDep,
    guard: PurgeGuardDep,
) -> PurgeChallengeResponse:
    """Issue a six-digit code the operator must type back to purge.

    Issuing again replaces any pending code for this session.
    """
    return _challenge_response(guard.issue(principal.scope_key), guard)


@router.post("/confirm", response_model=PurgeConfirmResponse)
async def confirm_purge(
    payload: PurgeConfirmRequest,
    principal: PrincipalDep,
    guard: PurgeGuardDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> PurgeConfirmResponse:
    """Delete every driver, queue row and exit log once the code matches.

    A late or wrong code deletes nothing and comes back with a new challenge.

    Raises:
        HTTPException: 409 when no code was requested first
    """
    try:
        verdict = guard.verify(principal.scope_key, payload.code)
    except DispatchError as err:
        raise_http(err)

    if verdict.confirmed:
        deleted = purge_operational_data(db, principal, feed)
        return PurgeConfirmResponse(outcome=verdict.outcome.value, deleted=deleted)

    retry = verdict.challenge
    return PurgeConfirmResponse(
        outcome=verdict.outcome.value,
        challenge=_challenge_response(retry, guard) if retry is not None else None,
    )
