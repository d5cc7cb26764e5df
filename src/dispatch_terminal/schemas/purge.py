# src/dispatch_terminal/schemas/purge.py
"""Purge challenge Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class PurgeChallengeResponse(BaseModel):
    """A freshly issued six-digit confirmation code."""

    code: str = Field(..., pattern=r"^\d{6}$")
    expires_at: float = Field(..., description="Expiry as epoch seconds")
    seconds_left: int


class PurgeConfirmRequest(BaseModel):
    """Schema for confirming a purge with the displayed code."""

    code: str = Field(..., min_length=1, max_length=12)


class PurgeConfirmResponse(BaseModel):
    """Outcome of a purge confirmation.

    On ``expired`` or ``mismatched`` a new challenge is attached and nothing
    was deleted.
    """

    outcome: Literal["confirmed", "expired", "mismatched"]
    deleted: dict[str, int] | None = None
    challenge: PurgeChallengeResponse | None = None
