"""
Inferno Dice - Database Models

Pydantic models that mirror the Supabase table schemas.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class OpponentState(BaseModel):
    """Mirrors the `opponent_state` table."""

    owner_id: str
    state: dict[str, Any] = Field(default_factory=dict)
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class RollStat(BaseModel):
    """Mirrors the `roll_stats` table."""

    id: UUID | None = None
    code: int = Field(ge=11, le=66)
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ClaimStat(BaseModel):
    """Mirrors the `claim_stats` table."""

    id: UUID | None = None
    code: int = Field(ge=11, le=66)
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ClaimOutcome(BaseModel):
    """Mirrors the `claim_outcomes` table."""

    id: UUID | None = None
    winner: str
    winning_claim: str | None = None
    losing_claim: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class SurvivalRun(BaseModel):
    """Mirrors the `survival_runs` table."""

    id: UUID | None = None
    streak: int = Field(ge=0)
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
