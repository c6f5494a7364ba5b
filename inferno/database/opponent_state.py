"""
Inferno Dice - Opponent State Manager

Persists the CPU opponent's learned state in the `opponent_state` table,
one row per owner.
"""

from typing import Any

from supabase import Client

from inferno.database.models import OpponentState


class OpponentStateManager:
    """Implements the persistence gateway on Supabase."""

    def __init__(self, client: Client, owner_id: str) -> None:
        self.client = client
        self.owner_id = owner_id
        self.table = client.table("opponent_state")

    def save(self, blob: dict[str, Any]) -> OpponentState:
        """Insert or replace this owner's opponent state."""
        data = (
            self.table
            .upsert(
                {"owner_id": self.owner_id, "state": blob},
                on_conflict="owner_id",
            )
            .execute()
        )
        return OpponentState.model_validate(data.data[0])

    def save_opponent_state(self, blob: dict[str, Any]) -> None:
        self.save(blob)

    def get(self) -> OpponentState | None:
        data = (
            self.table
            .select("*")
            .eq("owner_id", self.owner_id)
            .execute()
        )
        if data.data:
            return OpponentState.model_validate(data.data[0])
        return None

    def load(self) -> dict[str, Any] | None:
        """The saved state blob, or None when nothing was saved yet."""
        row = self.get()
        return row.state if row else None
