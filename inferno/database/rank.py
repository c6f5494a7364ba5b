"""
Inferno Dice - Rank Manager

Feeds finished games into the server-side player rank.
"""

from supabase import Client


class RankManager:
    """Implements the rank gateway on Supabase."""

    def __init__(self, client: Client, user_id: str) -> None:
        self.client = client
        self.user_id = user_id

    def update_from_result(
        self,
        mode: str,
        won: bool | None = None,
        survival_streak: int = 0,
        bluff_events: int = 0,
        correct_bluff_events: int = 0,
    ) -> None:
        """Apply one finished game or run to this player's rank."""
        (
            self.client
            .rpc("update_player_rank", {
                "p_user_id": self.user_id,
                "p_mode": mode,
                "p_won": won,
                "p_survival_streak": survival_streak,
                "p_bluff_events": bluff_events,
                "p_correct_bluff_events": correct_bluff_events,
            })
            .execute()
        )
