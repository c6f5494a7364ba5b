"""
Inferno Dice - Stats Manager

Gameplay telemetry: roll and claim frequencies, quick-play outcomes and
survival runs, plus the global survival best.
"""

from supabase import Client

from inferno.database.models import ClaimOutcome, ClaimStat, RollStat, SurvivalRun


class StatsManager:
    """Implements the stats gateway on Supabase."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.rolls = client.table("roll_stats")
        self.claims = client.table("claim_stats")
        self.outcomes = client.table("claim_outcomes")
        self.runs = client.table("survival_runs")

    def record_roll(self, code: int) -> RollStat:
        data = self.rolls.insert({"code": code}).execute()
        return RollStat.model_validate(data.data[0])

    def record_claim(self, code: int) -> ClaimStat:
        data = self.claims.insert({"code": code}).execute()
        return ClaimStat.model_validate(data.data[0])

    def record_outcome(
        self,
        winner: str,
        winning_claim: str | None = None,
        losing_claim: str | None = None,
    ) -> ClaimOutcome:
        """Record the final standing claim of a finished quick-play game."""
        data = (
            self.outcomes
            .insert({
                "winner": winner,
                "winning_claim": winning_claim,
                "losing_claim": losing_claim,
            })
            .execute()
        )
        return ClaimOutcome.model_validate(data.data[0])

    def record_run(self, streak: int) -> SurvivalRun:
        data = self.runs.insert({"streak": streak}).execute()
        return SurvivalRun.model_validate(data.data[0])

    def fetch_global_best(self) -> int:
        """Longest survival streak recorded by anyone, 0 if none."""
        data = (
            self.runs
            .select("streak")
            .order("streak", desc=True)
            .limit(1)
            .execute()
        )
        if data.data:
            return int(data.data[0]["streak"])
        return 0

    def submit_global_best(self, streak: int) -> int:
        """Offer a finished streak; returns the global best afterwards."""
        data = self.client.rpc("submit_survival_best", {"p_streak": streak}).execute()
        if data.data is None:
            return streak
        return int(data.data)
