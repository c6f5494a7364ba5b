"""
Inferno Dice Database Layer.

Supabase integration for opponent state, gameplay stats and player rank.
"""

from inferno.database.client import get_supabase_client
from inferno.database.models import ClaimOutcome, ClaimStat, OpponentState, RollStat, SurvivalRun
from inferno.database.opponent_state import OpponentStateManager
from inferno.database.rank import RankManager
from inferno.database.stats import StatsManager

__all__ = [
    "get_supabase_client",
    "ClaimOutcome",
    "ClaimStat",
    "OpponentState",
    "OpponentStateManager",
    "RankManager",
    "RollStat",
    "StatsManager",
    "SurvivalRun",
]
