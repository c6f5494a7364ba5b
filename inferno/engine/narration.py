"""
Inferno Dice - Narration

Builds the short status lines shown in the banner and history boxes.
"""

from inferno.engine.base import Actor
from inferno.engine.claims import INFERNO, ClaimEngine

CPU_NAME = "Infernoman"

_DISPLAY_NAMES = {
    Actor.PLAYER: "You",
    Actor.CPU: CPU_NAME,
}


def display_name(actor: Actor) -> str:
    return _DISPLAY_NAMES[actor]


def _points(penalty: int) -> str:
    return "point" if penalty == 1 else "points"


def format_call_bluff_message(
    caller: Actor,
    defender: Actor,
    defender_told_truth: bool,
    penalty: int = 1,
) -> str:
    """Describe the result of a bluff call.

    Args:
        caller: Who called the bluff
        defender: Who made the challenged claim
        defender_told_truth: Whether the claim held up
        penalty: Points shown as lost

    Returns:
        e.g. "You called Infernoman's bluff! Infernoman was bluffing...Infernoman lost 1 point"
    """
    caller_name = display_name(caller)
    defender_name = display_name(defender)
    possessive = "your" if defender is Actor.PLAYER else f"{defender_name}'s"
    prefix = f"{caller_name} called {possessive} bluff! "

    if defender_told_truth:
        phrase = "You were" if defender is Actor.PLAYER else f"{defender_name} was"
        return f"{prefix}{phrase} telling the truth...{caller_name} lost {penalty} {_points(penalty)}"

    phrase = "You were bluffing" if defender is Actor.PLAYER else f"{defender_name} was bluffing"
    return f"{prefix}{phrase}...{defender_name} lost {penalty} {_points(penalty)}"


def roll_message(actual: int, legal_truth: bool) -> str:
    if legal_truth:
        return f"You rolled {actual}. Claim it or choose a bluff."
    return (
        f"You rolled {actual}. You must bluff with a higher claim "
        "(21 or 31 are always available)."
    )


def claim_message(actor: Actor, previous: int | None, claim: int) -> str:
    """Narrate a committed claim."""
    if actor is Actor.PLAYER:
        if ClaimEngine.is_reverse_of(previous, claim):
            return f"You reversed {previous} with {claim}."
        if claim == INFERNO:
            return (
                f"You claim 21 (Inferno). {CPU_NAME} must roll a real 21, 31, or 41 "
                "or bluff 21/31, otherwise call bluff."
            )
        return f"You claim {claim}."

    if ClaimEngine.is_reverse_of(previous, claim):
        return f"{CPU_NAME} reversed {previous} with {claim}. Your move...roll & claim or call bluff."
    if claim == INFERNO:
        return (
            f"{CPU_NAME} claims 21 (Inferno). You must roll a real 21, 31, or 41 "
            "or bluff 21/31...otherwise call bluff."
        )
    return f"{CPU_NAME} claims {claim}. Your move...roll & claim or call bluff."


def social_message(actor: Actor) -> str:
    if actor is Actor.PLAYER:
        return "Social (41) shown. Round resets."
    return f"{CPU_NAME} shows Social (41). Round resets."


def inferno_forfeit_message(actor: Actor) -> str:
    if actor is Actor.PLAYER:
        return "You failed to answer Inferno with 21, 31, or 41. You lose 2."
    return f"{CPU_NAME} failed to answer Inferno with 21, 31, or 41. {CPU_NAME} loses 2."


def game_over_message(loser: Actor) -> str:
    if loser is Actor.PLAYER:
        return f"You hit 0 points. {CPU_NAME} wins."
    return f"{CPU_NAME} hit 0 points. You win!"


def inferno_banner(turn: Actor) -> str:
    """Banner shown while a 21 stands, addressed to whoever must respond."""
    if turn is Actor.PLAYER:
        return (
            f"{CPU_NAME} claims 21 (Inferno). You must roll a real 21, 31, or 41 "
            "or bluff 21/31, otherwise call bluff."
        )
    return (
        f"You claimed 21 (Inferno). {CPU_NAME} must roll a real 21, 31, or 41 "
        "or bluff 21/31, otherwise call bluff."
    )
