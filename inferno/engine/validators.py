"""
Inferno Dice - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Iterable


def validate_die_face(value: int) -> int:
    """
    Validate a single die face.

    Args:
        value: Face value to validate

    Returns:
        The validated face

    Raises:
        ValueError: If the face is not an integer between 1 and 6
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Die face must be an integer, got {type(value).__name__}.")
    if not (1 <= value <= 6):
        raise ValueError(f"Die face is {value}, must be between 1 and 6.")
    return value


def validate_claim_code(code: int, valid_codes: Iterable[int]) -> int:
    """
    Validate a two-digit claim code.

    Args:
        code: Claim code to validate
        valid_codes: Every representable claim code

    Returns:
        The validated code

    Raises:
        ValueError: If the code is not a representable claim
    """
    if not isinstance(code, int) or isinstance(code, bool):
        raise ValueError(f"Claim must be an integer, got {type(code).__name__}.")
    if code not in set(valid_codes):
        raise ValueError(f"{code} is not a valid claim.")
    return code


def validate_score(score: int, allow_negative: bool = False) -> int:
    """
    Validate a score value.

    Args:
        score: Score to validate
        allow_negative: Whether negative scores are allowed

    Returns:
        Validated score

    Raises:
        ValueError: If score is invalid
    """
    if not isinstance(score, int):
        raise ValueError(f"Score must be an integer, got {type(score).__name__}.")

    if not allow_negative and score < 0:
        raise ValueError(f"Score cannot be negative, got {score}.")

    return score


def validate_penalty(amount: int) -> int:
    """Validate a point loss; losses are positive integers."""
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise ValueError(f"Penalty must be an integer, got {type(amount).__name__}.")
    if amount < 1:
        raise ValueError(f"Penalty must be positive, got {amount}.")
    return amount
