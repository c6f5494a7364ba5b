"""
Inferno Dice.

A two-dice bluffing game (Mexican/Liar's dice family) against a CPU
opponent, in quick-play and survival modes.
"""

__version__ = "0.1.0"
