"""
SumStack Package
================

Core game engine for SumStack, the falling-block arithmetic puzzle:
select numbered blocks whose values add up to the target to clear them
before the stack reaches the top row.

This package controls:

- Grid model and gravity collapse
- Block value / target / id generation
- Selection evaluation and scoring
- Row spawning and game over detection
- Time-mode countdown

All tunable constants live in game_config.yaml next to this file.
"""
