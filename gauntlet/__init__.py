"""
Gauntlet Package
================

Orb-matching gate game: a hex grid of colored orbs, a launcher, and a ring
of chevrons that lock as each color is matched. Clearing every chevron
opens the gate and moves on to the next level.

All tunable parameters are in game_config.yaml; level layouts live in
levels.yaml.
"""
