"""
Excavator Arcade
================

An arcade excavator game: dig soil from piles and drop it into pits of the
matching color before the timer runs out, without leaving the road.

This package contains the soil simulation, the excavator kinematics, the
level rules and the Gymnasium wrapper. All tunable parameters and level
layouts live in game_config.yaml.
"""
