"""
Tap Jump
========

Single-screen reflex game: the player falls under gravity, jumps on tap and
must avoid obstacles scrolling in from the right.

The ``core`` subpackage holds the deterministic simulation (physics, spawning,
collision, scoring and the session state machine) plus a Gymnasium wrapper.
All tunable parameters are in game_config.yaml.
"""
