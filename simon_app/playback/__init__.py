"""
Sequence playback.

Signal players present one signal at a time; the scheduler paces a whole
sequence through a player and reports completion exactly once per run.
"""
