"""
Game state machine module.

Defines the round phases, the legal transitions between them, and the pure
validation step that decides where a player's input leads:
IDLE → GENERATING → PRESENTING → AWAITING_INPUT → VALIDATING → ...
"""
