"""
Simon App - Bird-call Memory Sequence Game Engine

The core of a memory-sequence game: generates a growing sequence of bird
calls, plays it back with timed pacing, and validates the player's
reproduction of it turn by turn.
"""

__version__ = "0.1.0"
__author__ = "Simon Team"
