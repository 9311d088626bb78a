"""
Utility functions module.

Timer primitives shared by the engine and the playback scheduler.

Timing Semantics:
- All pacing goes through an injected Clock, never through sleeps
- Every scheduled callback returns a handle that can be cancelled
- ManualClock fires callbacks strictly in due-time order, FIFO on ties
"""
