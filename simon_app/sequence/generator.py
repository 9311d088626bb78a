"""
Constrained random sequence extension.

Each level appends one signal chosen by rejection sampling:

- Hard rule: the new signal differs from each of the last
  ``no_repeat_window`` signals.
- Soft rule (coverage preference): once the remaining levels before
  ``coverage_level`` are no more than the number of signals that have not
  appeared yet, a missing signal is preferred.

Sampling stops after ``max_attempts`` draws. If no draw satisfied both
rules, the last draw is kept when it satisfies the hard rule; otherwise the
alphabet is walked forward from it to the first signal that does.
"""

from dataclasses import dataclass
from typing import Sequence

from ..config.defaults import GenerationParams
from ..logging.config import get_logger
from ..state.models import Signal
from .random_source import RandomSource

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Chosen signal plus how it was reached."""
    signal: Signal
    attempts: int
    fallback: bool = False
    coverage_applied: bool = False


class SequenceGenerator:
    """Chooses the next signal for a sequence."""

    def __init__(
        self,
        random_source: RandomSource,
        alphabet_size: int,
        params: GenerationParams,
        win_level: int
    ):
        if params.no_repeat_window >= alphabet_size:
            raise ValueError("no_repeat_window must be smaller than alphabet_size")
        if params.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.random_source = random_source
        self.alphabet_size = alphabet_size
        self.params = params
        self.coverage_level = params.coverage_level or win_level
        self.fallback_count = 0

    def blocked_signals(self, sequence: Sequence[Signal]) -> frozenset[Signal]:
        """Signals the hard no-repeat rule excludes for the next position."""
        window = self.params.no_repeat_window
        if window <= 0 or not sequence:
            return frozenset()
        return frozenset(sequence[-window:])

    def preferred_signals(self, sequence: Sequence[Signal]) -> frozenset[Signal]:
        """Signals the coverage rule prefers, empty when the rule is inactive."""
        if not self.params.coverage_preference:
            return frozenset()

        missing = frozenset(range(self.alphabet_size)) - frozenset(sequence)
        remaining_levels = self.coverage_level - len(sequence)
        if missing and len(missing) >= remaining_levels:
            return missing
        return frozenset()

    def generate(self, sequence: Sequence[Signal]) -> GenerationResult:
        """
        Pick the signal to append to sequence.

        Args:
            sequence: Current sequence, oldest first

        Returns:
            GenerationResult with the chosen signal
        """
        blocked = self.blocked_signals(sequence)
        preferred = self.preferred_signals(sequence) - blocked

        candidate = None
        for attempt in range(1, self.params.max_attempts + 1):
            candidate = self.random_source.next_index(self.alphabet_size)
            if candidate in blocked:
                continue
            if preferred and candidate not in preferred:
                continue
            return GenerationResult(
                signal=candidate,
                attempts=attempt,
                coverage_applied=bool(preferred)
            )

        signal = self._fallback(candidate, blocked)
        self.fallback_count += 1
        logger.warning(
            "Generation attempt budget exhausted, using fallback",
            last_candidate=candidate,
            chosen=signal,
            blocked=sorted(blocked),
            preferred=sorted(preferred),
            max_attempts=self.params.max_attempts
        )
        return GenerationResult(
            signal=signal,
            attempts=self.params.max_attempts,
            fallback=True,
            coverage_applied=bool(preferred)
        )

    def _fallback(self, candidate: Signal, blocked: frozenset[Signal]) -> Signal:
        """Keep candidate unless the hard rule forbids it, then step forward."""
        for offset in range(self.alphabet_size):
            signal = (candidate + offset) % self.alphabet_size
            if signal not in blocked:
                return signal
        raise ValueError("no signal satisfies the no-repeat window")
