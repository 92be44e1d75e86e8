from __future__ import annotations

from collections import Counter
from functools import cached_property
from typing import Literal, Sequence

from errors import ConfigurationError, InputError

Outcome = Literal["Draw", "Win", "Lose"]
OutcomeMatrix = tuple[tuple[Outcome, ...], ...]

MIN_MOVES = 3


def opposite(outcome: Outcome) -> Outcome:
    if outcome == "Win":
        return "Lose"
    if outcome == "Lose":
        return "Win"
    return "Draw"


def validate_moves(moves: Sequence[str]) -> tuple[str, ...]:
    labels = tuple(moves)
    if len(labels) < MIN_MOVES:
        raise ConfigurationError(f"need at least {MIN_MOVES} moves, got {len(labels)}")
    if len(labels) % 2 == 0:
        raise ConfigurationError(f"need an odd number of moves, got {len(labels)}")

    duplicates = sorted(label for label, count in Counter(labels).items() if count > 1)
    if duplicates:
        raise ConfigurationError("moves must be unique, repeated: " + ", ".join(duplicates))
    return labels


class RuleEngine:
    """Circular dominance over an odd number of moves.

    Moves are ranked by their position in the list. Each move beats the
    ``half`` moves that follow it (wrapping around) and loses to the ``half``
    moves that precede it, so ``[rock, scissors, paper]`` plays like the
    classic game.
    """

    def __init__(self, moves: Sequence[str]) -> None:
        self.moves = validate_moves(moves)
        self.size = len(self.moves)
        self.half = self.size // 2

    def __repr__(self) -> str:
        return f"RuleEngine(moves={list(self.moves)!r})"

    def determine_outcome(self, a: int, b: int) -> Outcome:
        """Result for move ``a`` played against move ``b``."""
        self._check_index(a)
        self._check_index(b)
        if a == b:
            return "Draw"

        diff = (b - a) % self.size
        return "Win" if diff <= self.half else "Lose"

    def build_outcome_matrix(self) -> OutcomeMatrix:
        return self._matrix

    @cached_property
    def _matrix(self) -> OutcomeMatrix:
        return tuple(
            tuple(self.determine_outcome(row, col) for col in range(self.size))
            for row in range(self.size)
        )

    def beats(self, index: int) -> list[int]:
        return [j for j, outcome in enumerate(self.build_outcome_matrix()[index]) if outcome == "Win"]

    def beaten_by(self, index: int) -> list[int]:
        return [j for j, outcome in enumerate(self.build_outcome_matrix()[index]) if outcome == "Lose"]

    def _check_index(self, index: int) -> None:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < self.size:
            raise InputError(f"move index must be in [0, {self.size}), got {index!r}")
