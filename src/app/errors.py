from __future__ import annotations


class GameError(Exception):
    """Base class for everything the game core raises on purpose."""


class ConfigurationError(GameError, ValueError):
    """The move list cannot support a fair game (too short, even, or duplicated)."""


class InputError(GameError, ValueError):
    """A move selection typed during play could not be used."""


class RandomnessUnavailableError(GameError, RuntimeError):
    """The host could not provide cryptographically secure random bytes."""


class FairnessViolation(GameError):
    """A revealed secret and move do not reproduce the published commitment."""

    def __init__(self, expected_commitment: str, computed_commitment: str) -> None:
        super().__init__(
            f"commitment mismatch: published {expected_commitment}, recomputed {computed_commitment}"
        )
        self.expected_commitment = expected_commitment
        self.computed_commitment = computed_commitment
