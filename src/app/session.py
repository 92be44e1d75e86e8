from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field, replace
from typing import Callable, Literal, Sequence

from commit_reveal import (
    KeyedHash,
    Secret,
    SecureRandomSource,
    compute_commitment,
    ensure_commitment,
    generate_secret,
    hmac_sha256,
)
from errors import GameError, InputError
from protocol import Outcome, RuleEngine

logger = logging.getLogger(__name__)

EXIT_TOKEN = "0"
HELP_TOKEN = "?"

Phase = Literal["committed", "resolved", "done"]
StepKind = Literal["help", "resolved", "exit", "invalid"]


@dataclass(frozen=True)
class Resolution:
    player_move: str
    opponent_move: str
    outcome: Outcome
    secret_hex: str
    commitment: str

    def verify(self) -> None:
        ensure_commitment(
            expected_commitment=self.commitment,
            secret=Secret.from_hex(self.secret_hex),
            move=self.opponent_move,
        )


@dataclass(frozen=True)
class GameSession:
    rules: RuleEngine
    secret: Secret = field(repr=False)
    opponent_index: int = field(repr=False)
    commitment: str
    phase: Phase = "committed"
    resolution: Resolution | None = None

    @classmethod
    def start(
        cls,
        moves: Sequence[str],
        *,
        random_source: SecureRandomSource = secrets.token_bytes,
        choose_index: Callable[[int], int] = secrets.randbelow,
        keyed_hash: KeyedHash = hmac_sha256,
    ) -> "GameSession":
        rules = RuleEngine(moves)
        secret = generate_secret(random_source)
        opponent_index = choose_index(rules.size)
        if not 0 <= opponent_index < rules.size:
            raise GameError(f"opponent index {opponent_index} outside [0, {rules.size})")

        commitment = compute_commitment(
            secret=secret,
            move=rules.moves[opponent_index],
            keyed_hash=keyed_hash,
        )
        logger.info("Session started with %d moves, commitment %s", rules.size, commitment)
        return cls(rules=rules, secret=secret, opponent_index=opponent_index, commitment=commitment)

    @property
    def opponent_move(self) -> str:
        return self.rules.moves[self.opponent_index]


@dataclass(frozen=True)
class Step:
    session: GameSession
    kind: StepKind
    resolution: Resolution | None = None
    error: InputError | None = None


def parse_selection(line: str, size: int) -> int:
    """Turn a 1-based menu choice into a move index."""
    text = line.strip()
    if not (text.isascii() and text.isdigit()):
        raise InputError(f"not a move number: {line.strip()!r}")
    if len(text) > len(str(size)):
        raise InputError(f"move number must be between 1 and {size}, got {text[:12]}...")
    choice = int(text)
    if not 1 <= choice <= size:
        raise InputError(f"move number must be between 1 and {size}, got {choice}")
    return choice - 1


def handle_input(session: GameSession, line: str) -> Step:
    if session.phase != "committed":
        raise GameError(f"session is {session.phase}; it no longer accepts input")

    text = line.strip()
    if text == EXIT_TOKEN:
        logger.info("Player exited before choosing a move")
        return Step(session=replace(session, phase="done"), kind="exit")
    if text == HELP_TOKEN:
        return Step(session=session, kind="help")

    try:
        player_index = parse_selection(text, session.rules.size)
    except InputError as exc:
        logger.debug("Rejected selection %r: %s", text, exc)
        return Step(session=session, kind="invalid", error=exc)

    return _resolve(session, player_index)


def finish(session: GameSession) -> GameSession:
    if session.phase == "committed":
        raise GameError("session has not been resolved or exited")
    return replace(session, phase="done")


def _resolve(session: GameSession, player_index: int) -> Step:
    rules = session.rules
    resolution = Resolution(
        player_move=rules.moves[player_index],
        opponent_move=session.opponent_move,
        outcome=rules.determine_outcome(player_index, session.opponent_index),
        secret_hex=session.secret.hex,
        commitment=session.commitment,
    )
    logger.info(
        "Resolved: player %s vs computer %s -> %s",
        resolution.player_move,
        resolution.opponent_move,
        resolution.outcome,
    )
    resolved = replace(session, phase="resolved", resolution=resolution)
    return Step(session=resolved, kind="resolved", resolution=resolution)
