from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass, field
from typing import Callable, Final

from errors import FairnessViolation, RandomnessUnavailableError

logger = logging.getLogger(__name__)

SECRET_BYTES: Final[int] = 32

# Fills the requested number of bytes from a secure source.
SecureRandomSource = Callable[[int], bytes]
# Keyed digest of a message, returned as lowercase hex.
KeyedHash = Callable[[bytes, bytes], str]


@dataclass(frozen=True)
class Secret:
    raw: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.raw) != SECRET_BYTES:
            raise ValueError(f"secret must be {SECRET_BYTES} bytes, got {len(self.raw)}")

    @property
    def hex(self) -> str:
        return self.raw.hex()

    @classmethod
    def from_hex(cls, value: str) -> "Secret":
        try:
            raw = bytes.fromhex(value.strip())
        except ValueError as exc:
            raise ValueError("secret must be a hex string") from exc
        return cls(raw)


def generate_secret(source: SecureRandomSource = secrets.token_bytes) -> Secret:
    try:
        raw = source(SECRET_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise RandomnessUnavailableError(f"secure random source failed: {exc}") from exc

    if not isinstance(raw, bytes) or len(raw) != SECRET_BYTES:
        raise RandomnessUnavailableError(
            f"secure random source returned {len(raw) if isinstance(raw, bytes) else type(raw).__name__} "
            f"instead of {SECRET_BYTES} bytes"
        )
    return Secret(raw)


def hmac_sha256(key: bytes, message: bytes) -> str:
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def compute_commitment(*, secret: Secret, move: str, keyed_hash: KeyedHash = hmac_sha256) -> str:
    return keyed_hash(secret.raw, move.encode("utf-8")).lower()


def verify_commitment(
    *,
    expected_commitment: str,
    secret: Secret,
    move: str,
    keyed_hash: KeyedHash = hmac_sha256,
) -> bool:
    computed = compute_commitment(secret=secret, move=move, keyed_hash=keyed_hash)
    return secrets.compare_digest(expected_commitment.strip().lower().encode("utf-8"), computed.encode("utf-8"))


def ensure_commitment(
    *,
    expected_commitment: str,
    secret: Secret,
    move: str,
    keyed_hash: KeyedHash = hmac_sha256,
) -> None:
    """Raise FairnessViolation unless (secret, move) reproduces the commitment."""
    if verify_commitment(expected_commitment=expected_commitment, secret=secret, move=move, keyed_hash=keyed_hash):
        return
    computed = compute_commitment(secret=secret, move=move, keyed_hash=keyed_hash)
    logger.error("Fairness proof failed for move %r", move)
    raise FairnessViolation(expected_commitment, computed)
