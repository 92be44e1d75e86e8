from __future__ import annotations

import hashlib
import hmac
import re
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
APP_DIR = ROOT / "src" / "app"
sys.path.insert(0, str(APP_DIR))

from commit_reveal import (  # type: ignore[import-not-found]  # noqa: E402
    SECRET_BYTES,
    Secret,
    compute_commitment,
    ensure_commitment,
    generate_secret,
    verify_commitment,
)
from errors import FairnessViolation, RandomnessUnavailableError  # type: ignore[import-not-found]  # noqa: E402

FIXED = Secret(bytes(range(32)))


def test_generate_secret_is_32_bytes_and_lowercase_hex() -> None:
    secret = generate_secret()
    assert len(secret.raw) == SECRET_BYTES
    assert re.fullmatch(r"[0-9a-f]{64}", secret.hex)
    assert Secret.from_hex(secret.hex) == secret


def test_fresh_secrets_differ() -> None:
    assert generate_secret() != generate_secret()


def test_secret_repr_hides_key() -> None:
    assert FIXED.hex not in repr(FIXED)


def test_broken_random_source() -> None:
    def failing(num_bytes: int) -> bytes:
        raise OSError("no entropy")

    with pytest.raises(RandomnessUnavailableError):
        generate_secret(failing)
    with pytest.raises(RandomnessUnavailableError):
        generate_secret(lambda n: b"\x00" * (n - 1))


def test_commitment_is_hmac_sha256_over_move() -> None:
    expected = hmac.new(FIXED.raw, b"rock", hashlib.sha256).hexdigest()
    assert compute_commitment(secret=FIXED, move="rock") == expected
    assert re.fullmatch(r"[0-9a-f]{64}", expected)


def test_commitment_is_deterministic() -> None:
    assert compute_commitment(secret=FIXED, move="paper") == compute_commitment(secret=FIXED, move="paper")


def test_commitment_changes_with_secret_or_move() -> None:
    a = compute_commitment(secret=generate_secret(), move="paper")
    b = compute_commitment(secret=generate_secret(), move="paper")
    assert a != b
    assert compute_commitment(secret=FIXED, move="paper") != compute_commitment(secret=FIXED, move="rock")


def test_commitment_roundtrip() -> None:
    secret = generate_secret()
    commitment = compute_commitment(secret=secret, move="lizard")
    assert verify_commitment(expected_commitment=commitment, secret=secret, move="lizard")
    assert verify_commitment(expected_commitment=commitment.upper(), secret=secret, move="lizard")
    for other in ("rock", "paper", "scissors", "spock", "Lizard"):
        assert not verify_commitment(expected_commitment=commitment, secret=secret, move=other)


def test_ensure_commitment_raises_fairness_violation() -> None:
    commitment = compute_commitment(secret=FIXED, move="rock")
    ensure_commitment(expected_commitment=commitment, secret=FIXED, move="rock")

    with pytest.raises(FairnessViolation) as excinfo:
        ensure_commitment(expected_commitment=commitment, secret=FIXED, move="paper")
    assert excinfo.value.expected_commitment == commitment
    assert excinfo.value.computed_commitment == compute_commitment(secret=FIXED, move="paper")


def test_from_hex_rejects_bad_keys() -> None:
    with pytest.raises(ValueError):
        Secret.from_hex("not-hex")
    with pytest.raises(ValueError):
        Secret.from_hex("abcd")


@pytest.mark.parametrize("published", ["é", "ｆｆ", "deadbeef​", ""])
def test_malformed_commitment_is_a_mismatch(published: str) -> None:
    assert not verify_commitment(expected_commitment=published, secret=FIXED, move="rock")
    with pytest.raises(FairnessViolation):
        ensure_commitment(expected_commitment=published, secret=FIXED, move="rock")
