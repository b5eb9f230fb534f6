"""
Random number generation for wall shuffling, house selection and computer discards.

Every random decision in a match flows from a single hex seed:
1. Generate a cryptographic seed (32 bytes) via the secrets module
2. Derive an independent stream per purpose via SHA512 with domain separation
3. Seed a stdlib random.Random with the derived bytes

Rounds are reproducible from (seed, round_number), and tests inject their own
random.Random instances directly.
"""

import hashlib
import random
import secrets

SEED_BYTES = 32
NUM_SEATS = 4
_WALL_DOMAIN_PREFIX = b"parlor-wall-v1:"  # domain separator for per-round streams
_HOUSE_DOMAIN_PREFIX = b"parlor-house-v1:"  # domain separator for first house selection


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Enforces exact length (64 hex chars = 32 bytes) and valid hex characters.
    Raises TypeError for non-string input, ValueError for invalid format.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string (64 chars / 256 bits)."""
    return secrets.token_bytes(SEED_BYTES).hex()


def _derive_rng(domain_prefix: bytes, data: bytes) -> random.Random:
    """
    Derive a random.Random from SHA512 of domain-separated data.

    Domain separation ensures different purposes produce independent streams.
    """
    derived = hashlib.sha512(domain_prefix + data).digest()
    return random.Random(int.from_bytes(derived, byteorder="little"))  # noqa: S311


def create_round_rng(seed_hex: str, round_number: int) -> random.Random:
    """
    Derive the random stream for one round attempt.

    Used for the wall shuffle and basic computer discards of that round.
    """
    if not (0 <= round_number < 2**32):
        raise ValueError("round_number must be in [0, 2^32)")
    validate_seed_hex(seed_hex)
    round_bytes = round_number.to_bytes(4, byteorder="little")
    return _derive_rng(_WALL_DOMAIN_PREFIX, bytes.fromhex(seed_hex) + round_bytes)


def determine_first_house(seed_hex: str) -> int:
    """Pick the first house seat (0-3) from a dedicated stream of the match seed."""
    validate_seed_hex(seed_hex)
    rng = _derive_rng(_HOUSE_DOMAIN_PREFIX, bytes.fromhex(seed_hex))
    return rng.randrange(NUM_SEATS)
