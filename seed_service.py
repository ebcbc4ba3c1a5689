"""
Seed derivation — the only source of pseudo-randomness in the generation engine.

Every generated value is read from a SHA-256 digest of its identifying key:

    seed = derive(parent_seed, "planet", 3)
    planet_type_idx = extract(seed, 5, 1, len(PLANET_TYPES))

Seeds are carried as 64-char lowercase hex strings so that a child key can embed
its parent seed verbatim.  The order of the parts passed to derive() is part of
the output contract: changing it changes every downstream world.
"""

import hashlib
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Tuple, Union

SEED_BYTES = 32
PART_SEPARATOR = "|"


class InvalidGenerationInput(ValueError):
    """Caller passed a key the engine does not accept (bad coordinate, tier, race...)."""


class SeedLayoutError(RuntimeError):
    """Two attributes of one generator read the same seed bytes."""


def derive(*parts: Any) -> str:
    if not parts:
        raise InvalidGenerationInput("derive() needs at least one key part")
    token = PART_SEPARATOR.join(str(p) for p in parts).encode("utf-8")
    return hashlib.sha256(token).hexdigest()


def round_half_up(value: float, ndigits: int = 0) -> Union[int, float]:
    """Round halves away from zero (6.5 -> 7), unlike the builtin round (6.5 -> 6).

    With ndigits=0 the result is an int.
    """
    rounded = Decimal(str(value)).quantize(Decimal(1).scaleb(-ndigits), rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def _check_range(byte_offset: int, byte_length: int) -> None:
    if byte_length < 1:
        raise InvalidGenerationInput(f"byte_length must be >= 1, got {byte_length}")
    if byte_offset < 0 or byte_offset + byte_length > SEED_BYTES:
        raise InvalidGenerationInput(
            f"byte range {byte_offset}..{byte_offset + byte_length - 1} is outside the {SEED_BYTES}-byte seed"
        )


def extract(seed: str, byte_offset: int, byte_length: int, modulus: int) -> int:
    """Read bytes [byte_offset, byte_offset+byte_length) as a big-endian int, mod modulus."""
    _check_range(byte_offset, byte_length)
    if modulus < 1:
        raise InvalidGenerationInput(f"modulus must be >= 1, got {modulus}")
    raw = bytes.fromhex(seed[byte_offset * 2:(byte_offset + byte_length) * 2])
    return int.from_bytes(raw, "big") % modulus


class SeedCursor:
    """Reads attributes from one seed while tracking which bytes are spoken for.

    claim() reads an explicit byte range and fails loudly if any earlier claim
    touched the same bytes.  window() reserves a region that a retry loop may
    read repeatedly through reread(); reads outside the reserved windows are
    rejected.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._claimed: List[Tuple[int, int]] = []
        self._windows: List[Tuple[int, int]] = []

    def _reserve(self, byte_offset: int, byte_length: int) -> None:
        _check_range(byte_offset, byte_length)
        end = byte_offset + byte_length
        for start, stop in self._claimed:
            if byte_offset < stop and start < end:
                raise SeedLayoutError(
                    f"bytes {byte_offset}..{end - 1} overlap earlier claim {start}..{stop - 1}"
                )
        self._claimed.append((byte_offset, end))

    def claim(self, byte_offset: int, byte_length: int, modulus: int) -> int:
        self._reserve(byte_offset, byte_length)
        return extract(self.seed, byte_offset, byte_length, modulus)

    def window(self, byte_offset: int, byte_length: int) -> None:
        self._reserve(byte_offset, byte_length)
        self._windows.append((byte_offset, byte_offset + byte_length))

    def reread(self, byte_offset: int, byte_length: int, modulus: int) -> int:
        end = byte_offset + byte_length
        if not any(start <= byte_offset and end <= stop for start, stop in self._windows):
            raise SeedLayoutError(f"reread of bytes {byte_offset}..{end - 1} is outside every reserved window")
        return extract(self.seed, byte_offset, byte_length, modulus)

    def claimed_ranges(self) -> List[Tuple[int, int]]:
        return list(self._claimed)
