"""
Seed derivation tests — digest format, byte extraction and layout guards.

Covers: derive() determinism and separator, extract() byte order and bounds,
SeedCursor overlap detection and reread windows, collision resistance over a
million coordinates, half-up rounding.
"""

import hashlib
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

SHA_A = "ca978112ca1bbdcafac231b39a23dc4da786eff8147c4e72b9807785afee48bb"


# ── derive ───────────────────────────────────────────────────────────────────

class TestDerive:
    def test_known_digest(self):
        from seed_service import derive
        assert derive("a") == SHA_A

    def test_parts_joined_with_pipe(self):
        from seed_service import derive
        assert derive(1, 2, 3) == hashlib.sha256(b"1|2|3").hexdigest()
        assert derive(1, 2, 3) == derive("1|2|3")

    def test_order_matters(self):
        from seed_service import derive
        assert derive("x", 1) != derive(1, "x")

    def test_repeatable(self):
        from seed_service import derive
        assert derive("world", 3, 6, 9) == derive("world", 3, 6, 9)

    def test_no_parts_rejected(self):
        from seed_service import InvalidGenerationInput, derive
        with pytest.raises(InvalidGenerationInput):
            derive()

    def test_coordinate_seeds_do_not_collide(self):
        """A million distinct coordinates produce a million distinct seeds."""
        from seed_service import derive

        prefixes = set()
        count = 0
        for x in range(100):
            for y in range(100):
                for z in range(100):
                    prefixes.add(int(derive("collision", x, y, z)[:16], 16))
                    count += 1
        assert count == 1_000_000
        assert len(prefixes) == count


# ── extract ──────────────────────────────────────────────────────────────────

class TestExtract:
    def test_single_byte(self):
        from seed_service import extract
        assert extract(SHA_A, 0, 1, 256) == 0xCA

    def test_big_endian_two_bytes(self):
        from seed_service import extract
        assert extract(SHA_A, 0, 2, 65536) == 0xCA97

    def test_modulus_applied(self):
        from seed_service import extract
        assert extract(SHA_A, 0, 1, 10) == 0xCA % 10

    def test_last_byte(self):
        from seed_service import extract
        assert extract(SHA_A, 31, 1, 256) == 0xBB

    @pytest.mark.parametrize("offset,length", [(31, 2), (-1, 1), (0, 0), (32, 1)])
    def test_out_of_range_rejected(self, offset, length):
        from seed_service import InvalidGenerationInput, extract
        with pytest.raises(InvalidGenerationInput):
            extract(SHA_A, offset, length, 10)

    def test_zero_modulus_rejected(self):
        from seed_service import InvalidGenerationInput, extract
        with pytest.raises(InvalidGenerationInput):
            extract(SHA_A, 0, 1, 0)

    def test_invalid_input_is_value_error(self):
        from seed_service import InvalidGenerationInput
        assert issubclass(InvalidGenerationInput, ValueError)


# ── SeedCursor ───────────────────────────────────────────────────────────────

class TestSeedCursor:
    def test_claim_matches_extract(self):
        from seed_service import SeedCursor, extract
        cursor = SeedCursor(SHA_A)
        assert cursor.claim(4, 3, 1000) == extract(SHA_A, 4, 3, 1000)

    def test_overlapping_claim_rejected(self):
        from seed_service import SeedCursor, SeedLayoutError
        cursor = SeedCursor(SHA_A)
        cursor.claim(0, 2, 10)
        with pytest.raises(SeedLayoutError):
            cursor.claim(1, 1, 10)

    def test_adjacent_claims_allowed(self):
        from seed_service import SeedCursor
        cursor = SeedCursor(SHA_A)
        cursor.claim(0, 2, 10)
        cursor.claim(2, 2, 10)
        assert cursor.claimed_ranges() == [(0, 2), (2, 4)]

    def test_reread_inside_window(self):
        from seed_service import SeedCursor, extract
        cursor = SeedCursor(SHA_A)
        cursor.window(1, 15)
        assert cursor.reread(3, 1, 7) == extract(SHA_A, 3, 1, 7)
        # Rereads may cover the same bytes.
        assert cursor.reread(3, 1, 7) == extract(SHA_A, 3, 1, 7)

    def test_reread_outside_window_rejected(self):
        from seed_service import SeedCursor, SeedLayoutError
        cursor = SeedCursor(SHA_A)
        cursor.window(1, 4)
        with pytest.raises(SeedLayoutError):
            cursor.reread(5, 1, 7)

    def test_claim_inside_window_rejected(self):
        from seed_service import SeedCursor, SeedLayoutError
        cursor = SeedCursor(SHA_A)
        cursor.window(1, 4)
        with pytest.raises(SeedLayoutError):
            cursor.claim(2, 1, 7)


# ── round_half_up ────────────────────────────────────────────────────────────

class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(6.5, 7), (10.5, 11), (2.5, 3), (2.4999, 2), (-2.5, -3), (7, 7)])
    def test_halves_round_away_from_zero(self, value, expected):
        from seed_service import round_half_up
        assert round_half_up(value) == expected

    def test_integer_result(self):
        from seed_service import round_half_up
        assert isinstance(round_half_up(5 * 1.3), int)

    def test_decimal_places(self):
        from seed_service import round_half_up
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(1.0, 2) == 1.0
