# PATH: tests/unit/test_address.py
"""
Tests for address normalization.
"""

import unittest

from core.address import address_key, is_canonical, is_valid_address, normalize
from core.constants import ErrorCode
from core.exceptions import InvalidAddress

CHECKSUMMED = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
    "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
]


class TestIsValidAddress(unittest.TestCase):
    """Tests for is_valid_address."""

    def test_valid_address(self):
        """Any casing of 0x + 40 hex digits is valid."""
        self.assertTrue(is_valid_address("0x1234567890abcdef1234567890abcdef12345678"))
        self.assertTrue(is_valid_address("0xABCDEF1234567890ABCDEF1234567890ABCDEF12"))

    def test_invalid_address_no_prefix(self):
        self.assertFalse(is_valid_address("1234567890abcdef1234567890abcdef12345678"))

    def test_invalid_address_wrong_length(self):
        self.assertFalse(is_valid_address("0x1234"))
        self.assertFalse(is_valid_address("0x" + "a" * 50))

    def test_invalid_address_non_hex(self):
        self.assertFalse(is_valid_address("0x" + "G" * 40))

    def test_non_string_input(self):
        self.assertFalse(is_valid_address(None))
        self.assertFalse(is_valid_address(123))

    def test_trailing_newline_rejected(self):
        self.assertFalse(is_valid_address(CHECKSUMMED[0] + "\n"))
        self.assertFalse(is_valid_address(CHECKSUMMED[0].lower() + "\n"))
        self.assertFalse(is_valid_address("\n" + CHECKSUMMED[0]))


class TestNormalize(unittest.TestCase):
    """Tests for normalize."""

    def test_lowercase_is_checksummed(self):
        for address in CHECKSUMMED:
            self.assertEqual(normalize(address.lower()), address)

    def test_uppercase_hex_is_checksummed(self):
        for address in CHECKSUMMED:
            self.assertEqual(normalize("0x" + address[2:].upper()), address)

    def test_idempotent(self):
        """normalize(lower(a)) == normalize(a) and normalize is a fixed point."""
        for address in CHECKSUMMED:
            once = normalize(address)
            self.assertEqual(normalize(address.lower()), once)
            self.assertEqual(normalize(once), once)

    def test_malformed_raises(self):
        with self.assertRaises(InvalidAddress) as ctx:
            normalize("0xnothex")
        self.assertEqual(ctx.exception.code, ErrorCode.INVALID_ADDRESS)
        self.assertEqual(ctx.exception.value, "0xnothex")

    def test_non_string_raises(self):
        with self.assertRaises(InvalidAddress):
            normalize(None)

    def test_trailing_newline_raises_invalid_address(self):
        raw = CHECKSUMMED[4].lower() + "\n"
        with self.assertRaises(InvalidAddress) as ctx:
            normalize(raw)
        self.assertEqual(ctx.exception.value, raw)


class TestIsCanonical(unittest.TestCase):
    """Tests for is_canonical."""

    def test_checksummed_is_canonical(self):
        for address in CHECKSUMMED:
            self.assertTrue(is_canonical(address))

    def test_strictness_gap(self):
        """Lowercase input is a valid address but not canonical."""
        lowered = CHECKSUMMED[0].lower()
        self.assertTrue(is_valid_address(lowered))
        self.assertFalse(is_canonical(lowered))

    def test_single_flipped_case_rejected(self):
        address = CHECKSUMMED[0]
        flipped = address[:3] + address[3].swapcase() + address[4:]
        self.assertTrue(is_valid_address(flipped))
        self.assertFalse(is_canonical(flipped))

    def test_invalid_is_not_canonical(self):
        self.assertFalse(is_canonical("0x1234"))
        self.assertFalse(is_canonical(None))
        self.assertFalse(is_canonical(CHECKSUMMED[0] + "\n"))


class TestAddressKey(unittest.TestCase):

    def test_case_insensitive(self):
        address = CHECKSUMMED[1]
        self.assertEqual(address_key(address), address_key(address.lower()))


if __name__ == "__main__":
    unittest.main()
