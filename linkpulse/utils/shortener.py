"""Shortcodes from the link store's global counter

A counter value is scrambled with a salted affine permutation of the
BASE**length code space and written out in base62, so consecutive links get
unrelated-looking codes of a fixed length:

    >>> generate_shortcode(12345, salt='my_secret')
    'Gh71WPT'
    >>> generate_shortcode(12346, salt='my_secret')
    'Gjy3kGA'

Counters past BASE**length wrap around and reuse earlier codes. Link
creation treats that as an ordinary collision and retries.
"""

import math
import string

import xxhash

from linkpulse.constants import DEFAULT_SHORTCODE_LENGTH, DEFAULT_SHORTCODE_SALT


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)

# Coprime with every power of 62, which keeps the permutation bijective
DEFAULT_MULTIPLIER = 1315423911


def encode_base62(value: int, length: int) -> str:
    """Write `value` (< BASE**length) as exactly `length` base62 digits, most significant first."""
    digits = []
    for _ in range(length):
        value, remainder = divmod(value, BASE)
        digits.append(ALPHABET[remainder])
    return ''.join(reversed(digits))


def generate_shortcode(
    counter: int,
    salt: str = DEFAULT_SHORTCODE_SALT,
    length: int = DEFAULT_SHORTCODE_LENGTH,
    mult: int = DEFAULT_MULTIPLIER,
) -> str:
    """Map a counter value to its shortcode

    Args:
        counter (int):
            Non-negative value from LinkBaseDAO.count(increment=True).
        salt (str):
            Secret shifting the permutation, so codes can't be derived from
            the counter alone. Obfuscation, not encryption.
        length (int):
            Number of base62 characters in the code.
        mult (int):
            Permutation multiplier, coprime with BASE**length.

    Raises:
        TypeError: If counter isn't an int or salt isn't a str.
        ValueError: If counter is negative, salt is empty or mult shares a factor with the code space.
    """
    if not isinstance(counter, int):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not salt:
        raise ValueError('Salt must be a non-empty string.')

    space = BASE**length
    if math.gcd(mult, space) != 1:
        raise ValueError(f'Multiplier must be coprime with {space} (given value: {mult}).')

    offset = xxhash.xxh64_intdigest(salt) % space
    return encode_base62((counter * mult + offset) % space, length)
