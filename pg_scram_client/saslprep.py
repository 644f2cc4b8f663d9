# SPDX-License-Identifier: LGPL-3.0-or-later
# SASLprep profile of stringprep used to prepare passwords

import stringprep
import unicodedata

from .error import NormalizationError


__all__ = ['saslprep']


# (predicate, description) for RFC 4013, Section 2.3 prohibited output
_PROHIBITED_TABLES = (
    (stringprep.in_table_c12, 'C.1.2: Non-ASCII space'),
    (stringprep.in_table_c21, 'C.2.1: ASCII control'),
    (stringprep.in_table_c22, 'C.2.2: Non-ASCII control'),
    (stringprep.in_table_c3, 'C.3: Private use'),
    (stringprep.in_table_c4, 'C.4: Non-character'),
    (stringprep.in_table_c5, 'C.5: Surrogate'),
    (stringprep.in_table_c6, 'C.6: Inappropriate for plain text'),
    (stringprep.in_table_c7, 'C.7: Inappropriate for canonical representation'),
    (stringprep.in_table_c8, 'C.8: Change display properties'),
    (stringprep.in_table_c9, 'C.9: Tagging character'),
)


def _map(value: str) -> str:
    # RFC 4013, Section 2.1: non-ASCII spaces map to SPACE, table B.1 maps to nothing
    chars = []
    for c in value:
        if stringprep.in_table_c12(c):
            chars.append(' ')
        elif not stringprep.in_table_b1(c):
            chars.append(c)

    return ''.join(chars)


def saslprep(value: str, *, allow_unassigned: bool = False) -> str:
    """
    Implements the SASLprep profile of stringprep (RFC 4013).

    Passwords are prepared as "stored strings", so unassigned code points are
    rejected unless `allow_unassigned` is set (query mode).

    Args:
        value: The string to prepare
        allow_unassigned: Permit code points unassigned in Unicode 3.2

    Returns:
        The prepared string

    Raises:
        TypeError: If value is not a string
        NormalizationError: If the string contains prohibited characters or
            violates the bidirectional rules

    References:
        RFC 4013 - SASLprep: Stringprep Profile for User Names and Passwords
        RFC 3454 - Preparation of Internationalized Strings ("stringprep")
    """
    if not isinstance(value, str):
        raise TypeError('value must be a string')

    if not value:
        return value

    # RFC 4013, Section 2.2: Unicode normalization form KC, with the Unicode
    # version that stringprep tables are defined against
    normalized = unicodedata.ucd_3_2_0.normalize('NFKC', _map(value))

    for i, c in enumerate(normalized):
        for in_table, description in _PROHIBITED_TABLES:
            if in_table(c):
                raise NormalizationError(
                    f'Character at position {i} is prohibited (RFC 3454, {description})'
                )

        # RFC 4013, Section 2.5: unassigned code points
        if not allow_unassigned and stringprep.in_table_a1(c):
            raise NormalizationError(
                f'Character at position {i} is prohibited (RFC 3454, A.1: Unassigned code point)'
            )

    # RFC 3454, Section 6: bidirectional characters
    has_RandALCat = any(stringprep.in_table_d1(c) for c in normalized)
    if has_RandALCat:
        if any(stringprep.in_table_d2(c) for c in normalized):
            raise NormalizationError(
                'String contains both RandALCat and LCat characters (RFC 3454, Section 6)'
            )

        if not stringprep.in_table_d1(normalized[0]) or not stringprep.in_table_d1(normalized[-1]):
            raise NormalizationError(
                'String containing RandALCat characters must start and end with one '
                '(RFC 3454, Section 6)'
            )

    return normalized
