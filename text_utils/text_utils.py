"""
String filters used when turning raw messages into features.
"""

import re

_PUNCTUATIONS = re.compile(r"[.^,@!?$\-]")
_PUNCTUATIONS_AND_NEWLINE = re.compile(r"[.^,@!?$\-\n]|\r\n")

# Only digits and at least 8 of them, so short codes do not match.
# One trailing line terminator is accepted.
_NUMERIC = re.compile(r"\d{8,}(?:\r\n|[\n\r\u0085\u2028\u2029])?", re.ASCII)
# Anything but word characters and spaces, plus the literal "_'"
_NOT_LETTERS_AND_DIGITS = re.compile(r"[^\w ]|_'")


def is_numeric_msisdn(msisdn: str) -> bool:
    """
    Return True if ``msisdn`` is a numeric msisdn of at least 8 digits.

    A single trailing line terminator is ignored, so "12345678\\n" matches.
    A False result means the sender is alphanumeric or a short code.
    """
    return _NUMERIC.fullmatch(msisdn) is not None


def is_alphanumeric_word(word: str) -> bool:
    """
    Return True if ``word`` has both digit and non-digit characters.

    Special characters count as non-digits, so "12$" is alphanumeric.
    """
    has_numbers = any(ch.isdigit() for ch in word)
    has_non_numeric = any(not ch.isdigit() for ch in word)
    return has_numbers and has_non_numeric


def has_special_characters(word: str) -> bool:
    """
    Return True if ``word`` has a character that is neither a letter, a digit
    nor an apostrophe.

    The last character is not inspected: a single trailing special character,
    as in "hello!", is allowed. Apostrophes are allowed because of words such
    as "don't".
    """
    return any(not ch.isalnum() and ch != "'" for ch in word[:-1])


def remove_punctuations(text: str) -> str:
    return _PUNCTUATIONS.sub("", text)


def remove_punctuations_and_newline(text: str) -> str:
    return _PUNCTUATIONS_AND_NEWLINE.sub("", text)


def keep_letters_and_digits(text: str) -> str:
    return _NOT_LETTERS_AND_DIGITS.sub("", text)
