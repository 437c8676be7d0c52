"""
Text normalization helpers.
"""

from .text_utils import (
    has_special_characters,
    is_alphanumeric_word,
    is_numeric_msisdn,
    keep_letters_and_digits,
    remove_punctuations,
    remove_punctuations_and_newline,
)

__all__ = [
    "is_numeric_msisdn",
    "is_alphanumeric_word",
    "has_special_characters",
    "remove_punctuations",
    "remove_punctuations_and_newline",
    "keep_letters_and_digits",
]
