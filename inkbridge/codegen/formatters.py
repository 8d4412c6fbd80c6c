"""
Value formatters available to templates.

Case conversions split identifiers into words on underscores, case changes
and digit runs, so `balanceOf`, `BalanceOf` and `balance_of` all convert
the same way.
"""

import re
from typing import Any, Iterable

from ..errors import TemplateError
from ..parser import parse_param_type
from ..type_system import param_type_to_ink


# Acronyms followed by a word, lower/title words with trailing digits,
# upper runs, bare digit runs
WORD_PATTERN = re.compile(r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+[0-9]*|[A-Z]+[0-9]*|[0-9]+')


def _expect_str(value: Any, formatter: str) -> str:
    if not isinstance(value, str):
        raise TemplateError(
            f"'{formatter}' formatter: string value expected, got {type(value).__name__}"
        )
    return value


def split_words(value: str):
    """Split an identifier into its words."""
    return WORD_PATTERN.findall(value)


# =============================================================================
# CASE CONVERSIONS
# =============================================================================

def snake(value: Any) -> str:
    """`balanceOf` -> `balance_of`"""
    return '_'.join(word.lower() for word in split_words(_expect_str(value, 'snake')))


def upper_snake(value: Any) -> str:
    """`balanceOf` -> `BALANCE_OF`"""
    return '_'.join(word.upper() for word in split_words(_expect_str(value, 'upper_snake')))


def upper_camel(value: Any) -> str:
    """`balance_of` -> `BalanceOf`"""
    return ''.join(word[0].upper() + word[1:].lower()
                   for word in split_words(_expect_str(value, 'upper_camel')))


def capitalize(value: Any) -> str:
    """Upper-case the first character and keep the rest verbatim."""
    value = _expect_str(value, 'capitalize')
    if not value:
        return ''
    return value[0].upper() + value[1:]


# =============================================================================
# STRUCTURE
# =============================================================================

def path(value: Any, separator: str = '::') -> str:
    """Join path segments with the separator of the output language."""
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise TemplateError(
            f"'path' formatter: array of strings expected, got {type(value).__name__}"
        )
    segments: Iterable[str] = [_expect_str(segment, 'path') for segment in value]
    return separator.join(segments)


def debug(value: Any) -> str:
    """Debug rendering of any value."""
    return repr(value)


def convert_type(value: Any) -> str:
    """Translate a Solidity type string into its ink! type."""
    raw_type = _expect_str(value, 'convert_type')
    try:
        return param_type_to_ink(parse_param_type(raw_type))
    except SyntaxError as e:
        raise TemplateError(f"'convert_type' formatter: cannot parse '{raw_type}': {e.msg}") from e
