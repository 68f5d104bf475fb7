# exams/answer_format.py
"""
Parsers for the three answer grammars.

    simple    "A"
    multiple  "A,C,E"
    matching  "A1B2C3"

All parsers are case-insensitive, tolerate whitespace and never raise:
anything malformed comes back as an empty (or partial) result.
"""
import re

_WHITESPACE = re.compile(r"\s+")


def _clean(value):
    if not isinstance(value, str):
        return ""
    return value.strip().upper()


def parse_multiple(value):
    """Comma separated letters -> list of tokens, order kept, duplicates kept."""
    cleaned = _clean(value)
    if not cleaned:
        return []
    return [token.strip() for token in cleaned.split(",") if token.strip()]


def parse_simple(value):
    """Single letter answer -> letter, or "" when empty, ambiguous or longer than one letter."""
    tokens = parse_multiple(value)
    if len(tokens) != 1 or len(tokens[0]) != 1:
        return ""
    return tokens[0]


def parse_matching(value):
    """Letter-digit pairs -> ["A1", "B2", ...]. A trailing letter without digit is dropped."""
    if not isinstance(value, str):
        return []
    compact = _WHITESPACE.sub("", value).upper()
    pairs = []
    for i in range(0, len(compact) - 1, 2):
        letter, digit = compact[i], compact[i + 1]
        if "A" <= letter <= "Z" and "0" <= digit <= "9":
            pairs.append(letter + digit)
    return pairs
