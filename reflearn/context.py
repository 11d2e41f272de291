"""Turns raw left/right context strings into fixed-width feature rows.

A context string is split on whitespace; the first five tokens of each side
become the ten lexical features of a `FeatureRow`. Each token is XML
unescaped and then has its regular-expression metacharacters escaped, so
the stored value can later be dropped into a pattern as a literal.
"""
from __future__ import annotations
import html
import logging
import re
from typing import List, Optional

from .errors import ShortContextRejected
from .types import ContextExample, FeatureRow, check_label

logger = logging.getLogger(__name__)

WINDOW = 5

# Whitespace is the ASCII set only; NBSP and other Unicode spaces stay inside tokens.
_WS_RE = re.compile(r"[ \t\n\x0b\f\r]+")
_TRIM_CHARS = "".join(chr(c) for c in range(0x21))
_REGEX_META_RE = re.compile(r"([.*+?^$()\[\]{}|\\])")
_XML_ENTITY_RE = re.compile(r"&(?:amp|lt|gt|quot|apos|#\d+|#x[0-9a-fA-F]+);")


def unescape_xml(token: str) -> str:
    """Replaces XML character entities (`&amp;`, `&lt;`, `&#38;`, ...) with their characters."""
    return _XML_ENTITY_RE.sub(lambda m: html.unescape(m.group(0)), token)


def normalize_regex(token: str) -> str:
    """Backslash-escapes `. * + ? ^ $ ( ) [ ] { } | \\` in `token`."""
    return _REGEX_META_RE.sub(r"\\\1", token)


def normalize_token(token: str) -> str:
    return normalize_regex(unescape_xml(token))


def split_context(raw: str, width: int = WINDOW) -> List[str]:
    """
    Splits a raw context on runs of ASCII whitespace.

    Leading and trailing control characters and spaces are trimmed first.

    Raises:
        ShortContextRejected: If fewer than `width` tokens are found.
    """
    trimmed = raw.strip(_TRIM_CHARS)
    tokens = _WS_RE.split(trimmed) if trimmed else []
    if len(tokens) < width:
        raise ShortContextRejected(raw, len(tokens), width)
    return tokens


def normalize(example: ContextExample, log: Optional[logging.Logger] = None) -> Optional[FeatureRow]:
    """
    Builds the feature row for one example, or rejects it.

    The first five left tokens fill `l5` .. `l1` and the first five right
    tokens fill `r1` .. `r5`, in that order.

    Args:
        example: The raw context pair and its label.
        log: Logger receiving the warning for a rejected context.

    Returns:
        The `FeatureRow`, or None when either side has fewer than five tokens.
        A single warning naming the offending context is logged in that case.

    Raises:
        InvalidLabel: If the example's label is not `True` or `False`.
    """
    log = log or logger
    check_label(example.label)
    try:
        left = split_context(example.left)
        right = split_context(example.right)
    except ShortContextRejected as e:
        log.warning("Warning: ignoring context: %s", e.context)
        return None

    values = [normalize_token(t) for t in left[:WINDOW]]
    values += [normalize_token(t) for t in right[:WINDOW]]
    return FeatureRow(*values, cls=example.label)
