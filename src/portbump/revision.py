"""PORTREVISION bumping for port Makefiles.

The transformation is an ordered list of rules. The first rule whose pattern
matches anywhere in the buffer is applied to every match of that pattern;
later rules are not considered. A buffer matched by no rule is returned as is.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from portbump.models import NotNumericRevisionError, RevisionOverflowError

MAX_REVISION = 2**64 - 1
INITIAL_REVISION_LINE = b"PORTREVISION=\t1\n"

_DIGITS_RE = re.compile(rb"[0-9]+")
_PORTREVISION_RE = re.compile(rb"((?:\A|\n)\s*PORTREVISION\s*\??=\s*)(\S+)(.*(?:\n|\Z))")
_DISTVERSION_RE = re.compile(rb"((?:\A|\n)\s*DISTVERSION\s*\??=.*(?:\n|\Z))")
_PORTVERSION_RE = re.compile(rb"((?:\A|\n)\s*PORTVERSION\s*\??=.*(?:\n|\Z))")


@dataclass(slots=True, frozen=True)
class RevisionRule:
    """Pattern plus the rewrite applied to a buffer once the pattern matched."""

    name: str
    pattern: re.Pattern[bytes]
    apply: Callable[[re.Pattern[bytes], re.Match[bytes], bytes], bytes]


def parse_revision(token: bytes) -> int:
    """Parse a PORTREVISION value as an unsigned 64-bit integer."""

    if not _DIGITS_RE.fullmatch(token):
        raise NotNumericRevisionError("not a numeric PORTREVISION")
    value = int(token)
    if value > MAX_REVISION:
        raise RevisionOverflowError(
            f"PORTREVISION {token.decode('ascii')!r}: value out of range",
        )
    return value


def _increment_revision(
    pattern: re.Pattern[bytes],
    match: re.Match[bytes],
    content: bytes,
) -> bytes:
    value = parse_revision(match.group(2))
    if value == MAX_REVISION:
        raise RevisionOverflowError(
            f"PORTREVISION {value}: incremented value out of range",
        )
    bumped = str(value + 1).encode("ascii")
    return pattern.sub(lambda found: found.group(1) + bumped + found.group(3), content)


def _insert_initial_revision(
    pattern: re.Pattern[bytes],
    match: re.Match[bytes],  # noqa: ARG001
    content: bytes,
) -> bytes:
    def _replace(found: re.Match[bytes]) -> bytes:
        line = found.group(1)
        if not line.endswith(b"\n"):
            line += b"\n"
        return line + INITIAL_REVISION_LINE

    return pattern.sub(_replace, content)


REVISION_RULES: tuple[RevisionRule, ...] = (
    RevisionRule(name="portrevision", pattern=_PORTREVISION_RE, apply=_increment_revision),
    RevisionRule(name="distversion", pattern=_DISTVERSION_RE, apply=_insert_initial_revision),
    RevisionRule(name="portversion", pattern=_PORTVERSION_RE, apply=_insert_initial_revision),
)


def match_rule(
    content: bytes,
    rules: tuple[RevisionRule, ...] = REVISION_RULES,
) -> tuple[RevisionRule, re.Match[bytes]] | None:
    """Return the first rule matching ``content`` together with its first match."""

    for rule in rules:
        found = rule.pattern.search(content)
        if found is not None:
            return rule, found
    return None


def bump_revision(content: bytes, rules: tuple[RevisionRule, ...] = REVISION_RULES) -> bytes:
    """Increment PORTREVISION, or add ``PORTREVISION=\\t1`` after the version line.

    Raises :class:`NotNumericRevisionError` or :class:`RevisionOverflowError`
    when an existing PORTREVISION cannot be incremented. Content without
    PORTREVISION, DISTVERSION and PORTVERSION is returned unchanged.
    """

    matched = match_rule(content, rules)
    if matched is None:
        return content
    rule, found = matched
    return rule.apply(rule.pattern, found, content)
