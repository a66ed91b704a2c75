"""
Tokenizer for command templates.

A template is literal text interleaved with three placeholder forms:

    ${NAME}        keyword substitution
    <NAME>         reference to a configured command alias
    [Op(ARGS)]     interactive extension directive, ARGS is a nested template

``tokenize`` turns a template into a flat token list in a single
left-to-right pass. Callers choose which placeholder kinds to recognise;
any other text, including placeholders of kinds that were not requested,
is kept as literal text so a later stage can pick it up.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Kind of template token."""

    LITERAL = "literal"
    KEYWORD = "keyword"
    ALIAS = "alias"
    EXTENSION = "extension"


PLACEHOLDER_KINDS = frozenset({TokenKind.KEYWORD, TokenKind.ALIAS, TokenKind.EXTENSION})

# Placeholder patterns, each with a uniquely named group per captured field
KEYWORD_PATTERN = r"\$\{(?P<keyword>[^\s{}]*)\}"
ALIAS_PATTERN = r"<(?P<alias>[^\s<>]+)>"
EXTENSION_PATTERN = r"\[(?P<operator>[^\s\[\]()]*)\((?P<args>\S*?)\)\]"

_PATTERNS = {
    TokenKind.EXTENSION: EXTENSION_PATTERN,
    TokenKind.KEYWORD: KEYWORD_PATTERN,
    TokenKind.ALIAS: ALIAS_PATTERN,
}


@dataclass(frozen=True)
class LiteralToken:
    """Plain text copied to the output unchanged."""

    raw: str
    start: int
    kind: TokenKind = TokenKind.LITERAL


@dataclass(frozen=True)
class KeywordToken:
    """A ``${name}`` placeholder."""

    name: str
    raw: str
    start: int
    kind: TokenKind = TokenKind.KEYWORD


@dataclass(frozen=True)
class AliasToken:
    """A ``<name>`` placeholder."""

    name: str
    raw: str
    start: int
    kind: TokenKind = TokenKind.ALIAS


@dataclass(frozen=True)
class ExtensionToken:
    """A ``[Op(args)]`` directive; ``args`` is an unexpanded sub-template."""

    operator: str
    args: str
    raw: str
    start: int
    kind: TokenKind = TokenKind.EXTENSION


Token = LiteralToken | KeywordToken | AliasToken | ExtensionToken


def _compile(kinds: frozenset[TokenKind]) -> re.Pattern[str]:
    alternatives = [pattern for kind, pattern in _PATTERNS.items() if kind in kinds]
    return re.compile("|".join(alternatives))


_COMPILED: dict[frozenset[TokenKind], re.Pattern[str]] = {}


def placeholder_pattern(kinds: Iterable[TokenKind]) -> re.Pattern[str]:
    """
    Get the compiled pattern matching the given placeholder kinds.

    Params:
        kinds: Placeholder kinds to recognise; ``TokenKind.LITERAL`` is ignored

    Returns:
        A compiled alternation of the requested placeholder patterns

    Raises:
        ValueError: If no placeholder kind was requested
    """
    key = frozenset(kinds) & PLACEHOLDER_KINDS
    if not key:
        raise ValueError("At least one placeholder kind is required")
    if key not in _COMPILED:
        _COMPILED[key] = _compile(key)
    return _COMPILED[key]


def _token_from_match(match: re.Match[str]) -> Token:
    groups = match.groupdict()
    raw = match.group(0)
    start = match.start()
    if groups.get("operator") is not None:
        return ExtensionToken(
            operator=groups["operator"], args=groups["args"], raw=raw, start=start
        )
    if groups.get("keyword") is not None:
        return KeywordToken(name=groups["keyword"], raw=raw, start=start)
    return AliasToken(name=groups["alias"], raw=raw, start=start)


def tokenize(
    template: str, kinds: Iterable[TokenKind] = PLACEHOLDER_KINDS
) -> list[Token]:
    """
    Split a template into literal and placeholder tokens.

    Adjacent literal text is merged into a single ``LiteralToken``. The
    concatenation of every token's ``raw`` text is always the original
    template.

    Params:
        template: Template text to scan
        kinds: Placeholder kinds to recognise, all of them by default

    Returns:
        Tokens in source order
    """
    pattern = placeholder_pattern(kinds)
    tokens: list[Token] = []
    position = 0
    for match in pattern.finditer(template):
        if match.start() > position:
            tokens.append(
                LiteralToken(raw=template[position : match.start()], start=position)
            )
        tokens.append(_token_from_match(match))
        position = match.end()
    if position < len(template):
        tokens.append(LiteralToken(raw=template[position:], start=position))
    return tokens


def render(tokens: Iterable[Token]) -> str:
    """Reassemble tokens into their source text."""
    return "".join(token.raw for token in tokens)
