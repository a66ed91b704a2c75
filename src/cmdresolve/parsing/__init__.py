"""
Template parsing for cmdresolve.

This package turns command templates into flat token sequences that the
resolvers evaluate stage by stage.
"""

from cmdresolve.parsing.tokenizer import (
    PLACEHOLDER_KINDS,
    AliasToken,
    ExtensionToken,
    KeywordToken,
    LiteralToken,
    Token,
    TokenKind,
    placeholder_pattern,
    render,
    tokenize,
)

__all__ = [
    "PLACEHOLDER_KINDS",
    "AliasToken",
    "ExtensionToken",
    "KeywordToken",
    "LiteralToken",
    "Token",
    "TokenKind",
    "placeholder_pattern",
    "render",
    "tokenize",
]
