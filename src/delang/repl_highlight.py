"""Syntax colouring for the De REPL, driven by the real lexer."""

from __future__ import annotations

from typing import Callable, Optional

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import LexError, tokenize
from .token_types import COMPARATORS, TT, Tok

GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "comparator": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "function": "bold ansiyellow",
    "error": "bold ansired",
}

_KEYWORDS = frozenset({
    TT.LET, TT.BE, TT.WHEN, TT.THEN, TT.OTHERWISE,
    TT.SHOW, TT.DEFINE, TT.WITH, TT.END,
})

_LAYOUT = frozenset({TT.NEWLINE, TT.INDENT, TT.DEDENT, TT.EOF})


def _group(tok: Tok, prev: Optional[Tok], nxt: Optional[Tok]) -> Optional[str]:
    if tok.type in _KEYWORDS:
        return "keyword"
    if tok.type in COMPARATORS:
        return "comparator"
    if tok.type == TT.NUMBER:
        return "number"
    if tok.type == TT.STRING:
        return "string"
    if tok.type == TT.IDENT:
        # name in `define name` or `name(...)`
        if (prev is not None and prev.type == TT.DEFINE) or (nxt is not None and nxt.type == TT.LPAR):
            return "function"
    return None


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Styled fragments for one line; the fragments always join back to *text*."""
    try:
        tokens = [tok for tok in tokenize(text) if tok.type not in _LAYOUT]
    except LexError:
        return [(GROUP_STYLE["error"], text)]

    fragments: StyleAndTextTuples = []
    cursor = 0

    for idx, tok in enumerate(tokens):
        prev = tokens[idx - 1] if idx else None
        nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None

        start = tok.column - 1
        stop = nxt.column - 1 if nxt is not None else len(text)
        # A token's text runs up to the next token minus trailing blanks.
        body = text[start:stop].rstrip(" \t")

        if start > cursor:
            fragments.append(("", text[cursor:start]))

        group = _group(tok, prev, nxt)
        fragments.append((GROUP_STYLE[group] if group else "", body))
        cursor = start + len(body)

    if cursor < len(text):
        fragments.append(("", text[cursor:]))

    return fragments or [("", text)]


class DeLexer(Lexer):
    """prompt_toolkit lexer that colours each buffer line independently."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        styled = [_highlight_line(line) for line in lines]

        def get_line(lineno: int) -> StyleAndTextTuples:
            return styled[lineno] if lineno < len(styled) else []

        return get_line
