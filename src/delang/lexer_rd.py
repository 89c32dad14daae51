"""
Lexer for De - Recursive Descent front end

Tokenizes De source code into a stream of tokens.

Features:
- Single-pass tokenization with one forward cursor
- Indentation-aware (emits INDENT/DEDENT from a stack of widths)
- Multi-word comparator phrases matched speculatively with snapshot/restore
- Position tracking (line, column)
"""

import logging
from typing import List, NamedTuple, Tuple

from .token_types import TT, Tok

logger = logging.getLogger(__name__)

TAB_WIDTH = 4

# ============================================================================
# Errors
# ============================================================================

class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")

class UnexpectedCharacterError(LexError):
    def __init__(self, char: str, line: int, column: int):
        super().__init__(f"Unexpected character '{char}'", line, column)
        self.char = char

class UnterminatedStringError(LexError):
    pass

class InvalidEscapeError(LexError):
    pass

class InvalidNumberError(LexError):
    pass

# ============================================================================
# Lexer Implementation
# ============================================================================

class Cursor(NamedTuple):
    """Saved scanner position for speculative matching."""

    pos: int
    line: int
    column: int

class Lexer:
    """
    De lexer with indentation handling.

    Based on Python's indentation model:
    - Track stack of indentation widths, starting at [0]
    - Emit INDENT when width increases
    - Emit one DEDENT per popped width when it decreases
    """

    KEYWORDS = {
        'let': TT.LET,
        'be': TT.BE,
        'when': TT.WHEN,
        'then': TT.THEN,
        'otherwise': TT.OTHERWISE,
        'show': TT.SHOW,
        'define': TT.DEFINE,
        'with': TT.WITH,
        'end': TT.END,
    }

    # Comparator phrases: longest first so that no phrase is shadowed by one of
    # its own prefixes.
    PHRASES: List[Tuple[Tuple[str, ...], TT]] = [
        (('is', 'greater', 'than', 'or', 'equal', 'to'), TT.GTE),
        (('is', 'less', 'than', 'or', 'equal', 'to'), TT.LTE),
        (('is', 'greater', 'than', 'or', 'equal'), TT.GTE),
        (('is', 'less', 'than', 'or', 'equal'), TT.LTE),
        (('is', 'not', 'equal', 'to'), TT.NEQ),
        (('is', 'greater', 'than'), TT.GT),
        (('is', 'less', 'than'), TT.LT),
        (('is', 'equal', 'to'), TT.EQ),
    ]

    OPERATORS = [
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        (',', TT.COMMA),
    ]

    ESCAPES = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        '\\': '\\',
        '"': '"',
    }

    def __init__(self, source: str, strict_numbers: bool = False):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []
        self.strict_numbers = strict_numbers

        # Indentation tracking
        self.indent_stack = [0]
        self.at_line_start = False

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        # Close every block still open at EOF
        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self.emit(TT.DEDENT, '')

        self.emit(TT.EOF, None)
        logger.debug("lexed %d tokens over %d lines", len(self.tokens), self.line)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.at_line_start:
            self.handle_indentation()
            return

        # Skip whitespace (not newlines)
        if self.skip_whitespace():
            return

        ch = self.peek()

        if ch in ('\n', '\r'):
            self.scan_newline()
            return

        if ch == '"':
            self.scan_string()
            return

        if ch.isascii() and ch.isdigit():
            self.scan_number()
            return

        if ch.isalpha() or ch == '_':
            self.scan_word()
            return

        self.scan_operator()

    # ========================================================================
    # Indentation Handling
    # ========================================================================

    def handle_indentation(self):
        """
        Measure the indentation of a fresh line and emit INDENT/DEDENT tokens.
        Whitespace-only lines leave the stack untouched.
        """
        width = 0
        while self.peek() in (' ', '\t'):
            width += TAB_WIDTH if self.peek() == '\t' else 1
            self.advance()

        self.at_line_start = False

        if self.pos >= len(self.source) or self.peek() in ('\n', '\r'):
            return

        if width > self.indent_stack[-1]:
            self.indent_stack.append(width)
            self.emit(TT.INDENT, width)
            return

        while self.indent_stack[-1] > width:
            self.indent_stack.pop()
            self.emit(TT.DEDENT, width)

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_newline(self):
        """Scan newline character"""
        line, column = self.line, self.column
        if self.peek() == '\r' and self.peek(1) == '\n':
            self.advance(2)  # consume CRLF
        else:
            self.advance()

        self.emit(TT.NEWLINE, '\n', line, column)
        self.line += 1
        self.column = 1
        self.at_line_start = True

    def scan_string(self):
        """Scan a double-quoted text literal, decoding escapes."""
        start_line, start_col = self.line, self.column
        self.advance()  # opening quote
        chars: List[str] = []

        while True:
            if self.pos >= len(self.source):
                raise UnterminatedStringError("Unterminated string literal", start_line, start_col)

            ch = self.peek()

            if ch == '"':
                self.advance()
                break

            if ch == '\\':
                esc_line, esc_col = self.line, self.column
                self.advance()
                if self.pos >= len(self.source):
                    raise UnterminatedStringError("Unterminated string literal", start_line, start_col)
                code = self.advance()
                if code not in self.ESCAPES:
                    raise InvalidEscapeError(f"Invalid escape sequence '\\{code}'", esc_line, esc_col)
                chars.append(self.ESCAPES[code])
                continue

            chars.append(self.advance())
            if ch == '\n':
                self.line += 1
                self.column = 1

        self.emit(TT.STRING, ''.join(chars), start_line, start_col)

    def scan_number(self):
        """Scan the longest run of digits and decimal points."""
        line, column = self.line, self.column
        text = ''

        while (self.peek().isascii() and self.peek().isdigit()) or self.peek() == '.':
            text += self.advance()

        try:
            value = float(text)
        except ValueError:
            if self.strict_numbers:
                raise InvalidNumberError(f"Invalid number literal '{text}'", line, column) from None
            logger.debug("malformed number %r at %d:%d read as 0", text, line, column)
            value = 0.0

        self.emit(TT.NUMBER, value, line, column)

    def scan_word(self):
        """Scan a comparator phrase, keyword or identifier."""
        line, column = self.line, self.column

        for words, token_type in self.PHRASES:
            if self.match_phrase(words):
                self.emit(token_type, ' '.join(words), line, column)
                return

        value = self.read_word()
        self.emit(self.KEYWORDS.get(value, TT.IDENT), value, line, column)

    def match_phrase(self, words: Tuple[str, ...]) -> bool:
        """Consume `words` if they come next; otherwise leave the cursor untouched."""
        saved = self.snapshot()

        for i, word in enumerate(words):
            if i and not self.skip_whitespace():
                self.restore(saved)
                return False

            if self.read_word() != word:
                self.restore(saved)
                return False

        return True

    def read_word(self) -> str:
        value = ''
        while self.peek().isalnum() or self.peek() == '_':
            value += self.advance()
        return value

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                line, column = self.line, self.column
                self.advance(len(op_str))
                self.emit(op_type, op_str, line, column)
                return

        raise UnexpectedCharacterError(self.peek(), self.line, self.column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def snapshot(self) -> Cursor:
        return Cursor(self.pos, self.line, self.column)

    def restore(self, cursor: Cursor):
        self.pos, self.line, self.column = cursor

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]
        self.pos += n
        self.column += n
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace (not newlines), return True if any skipped"""
        skipped = False
        while self.peek() in (' ', '\t'):
            self.advance()
            skipped = True
        return skipped

    def emit(self, token_type: TT, value, line: int = 0, column: int = 0):
        """Emit a token"""
        self.tokens.append(Tok(
            type=token_type,
            value=value,
            line=line or self.line,
            column=column or self.column,
        ))

def tokenize(source: str, strict_numbers: bool = False) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source, strict_numbers=strict_numbers).tokenize()
