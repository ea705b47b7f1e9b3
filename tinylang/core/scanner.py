"""Lexical analysis for TINY. Converts a line-oriented character source into a lazy stream of tokens.

The scanner never raises on bad input: an unrecognized character comes back as an ERROR token (and the cursor stays on
it), so that the parser decides whether it is fatal. Comments are fully transparent: "{ ... }" never reaches the token
stream.
"""

from dataclasses import dataclass, field

from tinylang.grammar.tiny import MAX_TOKEN_LEN, RESERVED_WORDS, TokenKind, is_digit, is_letter_or_underscore
from tinylang.grammar.tiny import symbol_table
from tinylang.lang.streams import LineSource


WHITESPACE = " \t\r\n"


@dataclass(frozen=True)
class Token:
    """Classified lexeme, tagged with the line its first character was read on and its offset in that line."""
    kind: TokenKind
    lexeme: str
    line: int
    column: int = field(default=None, compare=False)

    def display(self):
        """Format: [<line>] <lexeme> (<kind>)"""
        return f"[{self.line}] {self.lexeme} ({self.kind!s})"

    def __str__(self):
        return self.display()


class Scanner:
    """Demand-driven scanner: each call to next_token reads only as much of the source as it needs."""

    def __init__(self, source, equal="="):
        """source is a LineSource, a string, or any iterable of lines. equal is the equality lexeme ("=" or "==")."""
        if isinstance(source, str):
            source = LineSource.from_text(source)
        elif not isinstance(source, LineSource):
            source = LineSource(source)

        self.source = source
        self.symbols = symbol_table(equal)

        self.buffer = ""  # current line
        self.pos = 0      # offset of the next unread character in self.buffer

    @property
    def line_num(self):
        return self.source.line_num

    def _skip_whitespace(self):
        """Moves the cursor to the next non-whitespace character, fetching lines as needed. Returns False at end of
        input.
        """
        while True:
            while self.pos < len(self.buffer) and self.buffer[self.pos] in WHITESPACE:
                self.pos += 1
            if self.pos < len(self.buffer):
                return True

            line = self.source.fetch()
            if line is None:
                return False
            self.buffer, self.pos = line, 0

    def _skip_past(self, closing):
        """Discards input up to and including closing. Returns False if input ends first."""
        while True:
            idx = self.buffer.find(closing, self.pos)
            if idx != -1:
                self.pos = idx + len(closing)
                return True

            line = self.source.fetch()
            if line is None:
                self.buffer, self.pos = "", 0
                return False
            self.buffer, self.pos = line, 0

    def _take_while(self, predicate):
        start = self.pos
        while self.pos < len(self.buffer) and predicate(self.buffer[self.pos]):
            self.pos += 1
        return self.buffer[start:self.pos]

    def _match_symbol(self):
        """Returns the first (lexeme, kind) in the symbol table that the input at the cursor starts with, if any."""
        for lexeme, kind in self.symbols:
            if self.buffer.startswith(lexeme, self.pos):
                return lexeme, kind
        return None

    def next_token(self):
        """Returns the next token. Once the source is exhausted, every call returns an ENDFILE token."""
        while True:
            if not self._skip_whitespace():
                return Token(TokenKind.ENDFILE, "", self.line_num)
            line, column = self.line_num, self.pos

            symbol = self._match_symbol()
            if symbol is not None:
                lexeme, kind = symbol
                self.pos += len(lexeme)

                if kind is TokenKind.LEFT_BRACE:
                    closing = next(lex for lex, sym_kind in self.symbols if sym_kind is TokenKind.RIGHT_BRACE)
                    if not self._skip_past(closing):
                        return Token(TokenKind.ERROR, "", line, column)
                    continue  # comment discarded, scan the token after it
                return Token(kind, lexeme, line, column)

            char = self.buffer[self.pos]
            if is_letter_or_underscore(char):
                word = self._take_while(is_letter_or_underscore)
                kind = RESERVED_WORDS.get(word, TokenKind.ID)
            elif is_digit(char):
                word = self._take_while(is_digit)
                kind = TokenKind.NUM
            else:
                return Token(TokenKind.ERROR, char, line, column)  # cursor is not advanced

            if len(word) > MAX_TOKEN_LEN:
                return Token(TokenKind.ERROR, word[:MAX_TOKEN_LEN], line, column)
            return Token(kind, word, line, column)

    def __iter__(self):
        """Yields tokens up to and including the first ENDFILE or ERROR token."""
        while True:
            token = self.next_token()
            yield token
            if token.kind in (TokenKind.ENDFILE, TokenKind.ERROR):
                return


def tokenize(source, equal="="):
    """Returns the full token list of source (see Scanner.__iter__)."""
    return list(Scanner(source, equal))
