"""Recursive-descent parser for TINY (see tinylang/grammar/tiny.py for the grammar). Each production is one method;
operator precedence comes from how the productions nest, not from a precedence table.

The parser holds exactly one lookahead token and pulls the next one from the scanner only when it consumes the current
one, so scanning and parsing are interleaved. The first grammar violation raises TinySyntaxError and abandons the
whole parse: no partial tree is ever returned.

Expression types are fixed here, at construction time: arithmetic nodes, numbers and identifiers are Integer,
comparisons are Boolean and statements are Void.
"""

import logging

from tinylang.core.scanner import Scanner
from tinylang.core.syntax import Assign, BinaryOp, Identifier, If, Number, Program, Read, Repeat, Write
from tinylang.grammar.tiny import TokenKind
from tinylang.lang.error import TinyLexicalError, TinySyntaxError


logger = logging.getLogger(__name__)

STATEMENT_STARTS = (TokenKind.IF, TokenKind.REPEAT, TokenKind.ID, TokenKind.READ, TokenKind.WRITE)
SEQUENCE_FOLLOWERS = (TokenKind.ENDFILE, TokenKind.END, TokenKind.ELSE, TokenKind.UNTIL)


class Parser:
    """Builds a Program from a token stream. tokens is a Scanner or any iterable of Tokens ending with ENDFILE."""

    def __init__(self, tokens):
        if isinstance(tokens, Scanner):
            self._next = tokens.next_token
        else:
            iterator = iter(tokens)
            self._next = lambda: next(iterator)
        self.token = None  # lookahead

    def _fail(self, *expected):
        if self.token.kind is TokenKind.ERROR:
            raise TinyLexicalError(expected, self.token)
        raise TinySyntaxError(expected, self.token)

    def _advance(self):
        self.token = self._next()

    def _match(self, expected):
        """Consumes the lookahead if it is of kind expected, returning it. Raises TinySyntaxError otherwise."""
        if self.token.kind is not expected:
            self._fail(expected)
        token = self.token
        self._advance()
        return token

    def parse_program(self):
        """program -> stmt_seq ENDFILE"""
        self._advance()
        body = self.parse_stmt_seq()
        self._match(TokenKind.ENDFILE)

        logger.debug("parsed %d top-level statement(s)", len(body))
        return Program(body)

    def parse_stmt_seq(self):
        """stmt_seq -> stmt { ; stmt }"""
        statements = [self.parse_stmt()]
        while self.token.kind not in SEQUENCE_FOLLOWERS:
            self._match(TokenKind.SEMI_COLON)
            statements.append(self.parse_stmt())
        return statements

    def parse_stmt(self):
        """stmt -> if_stmt | repeat_stmt | assign_stmt | read_stmt | write_stmt"""
        kind = self.token.kind
        if kind is TokenKind.IF:
            return self.parse_if_stmt()
        elif kind is TokenKind.REPEAT:
            return self.parse_repeat_stmt()
        elif kind is TokenKind.ID:
            return self.parse_assign_stmt()
        elif kind is TokenKind.READ:
            return self.parse_read_stmt()
        elif kind is TokenKind.WRITE:
            return self.parse_write_stmt()
        self._fail(*STATEMENT_STARTS)

    def parse_if_stmt(self):
        """if_stmt -> if expr then stmt_seq [ else stmt_seq ] end"""
        line = self._match(TokenKind.IF).line
        condition = self.parse_expr()
        self._match(TokenKind.THEN)
        then_body = self.parse_stmt_seq()

        else_body = None
        if self.token.kind is TokenKind.ELSE:
            self._match(TokenKind.ELSE)
            else_body = self.parse_stmt_seq()
        self._match(TokenKind.END)

        return If(condition, then_body, else_body, line=line)

    def parse_repeat_stmt(self):
        """repeat_stmt -> repeat stmt_seq until expr"""
        line = self._match(TokenKind.REPEAT).line
        body = self.parse_stmt_seq()
        self._match(TokenKind.UNTIL)
        return Repeat(body, self.parse_expr(), line=line)

    def parse_assign_stmt(self):
        """assign_stmt -> identifier := expr"""
        target = self._match(TokenKind.ID)
        self._match(TokenKind.ASSIGN)
        return Assign(target.lexeme, self.parse_expr(), line=target.line)

    def parse_read_stmt(self):
        """read_stmt -> read identifier"""
        line = self._match(TokenKind.READ).line
        return Read(self._match(TokenKind.ID).lexeme, line=line)

    def parse_write_stmt(self):
        """write_stmt -> write expr"""
        line = self._match(TokenKind.WRITE).line
        return Write(self.parse_expr(), line=line)

    def parse_expr(self):
        """expr -> math_expr [ (<|=) math_expr ]    at most one comparison"""
        node = self.parse_math_expr()
        if self.token.kind in (TokenKind.LESS_THAN, TokenKind.EQUAL):
            op = self.token
            self._advance()
            node = BinaryOp(op.kind, node, self.parse_math_expr(), line=op.line)
        return node

    def parse_math_expr(self):
        """math_expr -> term { (+|-) term }    left associative"""
        node = self.parse_term()
        while self.token.kind in (TokenKind.PLUS, TokenKind.MINUS):
            op = self.token
            self._advance()
            node = BinaryOp(op.kind, node, self.parse_term(), line=op.line)
        return node

    def parse_term(self):
        """term -> factor { (*|/) factor }    left associative"""
        node = self.parse_factor()
        while self.token.kind in (TokenKind.TIMES, TokenKind.DIVIDE):
            op = self.token
            self._advance()
            node = BinaryOp(op.kind, node, self.parse_factor(), line=op.line)
        return node

    def parse_factor(self):
        """factor -> new_expr { ^ new_expr }    right associative, so parsed as new_expr [ ^ factor ]"""
        node = self.parse_new_expr()
        if self.token.kind is TokenKind.POWER:
            op = self.token
            self._advance()
            node = BinaryOp(op.kind, node, self.parse_factor(), line=op.line)
        return node

    def parse_new_expr(self):
        """new_expr -> number | identifier | ( math_expr )"""
        token = self.token
        if token.kind is TokenKind.NUM:
            self._advance()
            return Number(int(token.lexeme), line=token.line)
        elif token.kind is TokenKind.ID:
            self._advance()
            return Identifier(token.lexeme, line=token.line)
        elif token.kind is TokenKind.LEFT_PAREN:
            self._advance()
            node = self.parse_math_expr()
            self._match(TokenKind.RIGHT_PAREN)
            return node
        self._fail(TokenKind.NUM, TokenKind.ID, TokenKind.LEFT_PAREN)


def parse_program(tokens):
    """Parses tokens (a Scanner, or an iterable of Tokens) into a Program."""
    return Parser(tokens).parse_program()
