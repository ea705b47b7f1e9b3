"""TINY token vocabulary, shared by the scanner, parser and every later stage.

Formally, TINY can be defined as

```
<program>     ::= <stmt_seq>
<stmt_seq>    ::= <stmt> { ";" <stmt> }
<stmt>        ::= <if_stmt> | <repeat_stmt> | <assign_stmt> | <read_stmt> | <write_stmt>
<if_stmt>     ::= "if" <expr> "then" <stmt_seq> [ "else" <stmt_seq> ] "end"
<repeat_stmt> ::= "repeat" <stmt_seq> "until" <expr>   ; body runs at least once
<assign_stmt> ::= <identifier> ":=" <expr>
<read_stmt>   ::= "read" <identifier>
<write_stmt>  ::= "write" <expr>
<expr>        ::= <math_expr> [ ("<" | "=") <math_expr> ]
<math_expr>   ::= <term> { ("+" | "-") <term> }           ; associating by left
<term>        ::= <factor> { ("*" | "/") <factor> }        ; associating by left
<factor>      ::= <new_expr> { "^" <new_expr> }            ; associating by right: 2^3^2 = 2^(3^2)
<new_expr>    ::= <number> | <identifier> | "(" <math_expr> ")"

<comment>     ::= "{" <char>* "}"                          ; not nestable
```

Identifiers are runs of letters and underscores, numbers are runs of digits. No lexeme may be longer than
MAX_TOKEN_LEN characters.
"""

from enum import Enum


MAX_TOKEN_LEN = 40


class TokenKind(Enum):
    """Closed set of token kinds. Values are the names used in debug listings."""
    IF = "If"
    THEN = "Then"
    ELSE = "Else"
    END = "End"
    REPEAT = "Repeat"
    UNTIL = "Until"
    READ = "Read"
    WRITE = "Write"

    ASSIGN = "Assign"
    EQUAL = "Equal"
    LESS_THAN = "LessThan"
    PLUS = "Plus"
    MINUS = "Minus"
    TIMES = "Times"
    DIVIDE = "Divide"
    POWER = "Power"
    SEMI_COLON = "SemiColon"
    LEFT_PAREN = "LeftParen"
    RIGHT_PAREN = "RightParen"
    LEFT_BRACE = "LeftBrace"
    RIGHT_BRACE = "RightBrace"

    ID = "ID"
    NUM = "Num"
    ENDFILE = "EndFile"
    ERROR = "Error"

    def __str__(self):
        return self.value


RESERVED_WORDS = {
    "if": TokenKind.IF,
    "then": TokenKind.THEN,
    "else": TokenKind.ELSE,
    "end": TokenKind.END,
    "repeat": TokenKind.REPEAT,
    "until": TokenKind.UNTIL,
    "read": TokenKind.READ,
    "write": TokenKind.WRITE,
}

# tested in order: longer lexemes must come before their prefixes (":=" before "=")
SYMBOLS = [
    (":=", TokenKind.ASSIGN),
    ("=", TokenKind.EQUAL),
    ("<", TokenKind.LESS_THAN),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.TIMES),
    ("/", TokenKind.DIVIDE),
    ("^", TokenKind.POWER),
    (";", TokenKind.SEMI_COLON),
    ("(", TokenKind.LEFT_PAREN),
    (")", TokenKind.RIGHT_PAREN),
    ("{", TokenKind.LEFT_BRACE),
    ("}", TokenKind.RIGHT_BRACE),
]

EQUAL_LEXEMES = ("=", "==")

ARITHMETIC_OPS = (TokenKind.PLUS, TokenKind.MINUS, TokenKind.TIMES, TokenKind.DIVIDE, TokenKind.POWER)
RELATIONAL_OPS = (TokenKind.LESS_THAN, TokenKind.EQUAL)


def symbol_table(equal="="):
    """Returns the ordered symbol table with equal as the equality lexeme. Raises ValueError for unsupported lexemes."""
    if equal not in EQUAL_LEXEMES:
        raise ValueError(f"equality lexeme must be one of {EQUAL_LEXEMES}, got {equal!r}")

    symbols = [(equal if kind is TokenKind.EQUAL else lexeme, kind) for lexeme, kind in SYMBOLS]
    # stable sort: lexemes of the same length stay in table order
    return sorted(symbols, key=lambda symbol: -len(symbol[0]))


def is_letter_or_underscore(char):
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def is_digit(char):
    return "0" <= char <= "9"
