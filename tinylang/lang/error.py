"""Error handling for the TINY interpreter. Only TinyExceptions should be encountered during a run: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every stage raises as soon as it detects a fault; nothing is recovered within a run.
"""

import sys

from termcolor import colored


class TinyException(Exception):
    """Templates an error message so that it can be reported with the offending source line. exprs are the offending
    snippets: exprs[0] is highlighted in the source line when it can be found there.
    """

    def __init__(self, msg, exprs=None, line=None, diagnosis=True, internal=False, column=None):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.plain_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0] if exprs else ""
        self.line = line
        self.column = column  # offset of expr in the raw source line, if known

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain_msg)


class TinySyntaxError(TinyException):
    """Raised when the actual token does not match the kinds the grammar expects. expected is a tuple of TokenKinds."""

    def __init__(self, expected, actual):
        self.expected = tuple(expected)
        self.actual = actual

        msg, exprs = self.describe()
        super().__init__(msg, exprs, line=actual.line, column=actual.column)

    def describe(self):
        """Returns (msg, exprs) for this error."""
        wanted = " or ".join(f"'{kind!s}'" for kind in self.expected)
        if not self.actual.lexeme:
            return f"expected {wanted}, found '{self.actual.kind!s}'", None
        return f"expected {wanted}, found '{self.actual.kind!s}' ('{{}}')", self.actual.lexeme


class TinyLexicalError(TinySyntaxError):
    """Raised when the parser is handed an error token by the scanner. An error token with an empty lexeme marks a
    comment that was never closed.
    """

    def describe(self):
        if not self.actual.lexeme:
            return "unterminated comment", None
        if len(self.actual.lexeme) > 1:
            return "'{}' is too long", self.actual.lexeme
        return "unrecognized character '{}'", self.actual.lexeme


class UnresolvedReferenceError(TinyException):
    """Raised when a variable has no slot in the symbol table at execution time."""

    def __init__(self, name, line=None):
        self.name = name
        super().__init__("variable '{}' was never resolved", name, line=line)


class RuntimeTypeError(TinyException):
    """Raised when an expression is evaluated in a mode (integer or boolean) other than its own."""

    def __init__(self, expected, node):
        self.expected = expected
        self.node = node
        super().__init__(f"expected {expected!s} expression, found {node.expr_type!s} {type(node).__name__}",
                         line=node.line, diagnosis=False)


class ArithmeticFault(TinyException):
    """Raised on division by zero or on a power that does not fit the integer domain."""

    def __init__(self, msg, line=None):
        super().__init__(msg, line=line, diagnosis=False)


class TinyInputError(TinyException):
    """Raised when the input source is exhausted or yields something that is not an integer."""

    def __init__(self, msg, exprs=None, line=None):
        super().__init__(msg, exprs, line=line, diagnosis=False)


class TinyIOError(TinyException):
    """Raised when a source file cannot be opened or decoded."""

    def __init__(self, path, reason="could not be opened"):
        self.path = path
        super().__init__("'{}' " + reason, str(path), diagnosis=False)


class ErrorHandler:
    """Context manager that will report TinyExceptions (and wrap any other Python error) as TINY errors."""
    ERROR = "red"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.files = {}  # dict of path: source lines, insertion-ordered

    def register_file(self, path, lines=None):
        """Registers path (and its source lines, if known) so that reports can quote the offending line. Re-registering
        a path makes it the most recent file again.
        """
        self.files.pop(path, None)
        self.files[path] = list(lines) if lines is not None else []

    def remove_file(self, path):
        self.files.pop(path, None)

    def _print(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stdout)

    def _source_line(self, line_num):
        """Returns (path, source line) for line_num in the most recently registered file."""
        if not self.files or line_num is None:
            return None, None

        path, lines = next(reversed(self.files.items()))
        if 0 < line_num <= len(lines):
            return path, lines[line_num - 1].rstrip("\r\n")
        return path, None

    @staticmethod
    def diagnose(error, line):
        """Returns the stripped line with error.expr highlighted and bolded, followed by a marker line. The marker goes
        under error.column when it holds error.expr, else under the first occurrence of error.expr. Returns None if
        error.expr cannot be found in line.
        """
        if not error.expr:
            return None
        text = line.strip()

        start = None
        if error.column is not None:
            start = error.column - (len(line) - len(line.lstrip()))
            if start < 0 or text[start:start + len(error.expr)] != error.expr:
                start = None
        if start is None:
            if error.expr not in text:
                return None
            start = text.index(error.expr)
        end = start + len(error.expr)

        diagnosis = "  " + text[:start]
        diagnosis += colored(text[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += text[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def report(self, error):
        """Returns the full report for error: location, source line, message and diagnosis."""
        report = ""
        path, line = self._source_line(error.line)

        if path is not None and error.line is not None:
            report += f"  File '{path}', line {error.line}:\n"
            if line is not None:
                report += f"    {line.strip()}\n"
        elif error.line is not None:
            report += f"  line {error.line}:\n"

        if error.internal:
            report += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        report += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg

        if not error.internal and error.diagnosis and line is not None:
            diagnosis = ErrorHandler.diagnose(error, line)
            if diagnosis:
                report += "\n" + diagnosis

        return report

    def throw(self, error):
        """Prints error, then exits if self.fatal. error must be a TinyException."""
        self._print(self.report(error))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(TinyException("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(TinyException("program is nested too deeply, maximum recursion depth exceeded",
                                     diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, TinyException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(TinyException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
