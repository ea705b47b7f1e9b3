"""Character sources, input sources and output sinks: the only places the interpreter touches the outside world.

- A LineSource hands the scanner one line at a time and counts lines from 1.
- An input source hands a read statement one integer.
- An output sink takes one integer per write statement.
"""

import sys

from tinylang.lang.error import TinyInputError, TinyIOError


class LineSource:
    """Sequential, pull-based source of lines. line_num is the number of the line last fetched (0 before any)."""

    def __init__(self, lines, closer=None, path=None):
        self._lines = iter(lines)
        self.path = path  # for error messages, if the lines come from a file
        self._closer = closer  # called once the source is exhausted
        self.line_num = 0
        self.exhausted = False

    @classmethod
    def from_text(cls, text):
        return cls(text.splitlines(keepends=True))

    @classmethod
    def from_path(cls, path):
        try:
            file = open(path, "r", encoding="utf-8")
        except OSError:
            raise TinyIOError(path)
        return cls(file, closer=file.close, path=path)

    def fetch(self):
        """Returns the next line, or None once the source is exhausted."""
        if self.exhausted:
            return None

        try:
            line = next(self._lines, None)
        except UnicodeDecodeError:
            self.close()
            raise TinyIOError(self.path, "is not valid UTF-8 text")
        if line is None:
            self.close()
            return None

        self.line_num += 1
        return line

    def close(self):
        self.exhausted = True
        if self._closer is not None:
            self._closer()
            self._closer = None


class IterInput:
    """Input source backed by a queue of pre-supplied values."""

    def __init__(self, values=()):
        self._values = iter(values)

    def read(self, name):
        try:
            value = next(self._values)
        except StopIteration:
            raise TinyInputError("no input left for '{}'", name)
        return parse_integer(value, name)


class ConsoleInput:
    """Input source that prompts on stream_out and reads one integer per line from stream_in."""
    PROMPT = "Enter {}: "

    def __init__(self, stream_in=None, stream_out=None):
        self.stream_in = stream_in if stream_in is not None else sys.stdin
        self.stream_out = stream_out if stream_out is not None else sys.stdout

    def read(self, name):
        self.stream_out.write(ConsoleInput.PROMPT.format(name))
        self.stream_out.flush()

        line = self.stream_in.readline()
        if not line:
            raise TinyInputError("input ended while reading '{}'", name)
        return parse_integer(line, name)


def parse_integer(value, name):
    """Converts value (an int or a string such as '-12') to int, raising TinyInputError if it is not an integer."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise TinyInputError("'{}' is not an integer (reading '{}')", [str(value).strip(), name])


class ListSink:
    """Output sink that collects written values."""

    def __init__(self):
        self.values = []

    def write(self, value):
        self.values.append(int(value))


class StreamSink:
    """Output sink that renders one value per line, each preceded by prefix."""

    def __init__(self, stream=None, prefix=""):
        self.stream = stream if stream is not None else sys.stdout
        self.prefix = prefix

    def write(self, value):
        self.stream.write(f"{self.prefix}{int(value)}\n")
        self.stream.flush()
