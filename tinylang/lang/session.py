"""Session control for the TINY interpreter: owns one source, and drives it through scanning, parsing, resolution and
execution, either for a file or for a program typed into the shell.
"""

import logging

from tinylang.core.executor import Executor
from tinylang.core.parser import Parser
from tinylang.core.scanner import Scanner, tokenize
from tinylang.core.symbols import resolve
from tinylang.lang.error import TinyIOError
from tinylang.lang.streams import ConsoleInput, LineSource, StreamSink


logger = logging.getLogger(__name__)


class Session:
    """Governs a single program run. Each stage runs on demand and its result is kept for later stages."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, text=None, cmd_line=False, equal="=", input_source=None,
                 output_sink=None):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.equal = equal        # equality lexeme

        self.input_source = input_source if input_source is not None else ConsoleInput()
        self.output_sink = output_sink if output_sink is not None else StreamSink(prefix="Val: ")

        if self.cmd_line:
            self.error_handler.fatal = False

        if text is None:
            if path == Session.SH_FILE:
                raise TinyIOError(path)
            text = self._load(path)
        self.lines = text.splitlines(keepends=True)
        self.error_handler.register_file(path, self.lines)

        self.program = None
        self.symbols = None
        self.executor = None

    @staticmethod
    def _load(path):
        source = LineSource.from_path(path)
        lines = []
        try:
            line = source.fetch()
            while line is not None:
                lines.append(line)
                line = source.fetch()
        finally:
            source.close()
        return "".join(lines)

    def _scanner(self):
        return Scanner(LineSource(self.lines), self.equal)

    def tokens(self):
        """Returns every token of the source, through the first ENDFILE or ERROR token."""
        return tokenize(LineSource(self.lines), self.equal)

    def parse(self):
        if self.program is None:
            logger.debug("%s: parsing %d line(s)", self.path, len(self.lines))
            self.program = Parser(self._scanner()).parse_program()
        return self.program

    def resolve(self):
        if self.symbols is None:
            self.symbols = resolve(self.parse())
            logger.debug("%s: resolved %d variable(s)", self.path, len(self.symbols))
        return self.symbols

    def run(self):
        """Executes the program and returns the Executor (final variable values). Raises on the first fault."""
        symbols = self.resolve()

        logger.debug("%s: executing", self.path)
        self.executor = Executor(symbols, self.input_source, self.output_sink)
        self.executor.execute(self.program)
        return self.executor

    def close(self):
        """Forgets this session's source in the error handler."""
        self.error_handler.remove_file(self.path)
