"""Handles interactive/command-line mode for the TINY interpreter. Uses cmd as backend."""

import cmd

from tinylang.grammar.tiny import TokenKind
from tinylang.lang.error import TinySyntaxError
from tinylang.lang.session import Session


class Shell(cmd.Cmd):
    """TINY interpreter shell. A program may span several lines: while what has been typed so far only fails to parse
    because it ends too early, the shell keeps reading with the secondary prompt.
    """
    intro = "TINY interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    COMMANDS = ("help", "?", "exit", "EOF")

    def __init__(self, error_handler, equal="=", input_source=None, output_sink=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.error_handler = error_handler
        self.equal = equal
        self.input_source = input_source
        self.output_sink = output_sink

        self._tmp_lines = []

    def _session(self):
        return Session(self.error_handler, Session.SH_FILE, text="".join(self._tmp_lines), cmd_line=True,
                       equal=self.equal, input_source=self.input_source, output_sink=self.output_sink)

    def onecmd(self, line):
        """Dispatches line as a shell command only if it is exactly a command word and no program is buffered. Every
        other line is program text, so 'exit := 3' is an assignment.
        """
        line = line.strip()
        if line == "EOF" or (not self._tmp_lines and line in Shell.COMMANDS):
            return super().onecmd(line)
        elif not line:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Executes an arbitrary TINY program once it is complete."""
        self._tmp_lines.append(line + "\n")

        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            sess = self._session()
            try:
                sess.parse()
            except TinySyntaxError as error:
                if Shell.is_incomplete(error):
                    self.prompt = self.secondary_prompt
                    return
                self._reset()
                raise

            self._reset()
            sess.run()
            sess.close()  # left registered on failure so the report can quote the line

    @staticmethod
    def is_incomplete(error):
        """Whether error only means the program has not been fully typed yet: input ended, or a comment is still open.
        """
        actual = error.actual
        return actual.kind is TokenKind.ENDFILE or (actual.kind is TokenKind.ERROR and not actual.lexeme)

    def _reset(self):
        self._tmp_lines = []
        self.prompt = self._tmp_prompt

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the TINY interpreter!\n\n"
              "TINY is a minimal imperative language with integer variables, if/then/else/end,\n"
              "repeat/until loops, read and write. Statements are separated by ';'.\n\n"
              "Try it out by typing 'x := 2 ^ 3; write x + 1'. This will assign 8 to 'x' and\n"
              "write 9. A program can span lines: 'repeat' keeps reading until 'until <expr>'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
