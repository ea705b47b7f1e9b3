import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

from tinylang.core.syntax import Program
from tinylang.grammar.tiny import TokenKind
from tinylang.lang.error import ErrorHandler, TinyIOError, TinySyntaxError
from tinylang.lang.session import Session
from tinylang.lang.streams import IterInput, ListSink


FACTORIAL = "{ factorial }\nread n;\nf := 1;\nrepeat\n  f := f * n;\n  n := n - 1\nuntil n = 0;\nwrite f\n"


@mock.patch.dict(os.environ, {"ANSI_COLORS_DISABLED": "1", "NO_COLOR": "1"})
class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.handler = ErrorHandler(fatal=False, stream=io.StringIO())
        self.sink = ListSink()

    def session(self, text, inputs=(), **kwargs):
        return Session(self.handler, "prog.tiny", text=text, input_source=IterInput(inputs), output_sink=self.sink,
                       **kwargs)

    def test_run(self):
        executor = self.session(FACTORIAL, [5]).run()
        self.assertEqual([120], self.sink.values)
        self.assertEqual({"n": 0, "f": 120}, executor.values())

    def test_stages(self):
        sess = self.session(FACTORIAL, [3])

        tokens = sess.tokens()
        self.assertEqual(TokenKind.READ, tokens[0].kind)
        self.assertEqual(2, tokens[0].line)
        self.assertEqual(TokenKind.ENDFILE, tokens[-1].kind)

        program = sess.parse()
        self.assertIsInstance(program, Program)
        self.assertIs(program, sess.parse())

        symbols = sess.resolve()
        self.assertIs(symbols, sess.resolve())
        self.assertEqual("[Var=n][Mem=0][Line=2][Line=5][Line=6][Line=6][Line=7]\n"
                         "[Var=f][Mem=1][Line=3][Line=5][Line=5][Line=8]", symbols.display())

        sess.run()
        self.assertEqual([6], self.sink.values)

    def test_equal_lexeme(self):
        self.session("if 1 == 1 then write 7 end", equal="==").run()
        self.assertEqual([7], self.sink.values)

        self.assertRaises(TinySyntaxError, self.session("if 1 = 1 then write 7 end", equal="==").parse)

    def test_files(self):
        sess = self.session("write 1")
        self.assertIn("prog.tiny", self.handler.files)
        sess.close()
        self.assertNotIn("prog.tiny", self.handler.files)

        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "prog.tiny")
            with open(path, "w") as file:
                file.write(FACTORIAL)

            sess = Session(self.handler, path, input_source=IterInput([4]), output_sink=self.sink)
            self.assertEqual(FACTORIAL.splitlines(keepends=True), self.handler.files[path])
            sess.run()
            self.assertEqual([24], self.sink.values)

            self.assertRaises(TinyIOError, Session, self.handler, os.path.join(directory, "missing.tiny"))

            bad_path = os.path.join(directory, "bad.tiny")
            with open(bad_path, "wb") as file:
                file.write(b"write 1;\nwrite \xe9\n")
            opened = []

            def tracking_open(*args, **kwargs):
                file = io.open(*args, **kwargs)
                opened.append(file)
                return file

            with mock.patch("builtins.open", tracking_open):
                with self.assertRaises(TinyIOError) as context:
                    Session(self.handler, bad_path)
            self.assertIn("is not valid UTF-8 text", str(context.exception))
            self.assertEqual(1, len(opened))
            self.assertTrue(opened[0].closed)

        self.assertRaises(TinyIOError, Session, self.handler, Session.SH_FILE)

    def test_cmd_line(self):
        handler = ErrorHandler()
        Session(handler, Session.SH_FILE, text="write 1", cmd_line=True)
        self.assertFalse(handler.fatal)

    def test_default_output(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            Session(self.handler, "prog.tiny", text="write 3; write 0 - 3").run()
        self.assertEqual("Val: 3\nVal: -3\n", stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
