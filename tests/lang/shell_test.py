import io
import os
import unittest
from unittest import mock

from tinylang.lang.error import ErrorHandler
from tinylang.lang.shell import Shell
from tinylang.lang.streams import IterInput, ListSink


@mock.patch.dict(os.environ, {"ANSI_COLORS_DISABLED": "1", "NO_COLOR": "1"})
class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()
        self.sink = ListSink()
        self.shell = Shell(ErrorHandler(fatal=False, stream=self.stream), input_source=IterInput([6, 7]),
                           output_sink=self.sink)

    def feed(self, *lines):
        for line in lines:
            self.shell.onecmd(line)

    def test_single_line(self):
        self.feed("x := 2 ^ 3; write x + 1")
        self.assertEqual([9], self.sink.values)
        self.assertEqual(Shell.prompt, self.shell.prompt)
        self.assertEqual("", self.stream.getvalue())

    def test_continuation(self):
        self.feed("read a;")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.feed("repeat", "  write a;", "  a := a - 1")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.assertEqual([], self.sink.values)

        self.feed("until a < 4")
        self.assertEqual([6, 5, 4], self.sink.values)
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

        # each completed program is a fresh run
        self.feed("read b; write a + b")
        self.assertEqual([6, 5, 4, 7], self.sink.values)

    def test_open_comment(self):
        self.feed("{ this comment")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.feed("  goes on } write 5")
        self.assertEqual([5], self.sink.values)

    def test_errors(self):
        self.feed("write )")
        self.assertIn("error: expected 'Num' or 'ID' or 'LeftParen', found 'RightParen' (')')",
                      self.stream.getvalue())
        self.assertEqual(Shell.prompt, self.shell.prompt)

        self.feed("write 1 / 0")
        self.assertIn("  File '<in>', line 1:\n    write 1 / 0\nerror: division by zero", self.stream.getvalue())

        # the shell survives both
        self.feed("write 2")
        self.assertEqual([2], self.sink.values)

    def test_command_words_as_variables(self):
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            self.assertFalse(self.shell.onecmd("exit := 3; write exit"))
            self.assertFalse(self.shell.onecmd("help := 4; write help"))
            self.assertFalse(self.shell.onecmd("EOF := 5; write EOF"))
        self.assertEqual([3, 4, 5], self.sink.values)
        self.assertEqual("", stdout.getvalue())

        # a bare command word inside a buffered program is program text
        self.feed("repeat", "exit")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.feed(":= 9", "until 1 = 1; write exit")
        self.assertEqual([3, 4, 5, 9], self.sink.values)

    def test_commands(self):
        self.assertEqual("", self.shell.emptyline())
        self.assertTrue(self.shell.onecmd("exit"))

        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            self.shell.onecmd("help")
            self.assertTrue(self.shell.onecmd("EOF"))
        self.assertIn("Welcome to the TINY interpreter!", stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
