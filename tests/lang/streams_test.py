import io
import os
import tempfile
import unittest
from unittest import mock

from tinylang.lang.error import TinyInputError, TinyIOError
from tinylang.lang.streams import ConsoleInput, IterInput, LineSource, ListSink, StreamSink, parse_integer


class LineSourceTestCase(unittest.TestCase):

    def test_fetch(self):
        source = LineSource.from_text("read x;\nwrite x\n")
        self.assertEqual(0, source.line_num)

        self.assertEqual("read x;\n", source.fetch())
        self.assertEqual(1, source.line_num)
        self.assertEqual("write x\n", source.fetch())
        self.assertEqual(2, source.line_num)

        self.assertIsNone(source.fetch())
        self.assertIsNone(source.fetch())
        self.assertTrue(source.exhausted)
        self.assertEqual(2, source.line_num)

    def test_empty(self):
        source = LineSource.from_text("")
        self.assertIsNone(source.fetch())
        self.assertEqual(0, source.line_num)

    def test_closer(self):
        closer = mock.Mock()
        source = LineSource(["write 1"], closer=closer)
        source.fetch()
        closer.assert_not_called()

        source.fetch()
        source.close()
        closer.assert_called_once_with()

    def test_from_path(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "prog.tiny")
            with open(path, "w") as file:
                file.write("write 1;\nwrite 2")

            source = LineSource.from_path(path)
            self.assertEqual(["write 1;\n", "write 2"], [source.fetch(), source.fetch()])
            self.assertIsNone(source.fetch())

            self.assertRaises(TinyIOError, LineSource.from_path, os.path.join(directory, "missing.tiny"))

    def test_from_path_bad_encoding(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "bad.tiny")
            with open(path, "wb") as file:
                file.write(b"write \xff\xfe 1\n")

            source = LineSource.from_path(path)
            with self.assertRaises(TinyIOError) as context:
                source.fetch()
            self.assertEqual(f"'{path}' is not valid UTF-8 text", str(context.exception))
            self.assertTrue(source.exhausted)
            self.assertIsNone(source.fetch())


class InputTestCase(unittest.TestCase):

    def test_iter_input(self):
        source = IterInput([3, "-4", " 12\n"])
        self.assertEqual([3, -4, 12], [source.read("x"), source.read("y"), source.read("z")])
        self.assertRaises(TinyInputError, source.read, "x")

    def test_console_input(self):
        stream_out = io.StringIO()
        source = ConsoleInput(io.StringIO("5\n-2\nfive\n"), stream_out)

        self.assertEqual(5, source.read("x"))
        self.assertEqual(-2, source.read("count"))
        self.assertEqual("Enter x: Enter count: ", stream_out.getvalue())

        self.assertRaises(TinyInputError, source.read, "x")
        self.assertRaises(TinyInputError, source.read, "x")  # input ended

    def test_parse_integer(self):
        cases = {"0": 0, "42": 42, "-42": -42, " 7 ": 7, "+3": 3}
        for case, expected in cases.items():
            self.assertEqual(expected, parse_integer(case, "x"), case)
        self.assertEqual(9, parse_integer(9, "x"))

        should_fail = ["", "4.5", "x", "1 2", "0x10"]
        for case in should_fail:
            self.assertRaises(TinyInputError, parse_integer, case, "x")


class SinkTestCase(unittest.TestCase):

    def test_list_sink(self):
        sink = ListSink()
        sink.write(1)
        sink.write(-3)
        self.assertEqual([1, -3], sink.values)

    def test_stream_sink(self):
        stream = io.StringIO()
        sink = StreamSink(stream, prefix="Val: ")
        sink.write(120)
        sink.write(-1)
        self.assertEqual("Val: 120\nVal: -1\n", stream.getvalue())

        stream = io.StringIO()
        StreamSink(stream).write(5)
        self.assertEqual("5\n", stream.getvalue())


if __name__ == '__main__':
    unittest.main()
