"""
Tests for the minic CLI and REPL
================================
File runner exit codes, subcommands and the interactive program buffer.

Usage:
    python -m pytest tests/test_cli.py -v
"""
import io
import json
import sys
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from minic.cli import EXIT_OK, EXIT_REJECTED, EXIT_USAGE, main, run_file
from minic.config import AnalysisConfig
from minic.repl import ProgramBuffer, run_repl


class CliTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, content):
        path = os.path.join(self.tmp, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def run_main(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()


# ─────────────────────────────────────────────
#  run_file
# ─────────────────────────────────────────────

class TestRunFile(CliTestCase):

    def test_accepted_program(self):
        path = self.write("ok.c", "int x = 5;\nint y = x + 1;\n")
        out, err = io.StringIO(), io.StringIO()
        self.assertEqual(run_file(path, out=out, err=err), EXIT_OK)
        self.assertIn("Analysis completed successfully", out.getvalue())
        self.assertIn("Token IDENTIFIER 'y'", out.getvalue())
        self.assertEqual(err.getvalue(), "")

    def test_rejected_program(self):
        path = self.write("bad.c", "int x;\nint x;\n")
        out, err = io.StringIO(), io.StringIO()
        self.assertEqual(run_file(path, out=out, err=err), EXIT_REJECTED)
        self.assertNotIn("completed successfully", out.getvalue())
        self.assertIn("(line 2, column 5)", err.getvalue())

    def test_missing_file(self):
        err = io.StringIO()
        code = run_file(os.path.join(self.tmp, "nope.c"), out=io.StringIO(), err=err)
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("File not found", err.getvalue())

    def test_bundled_examples(self):
        examples = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "examples")
        quiet = AnalysisConfig(trace=False)
        for name, expected in (("sum.c", EXIT_OK), ("shadowing.c", EXIT_OK),
                               ("out_of_scope.c", EXIT_REJECTED)):
            with self.subTest(example=name):
                err = io.StringIO()
                code = run_file(os.path.join(examples, name), quiet, out=io.StringIO(), err=err)
                self.assertEqual(code, expected)
        self.assertIn("variable 'step' not declared near 'step' (line 6, column 1)", err.getvalue())

    def test_quiet_config(self):
        path = self.write("ok.c", "int x;")
        out = io.StringIO()
        run_file(path, AnalysisConfig(trace=False), out=out, err=io.StringIO())
        self.assertNotIn("Token", out.getvalue())


# ─────────────────────────────────────────────
#  Subcommands
# ─────────────────────────────────────────────

class TestMain(CliTestCase):

    def test_check_ok(self):
        path = self.write("ok.c", "int a; { int a; }")
        code, out, _ = self.run_main("check", path)
        self.assertEqual(code, EXIT_OK)
        self.assertIn("SEMANTIC: entered scope 1", out)

    def test_check_quiet(self):
        path = self.write("bad.c", "a = 1;")
        code, out, err = self.run_main("check", path, "--quiet")
        self.assertEqual(code, EXIT_REJECTED)
        self.assertNotIn("Token", out)
        self.assertIn("variable 'a' not declared", err)

    def test_check_max_symbols_flag(self):
        path = self.write("many.c", "int a; int b;")
        code, _, err = self.run_main("check", path, "--max-symbols", "1", "-q")
        self.assertEqual(code, EXIT_REJECTED)
        self.assertIn("Capacity error", err)

    def test_check_config_file(self):
        path = self.write("deep.c", "((((1))));")
        config = self.write("minic.json", json.dumps({"max_depth": 3}))
        code, _, err = self.run_main("check", path, "--config", config, "-q")
        self.assertEqual(code, EXIT_REJECTED)
        self.assertIn("nesting too deep", err)

    def test_flag_overrides_config_file(self):
        path = self.write("deep.c", "((((1))));")
        config = self.write("minic.json", json.dumps({"max_depth": 3}))
        code, _, _ = self.run_main("check", path, "--config", config, "--max-depth", "50", "-q")
        self.assertEqual(code, EXIT_OK)

    def test_bad_config(self):
        path = self.write("ok.c", "int a;")
        config = self.write("minic.json", json.dumps({"max_depth": 0}))
        code, _, err = self.run_main("check", path, "--config", config)
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("Invalid configuration", err)

    def test_tokens(self):
        path = self.write("t.c", "x >= 10;")
        code, out, _ = self.run_main("tokens", path)
        self.assertEqual(code, EXIT_OK)
        lines = out.strip().splitlines()
        self.assertEqual(len(lines), 5)
        self.assertIn("OPERATOR", lines[1])
        self.assertIn("'>='", lines[1])
        self.assertIn("EOF", lines[-1])

    def test_tokens_missing_file(self):
        code, _, err = self.run_main("tokens", os.path.join(self.tmp, "missing.c"))
        self.assertEqual(code, EXIT_USAGE)

    def test_check_directory(self):
        code, out, err = self.run_main("check", self.tmp)
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn(f"Cannot read {self.tmp}", err)
        self.assertNotIn("Starting", out)

    def test_check_undecodable_file(self):
        path = os.path.join(self.tmp, "bad.c")
        with open(path, "wb") as f:
            f.write(b"int x; \xff\xfe;")
        code, out, err = self.run_main("check", path)
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("Cannot read", err)
        self.assertNotIn("Token", out)

    def test_tokens_unreadable_input(self):
        path = os.path.join(self.tmp, "bad.c")
        with open(path, "wb") as f:
            f.write(b"\xff")
        for target in (self.tmp, path):
            with self.subTest(target=target):
                code, _, err = self.run_main("tokens", target)
                self.assertEqual(code, EXIT_USAGE)
                self.assertIn("Cannot read", err)

    def test_no_command_prints_help(self):
        code, out, _ = self.run_main()
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("usage: minic", out)


# ─────────────────────────────────────────────
#  REPL
# ─────────────────────────────────────────────

class TestProgramBuffer(unittest.TestCase):

    def test_accepts_and_remembers(self):
        buffer = ProgramBuffer()
        self.assertTrue(buffer.feed("int x;").ok)
        self.assertTrue(buffer.feed("x = 1;").ok)
        self.assertEqual(buffer.lines, ["int x;", "x = 1;"])

    def test_rejected_line_dropped(self):
        buffer = ProgramBuffer()
        buffer.feed("int x;")
        result = buffer.feed("int x;")
        self.assertFalse(result.ok)
        self.assertEqual(buffer.lines, ["int x;"])
        self.assertEqual(buffer.pending, [])

    def test_incomplete_input_held(self):
        buffer = ProgramBuffer()
        buffer.feed("int x;")
        self.assertFalse(buffer.feed("{").ok)
        self.assertEqual(buffer.pending, ["{"])
        buffer.feed("int z = x;")
        self.assertEqual(buffer.pending, ["{", "int z = x;"])
        self.assertTrue(buffer.feed("}").ok)
        self.assertEqual(buffer.lines, ["int x;", "{", "int z = x;", "}"])
        self.assertEqual(buffer.pending, [])

    def test_clear(self):
        buffer = ProgramBuffer()
        buffer.feed("int x;")
        buffer.clear()
        self.assertEqual(buffer.source, "")
        self.assertTrue(buffer.feed("int x;").ok)


class TestRunRepl(unittest.TestCase):

    def run_script(self, *lines):
        feed = iter(lines)
        output = []

        def read(prompt):
            try:
                return next(feed)
            except StopIteration:
                raise EOFError

        run_repl(read=read, write=output.append)
        return "\n".join(output)

    def test_session(self):
        output = self.run_script("int a;", "symbols", "a = b;", "show", "exit")
        self.assertIn("✔ ok", output)
        self.assertIn("int a  (line 1)", output)
        self.assertIn("variable 'b' not declared", output)
        self.assertIn("Goodbye.", output)

    def test_end_of_input_exits(self):
        output = self.run_script("help")
        self.assertIn("Commands:", output)
        self.assertIn("Goodbye.", output)

    def test_blank_line_discards_pending(self):
        output = self.run_script("{", "", "show")
        self.assertIn("Pending input discarded", output)
        self.assertIn("(empty program)", output)


if __name__ == "__main__":
    unittest.main()
