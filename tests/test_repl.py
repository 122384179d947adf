"""
listdesk Test Suite — REPL
==========================
Command parsing and the interactive loop, with input() patched.

Usage:
    python -m pytest tests/test_repl.py -v
"""
import sys
import os
import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from listkeeper import ItemStore
from listdesk.presenter import ItemListPresenter
from listdesk.repl import execute_command, run_repl


def run_lines(presenter, *lines):
    out = io.StringIO()
    with redirect_stdout(out):
        results = [execute_command(presenter, line) for line in lines]
    return results, out.getvalue()


class TestExecuteCommand(unittest.TestCase):

    def setUp(self):
        self.store = ItemStore()
        self.presenter = ItemListPresenter(self.store)

    def test_add_edit_delete(self):
        run_lines(self.presenter, "add milk", "add eggs", "edit 1 ham", "del 0")
        self.assertEqual(self.store.read_all(), ("ham",))

    def test_add_keeps_inner_spaces(self):
        run_lines(self.presenter, "add  brown   bread ")
        self.assertEqual(self.store.read_all(), ("brown   bread",))

    def test_add_without_text(self):
        _, out = run_lines(self.presenter, "add", "add    ")
        self.assertEqual(len(self.store), 0)
        self.assertIn("Nothing to add", out)

    def test_edit_out_of_range(self):
        _, out = run_lines(self.presenter, "add a", "edit 4 b")
        self.assertEqual(self.store.read_all(), ("a",))
        self.assertIn("No record at index 4", out)

    def test_edit_without_text(self):
        _, out = run_lines(self.presenter, "add a", "edit 0")
        self.assertEqual(self.store.read_all(), ("a",))
        self.assertIn("Nothing to save", out)

    def test_bad_index(self):
        _, out = run_lines(self.presenter, "add a", "del first")
        self.assertEqual(self.store.read_all(), ("a",))
        self.assertIn("Not a number", out)

    def test_delete_negative_index(self):
        _, out = run_lines(self.presenter, "add a", "del -1")
        self.assertEqual(self.store.read_all(), ("a",))
        self.assertIn("No record at index -1", out)

    def test_clear(self):
        run_lines(self.presenter, "add a", "add b", "add c", "clear")
        self.assertEqual(self.store.read_all(), ())

    def test_list_and_help(self):
        _, out = run_lines(self.presenter, "add a", "list", "help")
        self.assertIn("0. a", out)
        self.assertIn("LISTDESK COMMANDS", out)

    def test_unknown_command(self):
        results, out = run_lines(self.presenter, "frobnicate")
        self.assertEqual(results, [True])
        self.assertIn("Unknown command", out)

    def test_exit(self):
        results, _ = run_lines(self.presenter, "", "exit", "QUIT")
        self.assertEqual(results, [True, False, False])


class TestRunRepl(unittest.TestCase):

    def test_session_prints_renders(self):
        store = ItemStore()
        out = io.StringIO()
        with mock.patch("builtins.input", side_effect=["add milk", "add eggs", "exit"]):
            with redirect_stdout(out):
                run_repl(store)
        self.assertEqual(store.read_all(), ("milk", "eggs"))
        self.assertIn("1. eggs", out.getvalue())
        self.assertIn("Goodbye", out.getvalue())
        self.assertEqual(store.listener_count, 0)

    def test_eof_ends_session(self):
        store = ItemStore(["kept"])
        out = io.StringIO()
        with mock.patch("builtins.input", side_effect=EOFError):
            with redirect_stdout(out):
                run_repl(store)
        self.assertEqual(store.read_all(), ("kept",))
        self.assertEqual(store.listener_count, 0)


if __name__ == "__main__":
    unittest.main()
