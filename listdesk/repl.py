"""
listdesk REPL
=============
Interactive terminal screen over an ItemStore.
Each change to the store re-prints the list.
"""

from __future__ import annotations

import logging
from typing import Optional

from listkeeper import ItemStore
from listdesk.presenter import ItemListPresenter

log = logging.getLogger(__name__)

BANNER = r"""
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║     ─── LISTDESK ───                                         ║
║                                                              ║
║     Observable list of text records                          ║
║     Type 'help' for commands                                 ║
║     Type 'exit' or Ctrl+C to quit                            ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
"""

HELP_TEXT = """
╔══════════════════════════════════════════════════════════════╗
║                      LISTDESK COMMANDS                       ║
╠════════════════════╦═════════════════════════════════════════╣
║ add <text>         ║ Append a record                         ║
║ edit <n> <text>    ║ Replace record n                        ║
║ del <n>            ║ Delete record n                         ║
║ list               ║ Show all records                        ║
║ clear              ║ Delete every record                     ║
║ help               ║ Show this table                         ║
║ exit               ║ Quit                                    ║
╚════════════════════╩═════════════════════════════════════════╝
"""


def _print_lines(lines: list[str]) -> None:
    for line in lines:
        print(f"  {line}")


def _parse_index(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        print(f"  ⚠ Not a number: {raw!r}")
        return None


def execute_command(presenter: ItemListPresenter, line: str) -> bool:
    """Run one REPL line. Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True

    command, _, rest = line.partition(" ")
    command = command.lower()
    rest = rest.strip()

    if command in ("exit", "quit"):
        return False

    if command == "help":
        print(HELP_TEXT)
    elif command == "list":
        _print_lines(presenter.render_lines())
    elif command == "add":
        if not presenter.add(rest):
            print("  ⚠ Nothing to add. Usage: add <text>")
    elif command == "edit":
        raw_index, _, text = rest.partition(" ")
        index = _parse_index(raw_index)
        if index is None:
            return True
        if not text.strip():
            print("  ⚠ Nothing to save. Usage: edit <n> <text>")
        elif not presenter.edit(index, text.strip()):
            print(f"  ⚠ No record at index {index}")
    elif command in ("del", "delete"):
        index = _parse_index(rest)
        if index is not None and not presenter.remove(index):
            print(f"  ⚠ No record at index {index}")
    elif command == "clear":
        for index in reversed(range(len(presenter.rows))):
            presenter.remove(index)
        print("  ∅ Cleared.")
    else:
        print(f"  ⚠ Unknown command: {command!r} (type 'help')")
    return True


def run_repl(store: ItemStore) -> None:
    """Run the interactive listdesk REPL against `store`."""
    print(BANNER)

    with ItemListPresenter(store, on_render=_print_lines) as presenter:
        _print_lines(presenter.render_lines())
        while True:
            try:
                line = input("  ⟩ ")
            except (EOFError, KeyboardInterrupt):
                print("\n  Goodbye.")
                break

            if not execute_command(presenter, line):
                print("  Goodbye.")
                break

    log.debug("REPL closed with %d record(s)", len(store))
