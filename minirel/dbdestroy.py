"""Remove a database directory after the user confirms."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Optional, Sequence


def _confirmed(answer: Optional[str]) -> bool:
    words = (answer or "").split()
    return bool(words) and words[0][0] in "yY"


def destroy_database(path, answer: Optional[str]) -> bool:
    """Delete the database directory if the answer starts with y or Y.

    Returns whether the directory was removed; a failed removal raises OSError.
    """
    if not _confirmed(answer):
        return False
    shutil.rmtree(Path(path))
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Ask for confirmation on standard input and remove the named database."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Usage: dbdestroy dbname", file=sys.stderr)
        return 1
    name = args[0]
    print(f"Enter y if you want to delete {name}/*")
    answer = sys.stdin.readline()
    if not _confirmed(answer):
        print("Database not destroyed.")
        return 0
    print(f"Removing {name}")
    try:
        destroy_database(name, answer)
    except OSError as exc:
        print(f"dbdestroy: {exc}", file=sys.stderr)
        return 1
    return 0