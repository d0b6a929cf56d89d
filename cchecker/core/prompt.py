from collections.abc import Callable
from typing import TextIO


LineReader = Callable[[str], str]


def read_line(reader: LineReader, message: str) -> str | None:
    """Read one stripped line, returning None when input is exhausted."""

    try:
        return reader(message).strip()
    except EOFError:
        return None


def prompt_for_contributor(reader: LineReader, out: TextIO) -> str | None:
    """Ask whether to show a contributor heatmap and for whose login.

    Returns the entered username, or None when the user declines, enters an
    empty name, or input ends.
    """

    print("\nShow the contribution heatmap for a specific contributor? (y/n)", file=out)
    answer = read_line(reader, "> ")
    if answer is None or answer.lower() != "y":
        return None

    print("\nEnter the contributor's username:", file=out)
    username = read_line(reader, "> ")
    return username or None
