"""Translation of a client rebase plan into native todo lines."""

from typing import TYPE_CHECKING

from gitconductor.enums import RebaseAction

from ._models import RewordEntry, TodoPlan

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._models import RebaseTodoEntry

# Squash is emitted as fixup: the caller combines messages up front, and the
# native squash would open the message editor.
_NATIVE_ACTIONS: dict[RebaseAction, str] = {
    RebaseAction.PICK: "pick",
    RebaseAction.REWORD: "edit",
    RebaseAction.EDIT: "edit",
    RebaseAction.SQUASH: "fixup",
    RebaseAction.FIXUP: "fixup",
}


def _subject_line(subject: str) -> str:
    lines = subject.strip().splitlines()
    return lines[0].strip() if lines else ""


def todo_line(action: str, commit: str, subject: str) -> str:
    """Format one native todo line.

    Examples:
        >>> todo_line("pick", "abc123", "Fix parser\\n\\nLonger body")
        'pick abc123 Fix parser'
        >>> todo_line("fixup", "def456", "")
        'fixup def456'
    """
    first = _subject_line(subject)
    return f"{action} {commit} {first}" if first else f"{action} {commit}"


def build_todo_plan(entries: "Iterable[RebaseTodoEntry]") -> TodoPlan:
    """Translate plan entries into todo lines and a reword map.

    - ``drop`` entries and entries without a hash are omitted.
    - ``reword`` becomes ``edit`` with an override recorded for the commit.
    - ``edit`` stays ``edit``; an override is recorded only when a new
      message or author was supplied, which makes that stop resume on its
      own like a reword.
    - ``squash`` and ``fixup`` both become ``fixup``.
    - ``pick`` carrying a new message or author becomes ``edit`` with an
      override.

    Returns:
        The todo lines in input order and the overrides keyed by hash.
    """
    lines: list[str] = []
    reword_map: dict[str, RewordEntry] = {}

    for entry in entries:
        commit = entry.hash.strip()
        if not commit or entry.action is RebaseAction.DROP:
            continue

        override = RewordEntry(message=entry.new_message, author=entry.new_author)
        has_override = entry.new_message is not None or entry.new_author is not None
        action = _NATIVE_ACTIONS[entry.action]

        if entry.action is RebaseAction.REWORD or (
            entry.action in (RebaseAction.EDIT, RebaseAction.PICK) and has_override
        ):
            action = "edit"
            reword_map[commit] = override

        lines.append(todo_line(action, commit, entry.subject))

    return TodoPlan(lines=tuple(lines), reword_map=reword_map)
