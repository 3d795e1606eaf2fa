"""Release progress output.

Stages never print directly; they report through ``ConsoleProtocol``. The CLI
wires in ``RichConsole``; tests pass a ``MockConsole`` and inspect what was
recorded. Both backends label messages the same way (``OK``, ``error:``,
``warning:``, ``info:``), so assertions on ``MockConsole`` text match what an
operator sees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()  # stage completed
    ERROR = auto()  # release aborted
    WARNING = auto()  # best-effort step failed, or feature disabled
    INFO = auto()  # stage progress
    DIM = auto()  # command echo, captured output, hints
    PLANNED = auto()  # operation a dry run did not execute

    def __str__(self) -> str:
        return self.name.lower()


# Label printed before the message, and the Rich style of that label.
_LABELS: dict[Style, tuple[str, str]] = {
    Style.SUCCESS: ("OK", "green"),
    Style.ERROR: ("error:", "red bold"),
    Style.WARNING: ("warning:", "yellow"),
    Style.INFO: ("info:", "cyan"),
}

_RICH_STYLES: dict[Style, str] = {
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.PLANNED: "magenta",
}

PLANNED_SUFFIX = "DRY RUN"


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def planned(self, message: str) -> None:
        """Report an operation that dry-run mode skipped."""
        ...


class RichConsole:
    """Terminal backend.

    Messages are printed literally: a ``[beta]`` in a tag name or a bracket in
    command output is never interpreted as Rich markup.
    """

    def __init__(self) -> None:
        from rich.console import Console
        from rich.text import Text

        self._console = Console(highlight=False)
        self._text = Text

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(self._text(message, style=_RICH_STYLES.get(style, "")))

    def success(self, message: str) -> None:
        self._labelled(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._labelled(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._labelled(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._labelled(Style.INFO, message)

    def planned(self, message: str) -> None:
        line = self._text.assemble((f"[{message}]", "dim"), " ", (PLANNED_SUFFIX, "magenta"))
        self._console.print(line)

    def _labelled(self, style: Style, message: str) -> None:
        label, label_style = _LABELS[style]
        self._console.print(self._text.assemble((label, label_style), " ", message))


@dataclass
class OutputRecord:
    message: str
    style: Style


def _no_records() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Records output instead of printing it."""

    outputs: list[OutputRecord] = field(default_factory=_no_records)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._labelled(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._labelled(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._labelled(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._labelled(Style.INFO, message)

    def planned(self, message: str) -> None:
        self.print(f"[{message}] {PLANNED_SUFFIX}", Style.PLANNED)

    def _labelled(self, style: Style, message: str) -> None:
        self.print(f"{_LABELS[style][0]} {message}", style)

    # Inspection helpers for tests

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return self.count(Style.ERROR) > 0

    def has_warning(self) -> bool:
        return self.count(Style.WARNING) > 0

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
