"""
stagepath exceptions: a base StagingError that renders as plain text for logs
and as a Rich panel when printed through a Console.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderResult
from rich.panel import Panel
from rich.text import Text

__all__ = [
    "StagingError",
    "MalformedPathError",
    "ConfigError",
    "FileSystemUnavailableError",
    "StagingDirCreationError",
]


def _describe(cause: BaseException | None) -> str | None:
    if cause is None:
        return None
    msg = str(cause)
    return f"{type(cause).__name__}: {msg}" if msg else type(cause).__name__


@dataclass(eq=False)
class StagingError(Exception):
    """
    Base stagepath exception. Subclasses fill `message` from the inputs that are
    known at the failure point; `cause` is the underlying exception, if any.
    """

    message: str
    cause: BaseException | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        reason = _describe(self.cause)
        return f"{self.message}: {reason}" if reason else self.message

    # Pretty rendering when printed via Rich Console
    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        _ = console
        _ = options
        body = Text(self.message)
        reason = _describe(self.cause)
        if reason:
            body.append("\ncaused by: ", style="dim")
            body.append(reason, style="italic")
        yield Panel(body, title=type(self).__name__, title_align="left", border_style="red")


class MalformedPathError(StagingError):
    """The destination cannot be resolved to a filesystem (caller error)."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed path {path!r}: {reason}")


class ConfigError(StagingError):
    """Invalid or unreadable staging configuration."""


class FileSystemUnavailableError(StagingError):
    """No filesystem client could be obtained for a path."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        super().__init__(f"Cannot obtain filesystem for '{path}'", cause)


class StagingDirCreationError(StagingError):
    """A staging directory could not be created (denied or I/O failure)."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        super().__init__(f"Cannot create staging directory '{path}'", cause)
