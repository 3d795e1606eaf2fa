"""Turning stage results into CLI exits."""

from __future__ import annotations

from typing import NoReturn

import typer

from release_script.core.errors import ErrorCode
from release_script.core.result import Err, Result
from release_script.output.console import ConsoleProtocol, Style


def report_error(error: object, console: ConsoleProtocol) -> None:
    """Print ``message``, then ``hint`` and captured ``output`` when present."""
    console.error(getattr(error, "message", None) or str(error))
    if hint := getattr(error, "hint", None):
        console.print(f"hint: {hint}", Style.DIM)
    if output := getattr(error, "output", None):
        console.print(output.rstrip(), Style.DIM)


def exit_on_error[T, E](
    result: Result[T, E],
    console: ConsoleProtocol,
    error_code: ErrorCode = ErrorCode.FAILURE,
) -> T:
    if isinstance(result, Err):
        report_error(result.error, console)
        exit_with_code(int(error_code))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)
