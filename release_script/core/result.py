"""Ok/Err outcomes for release stages.

Stages hand back ``Ok(value)`` or ``Err(error)`` rather than raising; the
orchestrator stops at the first ``Err`` and the CLI turns it into an exit
status.

Usage:
    match gateway.run(Command.of("git", "push")):
        case Ok(output):
            console.print(output)
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def unwrap(self) -> T:
        return self.value

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def unwrap(self) -> None:
        """Fail loudly: an Err has no value to hand out.

        Raises:
            ValueError: Always.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def map(self, f: Callable[..., object]) -> Err[E]:
        # Errors pass through untouched.
        del f
        return self


type Result[T, E] = Ok[T] | Err[E]

