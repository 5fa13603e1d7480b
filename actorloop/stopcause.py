"""Reasons for actor termination."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


class ActorError(Exception):
    """A miscellaneous error carrying only a text description."""


class StopKind(enum.Enum):
    """Category of actor termination."""

    STOPPED = "stopped"
    FAILED = "failed"
    KILLED = "killed"
    DROPPED = "dropped"
    LOST = "lost"


def _as_error(error: Union[BaseException, str]) -> BaseException:
    if isinstance(error, BaseException):
        return error
    if isinstance(error, str):
        return ActorError(error)
    raise TypeError(f"expected an exception or a string, not {type(error).__name__}")


@dataclass(frozen=True, repr=False)
class StopCause:
    """Why an actor terminated.

    Only ``FAILED`` and ``KILLED`` carry an error.  This describes the
    immediate cause only, not the chain of failures that led to it.
    """

    kind: StopKind
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        needs_error = self.kind in (StopKind.FAILED, StopKind.KILLED)
        if needs_error and self.error is None:
            raise ValueError(f"{self.kind.value} stop cause requires an error")
        if not needs_error and self.error is not None:
            raise ValueError(f"{self.kind.value} stop cause takes no error")

    @staticmethod
    def stopped() -> "StopCause":
        """Actor terminated itself normally."""
        return StopCause(StopKind.STOPPED)

    @staticmethod
    def failed(error: Union[BaseException, str]) -> "StopCause":
        """Actor failed; a string is wrapped in :class:`ActorError`."""
        return StopCause(StopKind.FAILED, _as_error(error))

    @staticmethod
    def killed(error: Union[BaseException, str]) -> "StopCause":
        """Actor was killed externally; a string is wrapped in :class:`ActorError`."""
        return StopCause(StopKind.KILLED, _as_error(error))

    @staticmethod
    def dropped() -> "StopCause":
        """Last owning reference to the actor was released."""
        return StopCause(StopKind.DROPPED)

    @staticmethod
    def lost() -> "StopCause":
        """Connection to a remote actor's host was lost."""
        return StopCause(StopKind.LOST)

    def has_error(self) -> bool:
        """True if the actor died with an associated error (failed or killed)."""
        return self.kind in (StopKind.FAILED, StopKind.KILLED)

    def __str__(self) -> str:
        if self.kind is StopKind.STOPPED:
            return "Actor stopped"
        if self.kind is StopKind.FAILED:
            return f"Actor failed: {self.error}"
        if self.kind is StopKind.KILLED:
            return f"Actor was killed: {self.error}"
        if self.kind is StopKind.DROPPED:
            return "Actor was dropped"
        return "Lost connection to actor"

    def __repr__(self) -> str:
        return f"StopCause({self})"