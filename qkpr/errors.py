#!/usr/bin/env python3

"""Error kinds reported by qkpr flows."""

import enum

__all__ = [
    "ErrorKind",
    "QkprError",
    "DraftError",
    "GUARD_KINDS",
]


class ErrorKind(enum.Enum):
    NOT_A_REPOSITORY = "not_a_repository"
    DETACHED_HEAD = "detached_head"
    NO_BRANCHES = "no_branches"
    NO_STAGED_CHANGES = "no_staged_changes"
    UNPARSEABLE_REMOTE = "unparseable_remote"
    MISSING_API_KEY = "missing_api_key"
    COMMAND_FAILED = "command_failed"
    REMOTE_SERVICE = "remote_service"
    NOT_PINNED = "not_pinned"
    ALREADY_PINNED = "already_pinned"
    CANCELLED = "cancelled"


# Kinds that make a one-shot subcommand exit non-zero.
GUARD_KINDS = frozenset(
    {
        ErrorKind.NOT_A_REPOSITORY,
        ErrorKind.DETACHED_HEAD,
        ErrorKind.NO_BRANCHES,
        ErrorKind.UNPARSEABLE_REMOTE,
    }
)


class QkprError(Exception):
    """An expected, user-facing failure of a qkpr flow."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class DraftError(QkprError):
    """Raised when a commit message or branch name could not be drafted."""

    def __init__(
        self, message: str, kind: ErrorKind = ErrorKind.REMOTE_SERVICE
    ) -> None:
        super().__init__(kind, message)
