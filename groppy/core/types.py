"""Core types for the update engine."""

from dataclasses import dataclass
from enum import Enum


class UpdateStatus(Enum):
    """Terminal state of one repository update."""
    UPDATED = "updated"
    UP_TO_DATE = "up_to_date"
    UNCLEAN = "unclean"
    NO_UPSTREAM = "no_upstream"
    ERROR = "error"


@dataclass(frozen=True)
class RepoOutcome:
    """Result of processing one repository.

    ``files_changed`` is only meaningful for UPDATED, ``detail`` for ERROR.
    """
    status: UpdateStatus
    repo_path: str
    files_changed: int = 0
    detail: str = ""

    @classmethod
    def updated(cls, repo_path: str, files_changed: int) -> 'RepoOutcome':
        if files_changed < 0:
            raise ValueError("files_changed must be non-negative")
        return cls(UpdateStatus.UPDATED, repo_path, files_changed=files_changed)

    @classmethod
    def up_to_date(cls, repo_path: str) -> 'RepoOutcome':
        return cls(UpdateStatus.UP_TO_DATE, repo_path)

    @classmethod
    def unclean(cls, repo_path: str) -> 'RepoOutcome':
        return cls(UpdateStatus.UNCLEAN, repo_path)

    @classmethod
    def no_upstream(cls, repo_path: str) -> 'RepoOutcome':
        return cls(UpdateStatus.NO_UPSTREAM, repo_path)

    @classmethod
    def error(cls, repo_path: str, detail: str) -> 'RepoOutcome':
        return cls(UpdateStatus.ERROR, repo_path, detail=detail)

    @property
    def is_updated(self) -> bool:
        """Check if the repository was fast-forwarded."""
        return self.status == UpdateStatus.UPDATED

    @property
    def is_unclean(self) -> bool:
        """Check if the repository had local changes."""
        return self.status == UpdateStatus.UNCLEAN

    @property
    def failed(self) -> bool:
        """Check if the update failed."""
        return self.status == UpdateStatus.ERROR


class UpdateError(Exception):
    """A step of the update sequence failed."""

    stage = "update"

    def __init__(self, repo_path: str, cause: object):
        self.repo_path = repo_path
        self.cause = cause
        super().__init__(f"{self.stage} failed: {cause}")


class OpenFailedError(UpdateError):
    stage = "open"


class StatusQueryError(UpdateError):
    stage = "status"


class HeadResolutionError(UpdateError):
    stage = "resolve HEAD"


class FetchError(UpdateError):
    stage = "fetch"


class UpstreamResolutionError(UpdateError):
    stage = "resolve upstream"


class ReferenceUpdateError(UpdateError):
    stage = "fast-forward"


class CheckoutError(UpdateError):
    stage = "checkout"


class DiffError(UpdateError):
    stage = "diff"
