"""Per-repository fast-forward update."""

import logging

from .types import (
    RepoOutcome,
    UpdateError,
    OpenFailedError,
    StatusQueryError,
    HeadResolutionError,
    FetchError,
    UpstreamResolutionError,
    ReferenceUpdateError,
    CheckoutError,
    DiffError,
)
from ..utils import git
from ..utils.git import GitCommandError

logger = logging.getLogger('groppy')


class RepoUpdater:
    """Bring one clean repository up to date with its upstream branch.

    Steps run strictly in order and none is retried:

    1. open the repository
    2. refuse to touch it when the working tree has changes (untracked
       files included, ignored files not)
    3. record the HEAD commit
    4. fetch ``origin``
    5. look up the current branch's upstream
    6. stop when HEAD already equals the upstream commit
    7. move the branch to the upstream commit and force-checkout
    8. count files changed between the old and new trees

    Only step 7 modifies the repository; the fetch updates remote-tracking
    refs whatever the outcome.
    """

    def __init__(self, remote: str = "origin"):
        self.remote = remote

    def update(self, repo_path: str) -> RepoOutcome:
        """Run the update sequence.

        Args:
            repo_path: Repository root

        Returns:
            RepoOutcome; step failures become ERROR outcomes
        """
        try:
            return self._update(repo_path)
        except UpdateError as e:
            return RepoOutcome.error(repo_path, str(e))

    def _update(self, repo_path: str) -> RepoOutcome:
        self._step(OpenFailedError, repo_path, git.verify_repo, repo_path)

        changes = self._step(StatusQueryError, repo_path, git.status_porcelain, repo_path)
        if changes:
            logger.info(f"{repo_path}: {len(changes)} local changes, not updating")
            return RepoOutcome.unclean(repo_path)

        old_oid = self._step(HeadResolutionError, repo_path, git.rev_parse_commit, repo_path, "HEAD")

        self._step(FetchError, repo_path, git.fetch_remote, repo_path, self.remote)

        branch = self._step(UpstreamResolutionError, repo_path, git.current_branch_ref, repo_path)
        if branch is None:
            logger.info(f"{repo_path}: detached HEAD, no upstream")
            return RepoOutcome.no_upstream(repo_path)

        upstream = self._step(UpstreamResolutionError, repo_path, git.upstream_ref, repo_path, branch)
        if upstream is None:
            logger.info(f"{repo_path}: {branch} has no upstream")
            return RepoOutcome.no_upstream(repo_path)

        new_oid = self._step(UpstreamResolutionError, repo_path, git.rev_parse_commit, repo_path, upstream)
        if new_oid == old_oid:
            logger.debug(f"{repo_path}: up to date at {old_oid[:12]}")
            return RepoOutcome.up_to_date(repo_path)

        self._step(ReferenceUpdateError, repo_path, git.fast_forward_ref, repo_path, new_oid, old_oid)
        self._step(CheckoutError, repo_path, git.force_checkout, repo_path)
        logger.info(f"{repo_path}: {branch} {old_oid[:12]}..{new_oid[:12]}")

        files_changed = self._step(DiffError, repo_path, git.count_changed_files, repo_path, old_oid, new_oid)
        return RepoOutcome.updated(repo_path, files_changed)

    @staticmethod
    def _step(error_class, repo_path, func, *args):
        try:
            return func(*args)
        except GitCommandError as e:
            raise error_class(repo_path, e) from e
