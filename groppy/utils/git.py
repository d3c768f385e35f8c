"""Git operations and utilities."""

import os
import re
import subprocess
import logging
from typing import List, Optional, Dict

logger = logging.getLogger('groppy')

# Non-interactive ssh restricted to key auth, so identities come from ssh-agent
SSH_COMMAND = (
    "ssh -o BatchMode=yes "
    "-o PreferredAuthentications=publickey "
    "-o PasswordAuthentication=no"
)
DEFAULT_SSH_USER = "git"

_SCP_LIKE_URL = re.compile(r'^(?:(?P<user>[^@/:]+)@)?(?P<host>[^/:]+):(?!//)(?P<path>.*)$')
_SSH_URL = re.compile(r'^(?P<scheme>(?:git\+)?ssh)://(?:(?P<user>[^@/]+)@)?(?P<rest>.*)$')


class GitCommandError(Exception):
    """A git invocation exited non-zero or could not be started."""

    def __init__(self, args: List[str], returncode: Optional[int], stderr: str = ""):
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"git {' '.join(args)}: {detail}")


def run_git(
    repo_path: str,
    args: List[str],
    env: Optional[Dict[str, str]] = None,
    config: Optional[Dict[str, str]] = None
) -> str:
    """Run a git command inside a repository.

    Args:
        repo_path: Repository working directory
        args: Arguments after ``git``
        env: Extra environment variables
        config: One-shot ``-c key=value`` settings

    Returns:
        Standard output of the command

    Raises:
        GitCommandError: If git fails or cannot be executed
    """
    cmd = ["git"]
    for key, value in (config or {}).items():
        cmd.extend(["-c", f"{key}={value}"])
    cmd.extend(args)

    full_env = None
    if env:
        full_env = os.environ.copy()
        full_env.update(env)

    try:
        result = subprocess.run(
            cmd,
            cwd=repo_path,
            capture_output=True,
            # Paths are bytes; surrogateescape keeps non-UTF-8 names intact
            encoding='utf-8',
            errors='surrogateescape',
            env=full_env,
            check=False
        )
    except OSError as e:
        # Missing git binary or unusable working directory
        raise GitCommandError(args, None, str(e)) from e
    except UnicodeError as e:
        raise GitCommandError(args, None, f"undecodable output: {e}") from e

    if result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stderr)
    return result.stdout


def is_git_repo(path: str) -> bool:
    """Check if a directory directly contains git metadata.

    Args:
        path: Directory to check

    Returns:
        True if ``path/.git`` exists (directory or gitfile)
    """
    return os.path.exists(os.path.join(path, '.git'))


def verify_repo(repo_path: str) -> None:
    """Open a repository, raising GitCommandError if git cannot."""
    run_git(repo_path, ["rev-parse", "--git-dir"])


def status_porcelain(repo_path: str) -> List[str]:
    """Get working tree status entries, untracked included, ignored excluded.

    Args:
        repo_path: Path to the repository

    Returns:
        One porcelain line per changed or untracked path
    """
    output = run_git(
        repo_path,
        ["status", "--porcelain", "--untracked-files=all"]
    )
    return [line for line in output.splitlines() if line.strip()]


def rev_parse_commit(repo_path: str, rev: str) -> str:
    """Resolve a revision to a full commit id."""
    return run_git(repo_path, ["rev-parse", "--verify", f"{rev}^{{commit}}"]).strip()


def current_branch_ref(repo_path: str) -> Optional[str]:
    """Get the full ref HEAD points to.

    Args:
        repo_path: Path to the repository

    Returns:
        Ref such as ``refs/heads/main``, or None for a detached HEAD
    """
    try:
        return run_git(repo_path, ["symbolic-ref", "--quiet", "HEAD"]).strip() or None
    except GitCommandError as e:
        # symbolic-ref exits 1 without output when HEAD is detached
        if e.returncode == 1 and not e.stderr:
            return None
        raise


def upstream_ref(repo_path: str, branch_ref: str) -> Optional[str]:
    """Get the configured upstream of a local branch.

    Args:
        repo_path: Path to the repository
        branch_ref: Full local branch ref

    Returns:
        Full upstream ref (e.g. ``refs/remotes/origin/main``) or None
    """
    output = run_git(repo_path, ["for-each-ref", "--format=%(upstream)", branch_ref])
    return output.strip() or None


def get_remote_url(repo_path: str, remote: str = "origin") -> str:
    """Get the fetch URL of a remote."""
    return run_git(repo_path, ["remote", "get-url", remote]).strip()


def ssh_user_rewrite(url: str, default_user: str = DEFAULT_SSH_USER) -> Optional[Dict[str, str]]:
    """Build an insteadOf rewrite that adds a user name to an ssh URL.

    Args:
        url: Remote URL as configured
        default_user: User to use when the URL names none

    Returns:
        ``{'url.<new>.insteadOf': <url>}`` or None when no rewrite is needed
    """
    match = _SSH_URL.match(url)
    if match:
        if match.group('user'):
            return None
        rewritten = f"{match.group('scheme')}://{default_user}@{match.group('rest')}"
        return {f"url.{rewritten}.insteadOf": url}

    if '://' in url or os.path.exists(url):
        return None

    match = _SCP_LIKE_URL.match(url)
    if match and not match.group('user'):
        rewritten = f"{default_user}@{url}"
        return {f"url.{rewritten}.insteadOf": url}
    return None


def fetch_remote(repo_path: str, remote: str = "origin") -> None:
    """Fetch a remote non-interactively using ssh-agent key authentication.

    Args:
        repo_path: Path to the repository
        remote: Remote name

    Raises:
        GitCommandError: If the remote is missing or the fetch fails
    """
    url = get_remote_url(repo_path, remote)
    env = {
        'GIT_TERMINAL_PROMPT': '0',
        'GIT_SSH_COMMAND': SSH_COMMAND,
    }
    logger.debug(f"Fetching {remote} ({url}) in {repo_path}")
    run_git(
        repo_path,
        ["fetch", "--quiet", remote],
        env=env,
        config=ssh_user_rewrite(url)
    )


def fast_forward_ref(repo_path: str, new_oid: str, old_oid: str) -> None:
    """Move HEAD's target from old_oid to new_oid, failing if it moved meanwhile."""
    run_git(repo_path, ["update-ref", "-m", "fast-forward merge", "HEAD", new_oid, old_oid])


def force_checkout(repo_path: str) -> None:
    """Force the index and working tree to match HEAD."""
    run_git(repo_path, ["checkout", "--force", "--quiet"])


def count_changed_files(repo_path: str, old_oid: str, new_oid: str) -> int:
    """Count file entries differing between two commits' trees.

    Args:
        repo_path: Path to the repository
        old_oid: Commit before the update
        new_oid: Commit after the update

    Returns:
        Number of changed paths (a rename counts as delete plus add)
    """
    output = run_git(
        repo_path,
        ["diff", "--name-only", "--no-renames", "--no-ext-diff", "-z", old_oid, new_oid]
    )
    return len({path for path in output.split('\0') if path})
