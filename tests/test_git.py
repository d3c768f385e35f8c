from __future__ import annotations

from pathlib import Path

import pytest

from conftest import git

from groppy.utils import git as gitops
from groppy.utils.git import GitCommandError, ssh_user_rewrite


@pytest.mark.parametrize(
    "url, expected",
    [
        ("github.com:org/repo.git", {"url.git@github.com:org/repo.git.insteadOf": "github.com:org/repo.git"}),
        ("ssh://example.org/srv/repo.git", {"url.ssh://git@example.org/srv/repo.git.insteadOf": "ssh://example.org/srv/repo.git"}),
        ("git@github.com:org/repo.git", None),
        ("ssh://deploy@example.org:2222/repo.git", None),
        ("https://github.com/org/repo.git", None),
        ("/srv/git/repo.git", None),
    ],
)
def test_ssh_user_rewrite(url: str, expected: dict | None) -> None:
    assert ssh_user_rewrite(url) == expected


def test_run_git_raises_with_stderr(tmp_path: Path) -> None:
    with pytest.raises(GitCommandError) as excinfo:
        gitops.run_git(str(tmp_path), ["rev-parse", "--verify", "no-such-ref^{commit}"])

    assert excinfo.value.returncode != 0
    assert "rev-parse" in str(excinfo.value)


def test_run_git_in_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(GitCommandError) as excinfo:
        gitops.run_git(str(tmp_path / "missing"), ["status"])

    assert excinfo.value.returncode is None


def test_branch_and_upstream_lookup(sandbox, tmp_path: Path) -> None:
    bare = sandbox.remote("refs")
    work = sandbox.clone(bare, tmp_path / "work" / "refs")

    assert gitops.current_branch_ref(str(work)) == "refs/heads/main"
    assert gitops.upstream_ref(str(work), "refs/heads/main") == "refs/remotes/origin/main"

    git(work, "branch", "local-only")
    assert gitops.upstream_ref(str(work), "refs/heads/local-only") is None

    git(work, "checkout", "-q", "--detach")
    assert gitops.current_branch_ref(str(work)) is None


def test_count_changed_files_counts_rename_as_two_paths(sandbox, tmp_path: Path) -> None:
    bare = sandbox.remote("rename")
    work = sandbox.clone(bare, tmp_path / "work" / "rename")
    old = git(work, "rev-parse", "HEAD")
    git(work, "mv", "README.md", "README.rst")
    new = sandbox.commit(work, {"notes.txt": "n\n"}, "rename and add")

    assert gitops.count_changed_files(str(work), old, new) == 3
    assert gitops.count_changed_files(str(work), old, old) == 0


def test_status_lists_untracked_files_individually(sandbox, tmp_path: Path) -> None:
    bare = sandbox.remote("status")
    work = sandbox.clone(bare, tmp_path / "work" / "status")
    (work / "new").mkdir()
    (work / "new" / "a.txt").write_text("a", encoding="utf-8")
    (work / "new" / "b.txt").write_text("b", encoding="utf-8")

    assert len(gitops.status_porcelain(str(work))) == 2
