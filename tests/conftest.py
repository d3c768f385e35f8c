from __future__ import annotations

import subprocess
from pathlib import Path

import pytest


def git(cwd: Path, *args: str) -> str:
    proc = subprocess.run(["git", *args], cwd=str(cwd), check=True, capture_output=True, text=True)
    return proc.stdout.strip()


class GitSandbox:
    """Builds bare remotes and working clones under a temporary directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def remote(self, name: str) -> Path:
        """Bare remote with one commit on main."""
        bare = self.root / "remotes" / f"{name}.git"
        bare.mkdir(parents=True)
        git(bare, "init", "--bare", "-b", "main")

        seed = self.root / "seeds" / name
        seed.mkdir(parents=True)
        git(seed, "init", "-b", "main")
        git(seed, "remote", "add", "origin", str(bare))
        self.commit(seed, {"README.md": f"# {name}\n"}, "init")
        git(seed, "push", "origin", "main")
        return bare

    def clone(self, bare: Path, dest: Path) -> Path:
        dest.parent.mkdir(parents=True, exist_ok=True)
        git(dest.parent, "clone", str(bare), dest.name)
        return dest

    def commit(self, repo: Path, files: dict[str, str | None], message: str) -> str:
        for rel, content in files.items():
            path = repo / rel
            if content is None:
                git(repo, "rm", "-q", rel)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            git(repo, "add", rel)
        git(repo, "commit", "-q", "-m", message)
        return git(repo, "rev-parse", "HEAD")

    def push_upstream_change(self, bare: Path, files: dict[str, str | None], message: str = "upstream") -> str:
        """Commit to the remote from its seed clone and push."""
        name = bare.name[: -len(".git")]
        seed = self.root / "seeds" / name
        git(seed, "pull", "-q", "origin", "main")
        oid = self.commit(seed, files, message)
        git(seed, "push", "-q", "origin", "main")
        return oid


@pytest.fixture
def sandbox(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GitSandbox:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)
    return GitSandbox(tmp_path)
