"""Tests for the git command wrapper."""

import subprocess

import pytest

from gitpr.errors import GitError
from gitpr.git import Git, parse_github_url


class FakeRun:
    """Records subprocess.run calls and replays canned results."""

    def __init__(self, stdout="", returncode=0, stderr=""):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout, stderr=self.stderr)


@pytest.fixture
def fake_run(monkeypatch):
    def install(**kwargs):
        fake = FakeRun(**kwargs)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake
    return install


class TestGitCommands:
    """Test the arguments passed to git."""

    def test_fetch_into_local_branch(self, fake_run, tmp_path):
        run = fake_run()
        Git(str(tmp_path)).fetch("https://github.com/acme/widgets.git", "feature-x", "pr-42")

        cmd, kwargs = run.calls[0]
        assert cmd == ["git", "fetch", "https://github.com/acme/widgets.git", "feature-x:pr-42"]
        assert kwargs["cwd"] == str(tmp_path.resolve())

    def test_checkout(self, fake_run, tmp_path):
        run = fake_run()
        Git(str(tmp_path)).checkout("pr-42")
        assert run.calls[0][0] == ["git", "checkout", "pr-42"]

    def test_push_sets_upstream(self, fake_run, tmp_path):
        run = fake_run()
        Git(str(tmp_path)).push("feature-x")
        assert run.calls[0][0] == ["git", "push", "--set-upstream", "origin", "feature-x"]

    def test_current_branch(self, fake_run, tmp_path):
        fake_run(stdout="feature-x\n")
        assert Git(str(tmp_path)).get_current_branch() == "feature-x"

    def test_last_commit_message(self, fake_run, tmp_path):
        run = fake_run(stdout="Add the x feature\n")
        assert Git(str(tmp_path)).get_last_commit_message() == "Add the x feature"
        assert run.calls[0][0] == ["git", "log", "-1", "--pretty=%s"]

    @pytest.mark.parametrize("ref,expected", [
        ("refs/remotes/origin/main\n", "main"),
        ("refs/remotes/origin/release/2.x\n", "release/2.x"),
    ])
    def test_default_branch(self, fake_run, tmp_path, ref, expected):
        fake_run(stdout=ref)
        assert Git(str(tmp_path)).get_default_branch() == expected

    def test_repo_info_from_origin(self, fake_run, tmp_path):
        fake_run(stdout="git@github.com:acme/widgets.git\n")
        assert Git(str(tmp_path)).get_repo_info() == ("acme", "widgets")


class TestGitErrors:
    """Test failure handling."""

    def test_nonzero_exit_raises(self, fake_run, tmp_path):
        fake_run(returncode=128, stderr="fatal: couldn't find remote ref nope\n")

        with pytest.raises(GitError) as exc_info:
            Git(str(tmp_path)).fetch("https://github.com/a/b.git", "nope", "pr-1")

        assert exc_info.value.stderr == "fatal: couldn't find remote ref nope"
        assert exc_info.value.command == ["fetch", "https://github.com/a/b.git", "nope:pr-1"]
        assert "couldn't find remote ref" in str(exc_info.value)

    def test_missing_executable(self, monkeypatch, tmp_path):
        def missing(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", missing)

        with pytest.raises(GitError, match="executable not found"):
            Git(str(tmp_path)).get_current_branch()

    def test_non_github_remote(self, fake_run, tmp_path):
        fake_run(stdout="https://gitlab.com/acme/widgets.git\n")

        with pytest.raises(GitError, match="Could not parse GitHub URL"):
            Git(str(tmp_path)).get_repo_info()


class TestParseGithubUrl:
    """Test owner/repo extraction from remote URLs."""

    @pytest.mark.parametrize("url", [
        "https://github.com/acme/widgets.git",
        "https://github.com/acme/widgets",
        "https://github.com/acme/widgets/",
        "git@github.com:acme/widgets.git",
        "ssh://git@github.com/acme/widgets.git",
        "https://ghp_token@github.com/acme/widgets.git",
    ])
    def test_supported_formats(self, url):
        assert parse_github_url(url) == ("acme", "widgets")

    def test_rejects_other_hosts(self):
        with pytest.raises(ValueError):
            parse_github_url("https://bitbucket.org/acme/widgets.git")
