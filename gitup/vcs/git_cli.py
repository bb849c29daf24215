"""
Git implementation of the version-control interface.

Runs the git executable in a subprocess with the repository as working
directory, so the process-wide current directory is never changed.
"""
import logging
import subprocess
from pathlib import Path
from typing import List

from gitup.vcs.base import CommandResult, CurrentRef, GitError, VersionControl

logger = logging.getLogger(__name__)


class GitCli(VersionControl):
    """Runs git commands against working trees on the local filesystem."""

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def _run(self, path: Path, *args: str) -> CommandResult:
        """
        Run one git command inside path.

        Args:
            path: Working directory for the command
            *args: Arguments following the git executable

        Returns:
            CommandResult with exit status and captured output

        Raises:
            GitError: If the executable cannot be started
        """
        command = [self.executable, *args]
        logger.debug(f"Running {' '.join(command)} in {path}")
        try:
            completed = subprocess.run(
                command,
                cwd=path,
                capture_output=True,
                text=True
            )
        except OSError as e:
            raise GitError(f"Failed to run {self.executable}: {e}") from e

        logger.debug(f"{args[0]} exited with {completed.returncode}")
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr
        )

    def is_working_tree(self, path: Path) -> bool:
        # Submodules carry a .git file rather than a directory
        if (path / ".git").exists():
            return True

        result = self._run(path, "rev-parse", "--show-toplevel")
        if not result.ok:
            return False
        return Path(result.stdout.strip()).resolve() == path.resolve()

    def has_uncommitted_changes(self, path: Path) -> bool:
        if not self._run(path, "diff", "--quiet").ok:
            return True
        return not self._run(path, "diff", "--staged", "--quiet").ok

    def has_staged_changes(self, path: Path) -> bool:
        return not self._run(path, "diff", "--staged", "--quiet").ok

    def stash(self, path: Path, message: str) -> CommandResult:
        return self._run(path, "stash", "push", "-m", message)

    def stage_all(self, path: Path) -> CommandResult:
        return self._run(path, "add", "-A")

    def commit(self, path: Path, message: str) -> CommandResult:
        return self._run(path, "commit", "-m", message)

    def current_ref(self, path: Path) -> CurrentRef:
        result = self._run(path, "symbolic-ref", "--short", "-q", "HEAD")
        if result.ok and result.stdout.strip():
            return CurrentRef(result.stdout.strip())

        result = self._run(path, "describe", "--tags", "--exact-match")
        if result.ok and result.stdout.strip():
            return CurrentRef(result.stdout.strip(), detached=True)

        result = self._run(path, "rev-parse", "--short", "HEAD")
        if result.ok and result.stdout.strip():
            return CurrentRef(result.stdout.strip(), detached=True)

        return CurrentRef("HEAD", detached=True)

    def has_upstream(self, path: Path) -> bool:
        return self._run(path, "rev-parse", "--abbrev-ref", "@{upstream}").ok

    def pull_ff_only(self, path: Path) -> CommandResult:
        return self._run(path, "pull", "--ff-only")

    def pull_rebase(self, path: Path) -> CommandResult:
        return self._run(path, "pull", "--rebase")

    def abort_rebase(self, path: Path) -> CommandResult:
        return self._run(path, "rebase", "--abort")

    def push(self, path: Path) -> CommandResult:
        return self._run(path, "push")

    def push_set_upstream(self, path: Path, remote: str, branch: str) -> CommandResult:
        return self._run(path, "push", "--set-upstream", remote, branch)

    def submodule_update(self, path: Path) -> CommandResult:
        return self._run(path, "submodule", "update", "--init", "--recursive")

    def list_submodule_paths(self, path: Path) -> List[str]:
        if not (path / ".gitmodules").is_file():
            return []

        result = self._run(
            path, "config", "--file", ".gitmodules", "--get-regexp", r"^submodule\..*\.path$"
        )
        # Exit status 1 means no matching keys
        if not result.ok:
            return []

        paths = []
        for line in result.stdout.splitlines():
            parts = line.strip().split(None, 1)
            if len(parts) == 2:
                paths.append(parts[1])
        return paths
