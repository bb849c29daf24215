"""
Base version-control interface used by the processor and the walker.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List


class GitError(Exception):
    """Raised when the version-control tool cannot be run at all."""
    pass


@dataclass
class CommandResult:
    """Outcome of a single version-control invocation."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def summary(self) -> str:
        """Last non-empty line of output, preferring stderr."""
        for text in (self.stderr, self.stdout):
            lines = [line.strip() for line in text.splitlines() if line.strip()]
            if lines:
                return lines[-1]
        return f"exit status {self.returncode}"


@dataclass
class CurrentRef:
    """What HEAD points at."""
    name: str
    detached: bool = False

    def __str__(self) -> str:
        return self.name


class VersionControl(ABC):
    """
    Abstract interface over the version-control tool.

    Implementations are responsible for:
    1. Probing whether a directory is a working-tree root
    2. Reporting tree state (dirty, staged, current ref, upstream)
    3. Running the mutating commands (stash, add, commit, pull, push)
    4. Reading submodule declarations

    Query methods return plain values. Mutating methods return a
    CommandResult and never raise on a non-zero exit status.
    """

    @abstractmethod
    def is_working_tree(self, path: Path) -> bool:
        """Return True if path is the root of a working tree."""
        pass

    @abstractmethod
    def has_uncommitted_changes(self, path: Path) -> bool:
        """Return True if there are unstaged or staged modifications."""
        pass

    @abstractmethod
    def has_staged_changes(self, path: Path) -> bool:
        """Return True if the index differs from HEAD."""
        pass

    @abstractmethod
    def stash(self, path: Path, message: str) -> CommandResult:
        """Save local modifications aside under a message."""
        pass

    @abstractmethod
    def stage_all(self, path: Path) -> CommandResult:
        """Stage modifications, additions and deletions."""
        pass

    @abstractmethod
    def commit(self, path: Path, message: str) -> CommandResult:
        pass

    @abstractmethod
    def current_ref(self, path: Path) -> CurrentRef:
        """
        Describe HEAD.

        Returns the branch name, or for a detached HEAD an exact tag match,
        falling back to the abbreviated commit id.
        """
        pass

    @abstractmethod
    def has_upstream(self, path: Path) -> bool:
        pass

    @abstractmethod
    def pull_ff_only(self, path: Path) -> CommandResult:
        pass

    @abstractmethod
    def pull_rebase(self, path: Path) -> CommandResult:
        pass

    @abstractmethod
    def abort_rebase(self, path: Path) -> CommandResult:
        pass

    @abstractmethod
    def push(self, path: Path) -> CommandResult:
        pass

    @abstractmethod
    def push_set_upstream(self, path: Path, remote: str, branch: str) -> CommandResult:
        pass

    @abstractmethod
    def submodule_update(self, path: Path) -> CommandResult:
        """Initialize and update submodules recursively."""
        pass

    @abstractmethod
    def list_submodule_paths(self, path: Path) -> List[str]:
        """
        Read declared submodule paths from the .gitmodules file.

        Returns:
            Paths relative to the working-tree root, in declaration order
        """
        pass
