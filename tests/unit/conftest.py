"""
Pytest configuration for unit tests.

Provides a recording fake of the version-control interface, scripted
operator decisions and a plain console writing to buffers.
"""
import io
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from gitup.console import Console
from gitup.decisions import Decisions
from gitup.processor import RepositoryProcessor
from gitup.vcs.base import CommandResult, CurrentRef, VersionControl


NETWORK_OPERATIONS = {'pull_ff_only', 'pull_rebase', 'push', 'push_set_upstream'}


class FakeVersionControl(VersionControl):
    """
    In-memory stand-in for git.

    A directory is a working tree when it holds a .git entry on disk. Tree
    state is shared by every repository unless overridden in per_path.
    Commands succeed unless a failing CommandResult is put in results.
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self.uncommitted = False
        self.staged = False
        self.ref = CurrentRef('main')
        self.upstream = True
        self.results: Dict[str, CommandResult] = {}
        self.submodules: Dict[Path, List[str]] = {}
        self.per_path: Dict[Path, Dict[str, object]] = {}
        self.commits: List[str] = []

    def _state(self, path: Path, name: str):
        return self.per_path.get(path, {}).get(name, getattr(self, name))

    def _record(self, name: str, path: Path, *args) -> CommandResult:
        self.calls.append((name, path, *args))
        return self.results.get(name, CommandResult(0))

    def called(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    def network_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in NETWORK_OPERATIONS]

    def is_working_tree(self, path: Path) -> bool:
        return (path / '.git').exists()

    def has_uncommitted_changes(self, path: Path) -> bool:
        return self._state(path, 'uncommitted')

    def has_staged_changes(self, path: Path) -> bool:
        return self._state(path, 'staged')

    def stash(self, path: Path, message: str) -> CommandResult:
        return self._record('stash', path, message)

    def stage_all(self, path: Path) -> CommandResult:
        return self._record('stage_all', path)

    def commit(self, path: Path, message: str) -> CommandResult:
        result = self._record('commit', path, message)
        if result.ok:
            self.commits.append(message)
            self.uncommitted = False
            self.staged = False
        return result

    def current_ref(self, path: Path) -> CurrentRef:
        return self._state(path, 'ref')

    def has_upstream(self, path: Path) -> bool:
        return self._state(path, 'upstream')

    def pull_ff_only(self, path: Path) -> CommandResult:
        return self._record('pull_ff_only', path)

    def pull_rebase(self, path: Path) -> CommandResult:
        return self._record('pull_rebase', path)

    def abort_rebase(self, path: Path) -> CommandResult:
        return self._record('abort_rebase', path)

    def push(self, path: Path) -> CommandResult:
        return self._record('push', path)

    def push_set_upstream(self, path: Path, remote: str, branch: str) -> CommandResult:
        return self._record('push_set_upstream', path, remote, branch)

    def submodule_update(self, path: Path) -> CommandResult:
        return self._record('submodule_update', path)

    def list_submodule_paths(self, path: Path) -> List[str]:
        return list(self.submodules.get(path, []))


class ScriptedDecisions(Decisions):
    """Answers from fixed values, recording each question asked."""

    def __init__(self, stash: bool = False, message: str = "", publish: bool = False, remote: Optional[str] = None):
        self.stash = stash
        self.message = message
        self.publish = publish
        self.remote = remote
        self.asked: List[str] = []

    def confirm_stash(self, repo_name: str) -> bool:
        self.asked.append('stash')
        return self.stash

    def commit_message(self, repo_name: str) -> str:
        self.asked.append('commit_message')
        return self.message

    def confirm_publish(self, branch: str) -> bool:
        self.asked.append('publish')
        return self.publish

    def remote_name(self, default: str) -> str:
        self.asked.append('remote')
        return self.remote if self.remote is not None else default


@pytest.fixture
def vcs():
    return FakeVersionControl()


@pytest.fixture
def decisions():
    return ScriptedDecisions()


@pytest.fixture
def console():
    """Plain console whose output is kept in StringIO buffers."""
    return Console(color=False, out=io.StringIO(), err=io.StringIO())


@pytest.fixture
def processor(vcs, decisions, console):
    return RepositoryProcessor(vcs, decisions, console)


@pytest.fixture
def make_repo(tmp_path):
    """Create a directory that looks like a working tree, relative to tmp_path."""
    def _make(relative: str) -> Path:
        repo = tmp_path / relative
        (repo / '.git').mkdir(parents=True)
        return repo
    return _make


@pytest.fixture
def make_processor(vcs, console):
    """Processor with scripted answers; keyword options go to the processor."""
    def _make(stash=False, message="", publish=False, remote=None, **options):
        decisions = ScriptedDecisions(stash=stash, message=message, publish=publish, remote=remote)
        return RepositoryProcessor(vcs, decisions, console, **options)
    return _make
