"""
Repository processor - brings one working tree into a committed, synchronized state.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from gitup.console import Console
from gitup.decisions import Decisions
from gitup.vcs.base import CommandResult, CurrentRef, GitError, VersionControl

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class SyncFailed(Exception):
    """Raised inside the processor to stop work on the current repository."""
    pass


@dataclass
class RepoResult:
    """Outcome of processing one repository."""
    path: Path
    success: bool = False
    stashed: bool = False
    committed: bool = False
    commit_message: Optional[str] = None
    ref: Optional[CurrentRef] = None
    synced: bool = False
    published: bool = False
    error: Optional[str] = None


def timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class RepositoryProcessor:
    """
    Runs the stash/stage/commit/sync sequence for a single repository.

    Failures are reported through the console and returned as an
    unsuccessful RepoResult; they never propagate to the caller.
    """

    def __init__(
        self,
        vcs: VersionControl,
        decisions: Decisions,
        console: Console,
        default_remote: str = 'origin',
        commit_message_template: str = 'Auto-commit: {timestamp}',
        stash_message_template: str = 'Auto-stashed by gitup {timestamp}'
    ):
        self.vcs = vcs
        self.decisions = decisions
        self.console = console
        self.default_remote = default_remote
        self.commit_message_template = commit_message_template
        self.stash_message_template = stash_message_template

    def default_commit_message(self) -> str:
        return self.commit_message_template.format(timestamp=timestamp())

    def process(self, path: Path) -> RepoResult:
        """
        Process one working tree.

        Args:
            path: Absolute path already known to be a working-tree root

        Returns:
            RepoResult describing what was done
        """
        result = RepoResult(path=path)
        self.console.section(f"Processing repository: {path.name} ({path})")

        try:
            self._save_local_changes(path, result)
            self._commit(path, result)
            result.ref = self.vcs.current_ref(path)
            self.console.info(f"Current branch: {result.ref}")
            if self.vcs.has_upstream(path):
                self._sync(path, result)
            else:
                self._offer_publish(path, result)
        except SyncFailed as e:
            result.error = str(e)
            return result
        except GitError as e:
            self.console.error(str(e))
            result.error = str(e)
            return result

        result.success = True
        return result

    def _fail(self, message: str, command: CommandResult):
        logger.debug(f"{message}: {command.stderr.strip() or command.stdout.strip()}")
        self.console.error(f"{message}: {command.summary()}")
        raise SyncFailed(message)

    def _save_local_changes(self, path: Path, result: RepoResult):
        if not self.vcs.has_uncommitted_changes(path):
            return

        self.console.info(f"Uncommitted changes detected in {path.name}")
        if not self.decisions.confirm_stash(path.name):
            return

        stashed = self.vcs.stash(path, self.stash_message_template.format(timestamp=timestamp()))
        if not stashed.ok:
            self._fail("Failed to stash changes", stashed)
        result.stashed = True
        self.console.success("Changes stashed")

    def _commit(self, path: Path, result: RepoResult):
        self.console.info("Adding all files...")
        staged = self.vcs.stage_all(path)
        if not staged.ok:
            self._fail("Failed to stage changes", staged)

        if not self.vcs.has_staged_changes(path):
            self.console.success("No changes to commit")
            return

        message = self.decisions.commit_message(path.name).strip()
        if not message:
            message = self.default_commit_message()

        self.console.info(f"Committing changes with message: \"{message}\"")
        committed = self.vcs.commit(path, message)
        if not committed.ok:
            self._fail("Failed to commit changes", committed)
        result.committed = True
        result.commit_message = message
        self.console.success("Changes committed")

    def _sync(self, path: Path, result: RepoResult):
        self.console.info("Pulling latest changes from remote...")
        if not self.vcs.pull_ff_only(path).ok:
            self.console.warning("Cannot fast-forward. Trying to rebase...")
            rebased = self.vcs.pull_rebase(path)
            if not rebased.ok:
                # Leave the tree as it was before the pull
                self.vcs.abort_rebase(path)
                self._fail("Could not pull changes. Please resolve conflicts manually", rebased)
        self.console.success("Pull successful")

        self.console.info("Pushing changes to remote...")
        pushed = self.vcs.push(path)
        if not pushed.ok:
            self._fail("Failed to push changes to remote", pushed)
        result.synced = True
        self.console.success("Push successful")

    def _offer_publish(self, path: Path, result: RepoResult):
        if result.ref.detached:
            self.console.warning(f"HEAD is detached at {result.ref}; nothing to publish. Skipping pull/push.")
            return

        branch = result.ref.name
        self.console.warning(f"Branch '{branch}' has no upstream. Skipping pull/push.")
        if not self.decisions.confirm_publish(branch):
            return

        remote = self.decisions.remote_name(self.default_remote).strip() or self.default_remote
        self.console.info(f"Setting upstream to {remote}/{branch} and pushing...")
        published = self.vcs.push_set_upstream(path, remote, branch)
        if not published.ok:
            self._fail("Failed to push and set upstream", published)
        result.published = True
        self.console.success("Upstream set and pushed successfully")
