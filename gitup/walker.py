"""
Tree walker - finds every working tree reachable from a start path.

Working trees are reached three ways: the start path itself, submodules
declared by a working tree, and a bounded directory search when the start
path is not a working tree.
"""
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Set

from gitup.console import Console
from gitup.processor import RepoResult, RepositoryProcessor
from gitup.vcs.base import VersionControl

logger = logging.getLogger(__name__)

METADATA_DIR = '.git'


class TraversalMode(Enum):
    """How to treat a path that is not a working tree."""
    ROOT_SEARCH = 'root_search'  # search subdirectories for repositories
    NESTED = 'nested'            # warn and give up


@dataclass
class WalkReport:
    """Everything processed during one traversal."""
    results: List[RepoResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> List[RepoResult]:
        return [r for r in self.results if not r.success]


def find_repositories(root: Path, max_depth: int = 3) -> List[Path]:
    """
    Find working trees below root by their metadata directories.

    A metadata directory counts when it sits at most max_depth levels below
    root (root/a/b/.git is three levels). Metadata directories are never
    descended into, and root's own metadata directory is ignored.

    Args:
        root: Directory to search
        max_depth: Deepest level at which a metadata directory may appear

    Returns:
        Parent directories of the metadata directories, in sorted walk order
    """
    found = []
    root_metadata = root / METADATA_DIR

    for dirpath, dirnames, _ in os.walk(root):
        current = Path(dirpath)
        depth = len(current.relative_to(root).parts)
        dirnames.sort()

        if METADATA_DIR in dirnames:
            dirnames.remove(METADATA_DIR)
            metadata = current / METADATA_DIR
            if metadata != root_metadata and not metadata.is_symlink():
                found.append(current)

        # Entries one level down sit at depth + 1; their children at depth + 2
        if depth + 2 > max_depth:
            dirnames[:] = []

    logger.debug(f"Found {len(found)} repositories under {root}")
    return found


class TreeWalker:
    """
    Drives the repository processor over every working tree it can reach.

    A walker processes each repository at most once, so a tree found both
    by the search and as a submodule is not synchronized twice.
    """

    def __init__(
        self,
        vcs: VersionControl,
        processor: RepositoryProcessor,
        console: Console,
        search_depth: int = 3
    ):
        self.vcs = vcs
        self.processor = processor
        self.console = console
        self.search_depth = search_depth
        self.report = WalkReport()
        self._visited: Set[Path] = set()

    def _warn(self, message: str, indent: int = 0):
        self.report.warnings.append(message)
        self.console.warning(message, indent=indent)

    def walk(self, path: Path, depth: int = 0, mode: TraversalMode = TraversalMode.ROOT_SEARCH) -> bool:
        """
        Process path and everything reachable from it.

        Args:
            path: Directory to start from
            depth: Recursion depth, 0 for the top-level call
            mode: What to do if path is not a working tree

        Returns:
            True if path was a working tree, or if the search below it found
            at least one; False otherwise
        """
        if not path.is_dir():
            self.console.error(f"Directory does not exist: {path}")
            return False

        if self.vcs.is_working_tree(path):
            self._process_tree(path, depth)
            return True

        if mode is TraversalMode.ROOT_SEARCH:
            return self._search(path, depth)

        self._warn(f"Directory is not a git repository: {path}", indent=depth)
        return False

    def _process_tree(self, path: Path, depth: int):
        key = path.resolve()
        if key in self._visited:
            self.console.info(f"Already processed: {path}", indent=depth)
            return
        self._visited.add(key)

        result = self.processor.process(path)
        self.report.results.append(result)
        if not result.success:
            self._warn(f"Failed to process repository: {path}", indent=depth)

        if (path / '.gitmodules').is_file():
            self._process_submodules(path, depth)

    def _process_submodules(self, path: Path, depth: int):
        self.console.section(f"Processing submodules for {path.name}")
        self.console.info("Updating submodules...")
        updated = self.vcs.submodule_update(path)
        if not updated.ok:
            self._warn(f"Submodule update failed: {updated.summary()}")

        for submodule in self.vcs.list_submodule_paths(path):
            full_path = path / submodule
            if full_path.is_dir():
                self.console.info(f"Processing submodule: {submodule}", indent=depth)
                self.walk(full_path, depth + 1, TraversalMode.NESTED)
            else:
                self._warn(f"Submodule directory not found: {submodule}", indent=depth)

    def _search(self, path: Path, depth: int) -> bool:
        self.console.section(f"Searching for git repositories in: {path}")

        repositories = find_repositories(path, self.search_depth)
        for repo_path in repositories:
            self.walk(repo_path, depth + 1, TraversalMode.NESTED)

        if not repositories:
            self._warn(f"No git repositories found in: {path}")
            return False
        return True
