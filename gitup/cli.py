#!/usr/bin/env python3
"""
gitup - commit, pull and push every git repository under a directory.

Walks the start directory (default: current directory), processing it if it
is a repository and recursing into its submodules, or searching a few levels
down for repositories if it is not.
"""
import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from colorama import init as colorama_init

from gitup import __version__
from gitup.config import ConfigError, GitupConfig, load_config
from gitup.console import Console
from gitup.decisions import AutomaticDecisions, Decisions, InteractiveDecisions
from gitup.processor import RepositoryProcessor
from gitup.vcs.base import GitError
from gitup.vcs.git_cli import GitCli
from gitup.walker import TraversalMode, TreeWalker, WalkReport


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gitup',
        description='Commit, pull and push every git repository under a directory',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'path',
        nargs='?',
        help='Directory to start from (default: current directory)'
    )

    unattended = parser.add_mutually_exclusive_group()
    unattended.add_argument(
        '-y', '--yes',
        action='store_true',
        help='Do not prompt; stash dirty trees and publish branches without upstream'
    )
    unattended.add_argument(
        '-n', '--non-interactive',
        action='store_true',
        help='Do not prompt; never stash and never publish'
    )

    parser.add_argument('-m', '--message', help='Commit message for every repository')
    parser.add_argument('--remote', help='Remote used when publishing a branch (default: origin)')

    color = parser.add_mutually_exclusive_group()
    color.add_argument('--color', dest='color', action='store_const', const='always',
                       help='Always colorize output')
    color.add_argument('--no-color', dest='color', action='store_const', const='never',
                       help='Never colorize output')

    parser.add_argument('--config', type=Path, help='YAML settings file (default: $GITUP_CONFIG or ~/.config/gitup/config.yaml)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log every git command')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def resolve_start_path(argument: Optional[str], console: Console) -> Path:
    """Start path as an absolute real path; falls back to the current directory."""
    if argument is None:
        return Path('.').resolve()
    if not os.path.isdir(argument):
        console.warning(f"Not a directory: {argument}. Using current directory instead.")
        return Path('.').resolve()
    return Path(argument).resolve()


def apply_args(config: GitupConfig, args: argparse.Namespace) -> GitupConfig:
    """Command-line flags take precedence over file and environment settings."""
    if args.yes:
        config.interactive = False
        config.auto_stash = True
        config.auto_publish = True
    elif args.non_interactive:
        config.interactive = False
        config.auto_stash = False
        config.auto_publish = False
    if args.remote:
        config.default_remote = args.remote
    if args.color:
        config.color = args.color
    if args.verbose:
        config.log_level = 'DEBUG'
    config.validate()
    return config


def build_decisions(config: GitupConfig, message: Optional[str]) -> Decisions:
    if config.interactive:
        return InteractiveDecisions(message=message or "")
    return AutomaticDecisions(
        stash=config.auto_stash,
        publish=config.auto_publish,
        message=message or "",
        remote=config.default_remote
    )


def print_summary(console: Console, report: WalkReport, found: bool):
    console.section("Summary")
    console.info(f"Repositories processed: {report.processed}")
    for result in report.failed:
        console.warning(f"Not synchronized: {result.path} ({result.error})")
    if found:
        console.success("Git update process completed!")
    else:
        console.warning("Git update process completed without finding a repository")


def run(args: argparse.Namespace, config: GitupConfig) -> int:
    """
    Run one update over the start path.

    Returns:
        Process exit code: 0 when a repository was found, 1 otherwise
    """
    console = Console(color=config.use_color(sys.stdout.isatty()))
    vcs = GitCli(config.git_executable)
    processor = RepositoryProcessor(
        vcs,
        build_decisions(config, args.message),
        console,
        default_remote=config.default_remote,
        commit_message_template=config.commit_message_template,
        stash_message_template=config.stash_message_template
    )
    walker = TreeWalker(vcs, processor, console, search_depth=config.search_depth)

    start_path = resolve_start_path(args.path, console)
    console.section(f"Git repository update - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    console.info(f"Starting point: {start_path}")

    try:
        found = walker.walk(start_path, 0, TraversalMode.ROOT_SEARCH)
    except GitError as e:
        console.error(str(e))
        return 1

    print_summary(console, walker.report, found)
    return 0 if found else 1


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = apply_args(load_config(args.config), args)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr
    )
    if config.use_color(sys.stdout.isatty()):
        # Keep escape codes when color is forced onto a pipe
        colorama_init(strip=False)

    try:
        exit_code = run(args, config)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
