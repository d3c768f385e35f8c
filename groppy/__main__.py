"""Main entry point for the groppy CLI."""

from dotenv import load_dotenv
load_dotenv()

import sys
import argparse
from typing import List, Optional

from .config import Config
from .core.logger import setup_logging
from .core.repo_manager import RepoManager
from .utils.discovery import find_repos
from .utils.progress import ProgressReporter, colorize, OVERLAY0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='groppy',
        description='Update multiple git repositories in parallel',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Each directory is checked, together with its immediate subdirectories,
for git repositories. Clean repositories are fast-forwarded to their
upstream branch after fetching origin; repositories with local changes
are left alone.

Examples:
  # Update every repository under ~/src with 8 threads
  groppy -j 8 ~/src

  # Keep a log file of the run
  groppy --log-dir ~/.cache/groppy ~/src ~/work
        """
    )

    parser.add_argument(
        'directories',
        nargs='*',
        metavar='DIR',
        help='Directories to check for git repositories (default: current directory)'
    )
    parser.add_argument(
        '-j', '--threads',
        type=int,
        metavar='N',
        help='Number of threads to use (default: 4, overrides GROPPY_THREADS)'
    )
    parser.add_argument(
        '--log-dir',
        metavar='DIR',
        help='Write a log file to this directory (overrides GROPPY_LOG_DIR)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show informational log messages on stderr'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env_and_args(
            threads=args.threads,
            directories=args.directories,
            log_dir=args.log_dir,
            verbose=args.verbose
        )
    except ValueError as e:
        logger = setup_logging(verbose=args.verbose)
        logger.error(f"Configuration error: {e}")
        return 1

    logger = setup_logging(verbose=config.verbose, log_dir=config.log_dir)
    logger.info(f"Threads: {config.threads}")
    logger.info(f"Directories: {', '.join(config.directories)}")

    try:
        repos = find_repos(config.directories)
        if not repos:
            print("No repositories found")
            return 0

        repo_manager = RepoManager(max_workers=config.threads)
        report = repo_manager.sync(repos, ProgressReporter())

        print(colorize(report.stats.summary_line(), OVERLAY0))
        return 0

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
