"""
Category Sorter - Main Application
==================================

Main entry point and orchestration. A run scans one directory, classifies
the matching files, resolves duplicate groups with the user and moves
every remaining file into a category folder beside it.
"""

import argparse
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from category_sorter import __version__
from category_sorter.actions import FileMover, MoveSummary
from category_sorter.classification import ExtensionFilter, FileScanner, ScanResult, SelectionMode
from category_sorter.config import Config
from category_sorter.deduplication import DuplicateResolver, FileHasher, ResolutionResult
from category_sorter.deduplication.resolver import OutputFn, PromptFn
from category_sorter.utils.exceptions import (
    ConfigurationError,
    SorterError,
    TargetNotADirectoryError,
    TargetNotFoundError,
    TargetNotReadableError,
)
from category_sorter.utils.logging_config import (
    Timer,
    get_logger,
    new_run_id,
    set_run_id,
    setup_logging,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_NOT_FOUND = 3
EXIT_INTERRUPTED = 130


class RunStage(Enum):
    """Pipeline stages, entered strictly in this order."""
    SCANNING = "scanning"
    CLASSIFYING = "classifying"
    RESOLVING_DUPLICATES = "resolving_duplicates"
    MOVING = "moving"
    DONE = "done"


@dataclass
class SortRequest:
    """Everything a single run needs.

    Attributes:
        directory: Directory whose top-level files are organized.
        selection: Which categories to consider.
        ignore_duplicates: Skip duplicate detection entirely.
        dry_run: Report moves without performing them.
    """
    directory: Path
    selection: SelectionMode = field(default_factory=SelectionMode.all)
    ignore_duplicates: bool = False
    dry_run: bool = False


@dataclass
class RunReport:
    """Result of a run."""
    scan: ScanResult
    resolution: ResolutionResult
    moves: MoveSummary
    stages: List[RunStage] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.scan.failures) + len(self.moves.failures)


class CategorySorter:
    """Main orchestrator for a sort run.

    Coordinates the extension filter, scanner, duplicate resolver and mover.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        prompt: Optional[PromptFn] = None,
        output: Optional[OutputFn] = None
    ):
        """Initialize the sorter.

        Args:
            config: Configuration; defaults are used if None.
            prompt: Input function for duplicate prompts.
            output: Output function for duplicate listings.
        """
        self.config = config or Config()
        self.registry = self.config.build_registry()
        self.extension_filter = ExtensionFilter(self.registry)
        self.scanner = FileScanner(
            self.registry,
            FileHasher(
                algorithm=self.config.hashing.algorithm,
                buffer_size=self.config.hashing.buffer_size
            )
        )
        self.resolver = DuplicateResolver(prompt=prompt, output=output)
        self.stage: Optional[RunStage] = None
        self._stages: List[RunStage] = []

    def _enter(self, stage: RunStage) -> None:
        self.stage = stage
        self._stages.append(stage)
        logger.debug(f"Stage: {stage.value}")

    def run(self, request: SortRequest) -> RunReport:
        """Run the pipeline once.

        Fatal errors are raised before any file is touched. Per-file
        errors are collected in the report.

        Args:
            request: What to sort and how.

        Returns:
            RunReport describing what happened.

        Raises:
            ConfigurationError: For an invalid category selection.
            TargetNotFoundError: If the directory does not exist.
            TargetNotADirectoryError: If the path is not a directory.
        """
        set_run_id(new_run_id())
        self.stage = None
        self._stages = []

        extensions = self.extension_filter.target_extensions(request.selection)
        directory = self.scanner.validate_directory(request.directory)

        self._enter(RunStage.SCANNING)
        with Timer(logger, "scan"):
            scan = self.scanner.scan(directory, extensions)

        self._enter(RunStage.CLASSIFYING)
        for category in self.registry.names:
            count = sum(1 for r in scan.records if r.category == category)
            if count:
                logger.info(f"  {category}: {count} file(s)")

        if not request.ignore_duplicates:
            self._enter(RunStage.RESOLVING_DUPLICATES)
        resolution = self.resolver.resolve(
            scan.records,
            ignore_duplicates=request.ignore_duplicates
        )

        self._enter(RunStage.MOVING)
        with Timer(logger, "move"):
            moves = FileMover(dry_run=request.dry_run).move_all(resolution.records)

        self._enter(RunStage.DONE)
        report = RunReport(
            scan=scan,
            resolution=resolution,
            moves=moves,
            stages=list(self._stages)
        )
        self._log_summary(report)
        return report

    def _log_summary(self, report: RunReport) -> None:
        """Log the final summary."""
        logger.info("Summary:")
        logger.info(f"  Scanned: {len(report.scan.records) + len(report.scan.failures)}")
        logger.info(f"  Skipped as duplicates: {len(report.resolution.skipped)}")
        if report.moves.dry_run:
            logger.info(f"  Would move: {len(report.moves.moved)}")
        else:
            logger.info(f"  Moved: {len(report.moves.moved)}")
        logger.info(f"  Errors: {report.error_count}")

        if report.error_count:
            logger.warning(
                f"Completed with {report.error_count} per-file error(s). "
                "The affected files were left in place; the exit status is "
                "still 0 because per-file errors do not fail the run."
            )
        else:
            logger.info("Done.")


def _split_categories(values: Optional[Sequence[str]]) -> Optional[List[str]]:
    """Flatten repeated and comma-separated category options."""
    if values is None:
        return None
    names = []
    for value in values:
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="category-sorter",
        description=(
            "Sort the files of a directory into category folders "
            "(Images, Documents, Videos, Audio), asking what to do with "
            "duplicate files."
        ),
        epilog=(
            "Exit status is 0 when the run completes, even if some files "
            "could not be read or moved; those errors are reported. "
            "Invalid options exit with 2, a missing or unreadable directory with 3."
        ),
    )
    parser.add_argument(
        'directory',
        type=Path,
        help='Directory whose files will be sorted'
    )
    parser.add_argument(
        '--only',
        action='append',
        metavar='CATEGORY[,CATEGORY...]',
        help='Only sort these categories (repeatable)'
    )
    parser.add_argument(
        '--except',
        dest='exclude',
        action='append',
        metavar='CATEGORY[,CATEGORY...]',
        help='Sort every category except these (repeatable)'
    )
    parser.add_argument(
        '--ignore-duplicates',
        action='store_true',
        help='Move duplicate files without asking'
    )
    parser.add_argument(
        '--dry-run', '-n',
        action='store_true',
        help='Show what would be moved without moving anything'
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        help='YAML configuration file'
    )
    parser.add_argument(
        '--log-file',
        type=Path,
        help='Also write JSON logs to this file'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    return parser


def _report_fatal(message: str, console_logging: bool = True) -> None:
    """Log a fatal error and make sure it reaches the terminal.

    With console logging off the log record only lands in the log file,
    so the message is echoed to stderr as well.
    """
    logger.error(message)
    if not console_logging:
        print(f"✗ {message}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None, prompt: Optional[PromptFn] = None) -> int:
    """Main entry point with CLI support.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
        prompt: Input function for duplicate prompts (defaults to input).

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        config = Config.load(args.config)
    except ConfigurationError as e:
        print(f"✗ {e.message}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.verbose:
        config.logging.level = "DEBUG"
    if args.log_file:
        config.logging.log_file = args.log_file
    setup_logging(config.logging)

    try:
        request = SortRequest(
            directory=args.directory,
            selection=SelectionMode.from_options(
                only=_split_categories(args.only),
                exclude=_split_categories(args.exclude)
            ),
            ignore_duplicates=args.ignore_duplicates,
            dry_run=args.dry_run,
        )
        CategorySorter(config, prompt=prompt).run(request)

    except ConfigurationError as e:
        _report_fatal(e.message, config.logging.console_output)
        return EXIT_CONFIG_ERROR
    except (TargetNotFoundError, TargetNotADirectoryError, TargetNotReadableError) as e:
        _report_fatal(e.message, config.logging.console_output)
        return EXIT_NOT_FOUND
    except SorterError as e:
        _report_fatal(str(e), config.logging.console_output)
        return EXIT_ERROR
    except (KeyboardInterrupt, EOFError):
        logger.warning("Interrupted; files already moved stay where they are")
        return EXIT_INTERRUPTED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
