#!/usr/bin/env python3
"""
Assistant Configuration Backup CLI

A command-line interface for backing up and restoring the assistant's home
directory: custom skill files are copied flat, and the plugin cache tree is
snapshotted into a gzip-compressed tar container.

Usage:
    python3 cli_backup.py backup
    python3 cli_backup.py restore --skip-skills
    python3 cli_backup.py clean
    python3 cli_backup.py info
    python3 cli_backup.py verify
"""

import argparse
import logging
import sys
from typing import Optional

from colored_logger import setup_colored_logging, get_colored_logger
from io_ops.archive_manager import BackupManager
from messages import Translator
from reporter import ConsoleReporter
from settings import Settings

logger = get_colored_logger(__name__)


class BackupCLI:
    """Command-line interface for configuration backup and restore."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser with all commands and options."""
        parser = argparse.ArgumentParser(
            description="Back up and restore assistant skills and plugin cache",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Back up skills and plugin cache into the current directory
  python3 cli_backup.py backup

  # Back up into a specific backup root
  python3 cli_backup.py --backup-root ~/backups/claude backup

  # Restore only the plugin cache
  python3 cli_backup.py restore --skip-skills

  # Delete all plugin cache backups
  python3 cli_backup.py clean

  # Show and verify existing backups
  python3 cli_backup.py info
  python3 cli_backup.py verify
            """,
        )

        parser.add_argument(
            "--backup-root",
            "-b",
            help="Backup root directory (default: current directory)",
        )
        parser.add_argument(
            "--claude-dir",
            help="Assistant home directory (default: $CLAUDE_CONFIG_DIR or ~/.claude)",
        )
        parser.add_argument("--settings", "-s", help="Path to a JSON settings file")
        parser.add_argument(
            "--lang", choices=["en", "zh"], help="Output language (default: from LANG)"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable debug logging"
        )

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        # Backup command
        backup_parser = subparsers.add_parser(
            "backup", help="Back up skills and the plugin cache"
        )
        self._add_step_options(backup_parser)
        backup_parser.add_argument(
            "--level",
            "-l",
            type=int,
            choices=range(0, 10),
            metavar="0-9",
            help="Gzip compression level (default: 6)",
        )
        backup_parser.add_argument(
            "--no-verify",
            action="store_true",
            help="Do not verify the container after writing it",
        )

        # Restore command
        restore_parser = subparsers.add_parser(
            "restore", help="Restore skills and the plugin cache"
        )
        self._add_step_options(restore_parser)
        restore_parser.add_argument(
            "--restore-modes",
            action="store_true",
            help="Apply stored permission bits to extracted files",
        )
        restore_parser.add_argument(
            "--no-validate-paths",
            action="store_true",
            help="Do not reject entries that resolve outside the destination",
        )

        subparsers.add_parser("clean", help="Delete all plugin cache backups")
        subparsers.add_parser("info", help="Show existing plugin cache backups")
        subparsers.add_parser("verify", help="Verify plugin cache backup integrity")

        return parser

    @staticmethod
    def _add_step_options(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--skip-skills", action="store_true", default=None, help="Skip custom skills"
        )
        subparser.add_argument(
            "--skip-cache", action="store_true", help="Skip the plugin cache"
        )

    def _load_settings(self, args) -> Settings:
        overrides = {
            "backup_root": args.backup_root,
            "claude_dir": args.claude_dir,
            "lang": args.lang,
            "skip_skills": getattr(args, "skip_skills", None),
        }
        if getattr(args, "level", None) is not None:
            overrides["compression_level"] = args.level
        if getattr(args, "no_verify", False):
            overrides["verify_after_backup"] = False
        if getattr(args, "restore_modes", False):
            overrides["restore_file_modes"] = True
        if getattr(args, "no_validate_paths", False):
            overrides["validate_paths"] = False
        return Settings(args.settings, overrides)

    def run(self, args: Optional[list] = None) -> int:
        """Run the CLI with the given arguments."""
        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        if parsed_args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        settings = self._load_settings(parsed_args)
        manager = BackupManager.from_settings(settings)
        reporter = ConsoleReporter(Translator(settings.lang))

        try:
            if parsed_args.command == "backup":
                return self._handle_backup(parsed_args, settings, manager, reporter)
            elif parsed_args.command == "restore":
                return self._handle_restore(parsed_args, settings, manager, reporter)
            elif parsed_args.command == "clean":
                return self._handle_clean(manager, reporter)
            elif parsed_args.command == "info":
                return self._handle_info(manager, reporter)
            elif parsed_args.command == "verify":
                return self._handle_verify(manager, reporter)
            else:
                logger.error("Unknown command: %s", parsed_args.command)
                return 1

        except KeyboardInterrupt:
            reporter.cancelled()
            return 130
        except Exception as e:
            reporter.failed(e)
            logger.debug("Full error details:", exc_info=True)
            return 1

    def _handle_backup(self, args, settings, manager, reporter) -> int:
        """Handle the 'backup' command."""
        reporter.title("backup.title")

        reporter.step_started("skills")
        reporter.backup_step(manager.backup_skills(skip=settings.skip_skills))

        reporter.step_started("cache")
        if not args.skip_cache:
            reporter.title("cache.backup.title")
            reporter.detected_plugins(manager.detect_plugins())
            reporter.progress("cache.backup.packing")
        reporter.backup_step(manager.backup_cache(skip=args.skip_cache))
        return 0

    def _handle_restore(self, args, settings, manager, reporter) -> int:
        """Handle the 'restore' command."""
        reporter.title("restore.title")

        reporter.step_started("skills")
        reporter.restore_step(manager.restore_skills(skip=settings.skip_skills))

        reporter.step_started("cache")
        if not args.skip_cache:
            reporter.title("cache.restore.title")
            reporter.progress("cache.restore.extracting")
        reporter.restore_step(manager.restore_cache(skip=args.skip_cache))
        return 0

    def _handle_clean(self, manager, reporter) -> int:
        """Handle the 'clean' command."""
        reporter.title("cache.clean.title")
        reporter.clean(manager.clean_cache())
        return 0

    def _handle_info(self, manager, reporter) -> int:
        """Handle the 'info' command."""
        artifact_dir = manager.layout.artifact_dir
        if not artifact_dir.is_dir():
            reporter.missing(str(artifact_dir))
            return 0

        reporter.info(artifact_dir, manager.describe_artifacts())
        return 0

    def _handle_verify(self, manager, reporter) -> int:
        """Handle the 'verify' command."""
        artifact_dir = manager.layout.artifact_dir
        if not artifact_dir.is_dir():
            reporter.missing(str(artifact_dir))
            return 1

        results = manager.verify_artifacts()
        reporter.verify(artifact_dir, results)
        if results and all(ok for _, ok in results):
            return 0
        return 1


def main():
    """Main entry point for the CLI."""
    setup_colored_logging(level=logging.INFO)

    cli = BackupCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
