import argparse
import logging
import os
import sys
from enum import Enum
from typing import List, Optional, Tuple

from trvs.core.context import ProgramContext
from trvs.core.profile import DEFAULT_PROFILE_FILE, GameProfile, ProfileError, load_profile
from trvs.utils.console_io import ConsoleIO
from trvs.utils.logger import delete_excess_log_files, setup_logging
from trvs.utils.settings import (
    APP_NAME,
    APP_VERSION,
    AUTHOR,
    SETTINGS_FILE,
    SettingsError,
    get_setting,
    load_user_settings,
)

logger = logging.getLogger(__name__)


class ArgumentParseResult(Enum):
    PARSED_AND_SHOULD_CONTINUE = "parsed"
    HELP_OR_VERSION_ARG_GIVEN = "help_or_version"
    FAILED_TO_PARSE = "failed"


class ArgumentParseError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """Reports parse errors to the caller instead of exiting."""

    def error(self, message):
        raise ArgumentParseError(message)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="trvs",
        description="Swaps a Tomb Raider game installation between game versions.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable console logging.")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument(
        "--game-dir",
        default=None,
        help="Game installation folder (default: the parent of the current folder).",
    )
    parser.add_argument(
        "--profile",
        default=DEFAULT_PROFILE_FILE,
        help=f"Game profile file (default: {DEFAULT_PROFILE_FILE}).",
    )
    parser.add_argument(
        "--settings",
        default=SETTINGS_FILE,
        help=f"User settings file (default: {SETTINGS_FILE}).",
    )
    parser.add_argument(
        "--no-version-check",
        action="store_true",
        help="Skip checking GitHub for a newer release.",
    )
    return parser


class ProgramManager:
    """
    Provides functionality for program initialization and the standard ways out of it.
    """

    def __init__(self, console: Optional[ConsoleIO] = None, log_dir: str = "logs"):
        self.console = console or ConsoleIO()
        self.log_dir = log_dir
        self.context: Optional[ProgramContext] = None

    def manage_program(self, argv: Optional[List[str]] = None) -> Tuple[ProgramContext, argparse.Namespace]:
        """
        Handles arguments, logging, the game profile and user settings, then prunes old logs.

        Returns:
            The program context and the parsed arguments
        """
        result, args = self.handle_program_args(argv)
        if result is ArgumentParseResult.HELP_OR_VERSION_ARG_GIVEN:
            sys.exit(0)  # No need to pause since they definitely used a terminal.
        elif result is ArgumentParseResult.FAILED_TO_PARSE:
            self.early_pause_and_exit(1)

        try:
            profile = load_profile(args.profile)
        except ProfileError as e:
            setup_logging(APP_NAME, args.verbose, self.log_dir)
            self.give_error_message_and_exit("The game profile could not be loaded.", e, 1)

        log_path = setup_logging(profile.abbreviation, args.verbose, self.log_dir)
        self.set_stage_and_print_splash(profile)

        game_dir = os.path.abspath(args.game_dir or os.path.dirname(os.getcwd()))
        logger.info(f"Target game folder: {game_dir}")

        self.context = ProgramContext(
            profile=profile,
            game_dir=game_dir,
            console=self.console,
            log_path=log_path,
        )
        self.handle_user_settings(args.settings)
        self.delete_excess_log_files()
        return self.context, args

    def handle_program_args(self, argv: Optional[List[str]]) -> Tuple[ArgumentParseResult, Optional[argparse.Namespace]]:
        """Parses `argv`, printing help and errors as needed."""
        parser = build_argument_parser()
        try:
            args = parser.parse_args(argv)
        except ArgumentParseError as e:
            parser.print_usage(self.console.stdout)
            self.console.print_line(f"ERROR: {e}")
            return ArgumentParseResult.FAILED_TO_PARSE, None
        except SystemExit as e:
            # argparse exits by itself after printing help or version text
            if e.code in (0, None):
                return ArgumentParseResult.HELP_OR_VERSION_ARG_GIVEN, None
            return ArgumentParseResult.FAILED_TO_PARSE, None
        return ArgumentParseResult.PARSED_AND_SHOULD_CONTINUE, args

    def set_stage_and_print_splash(self, profile: GameProfile) -> None:
        """Sets the terminal title and prints the intro splash."""
        self.console.set_title(f"{profile.abbreviation} Version Swapper")
        for line in profile.ascii_art:
            self.console.print_centered(line, "cyan")
        self.console.print_centered(f"Made with love by {AUTHOR}", "cyan")
        self.console.print_centered(f"Source code: {profile.repo_link}")
        self.console.print_line()

    def handle_user_settings(self, path: str) -> None:
        """Loads the user settings into the context; creates a default file if it doesn't exist."""
        try:
            self.context.settings = load_user_settings(path, on_created=self._announce_settings_file)
        except (SettingsError, OSError) as e:
            statement = "An error was encountered while reading the user settings file."
            self.give_error_message_and_exit(statement, e, 1)

    def _announce_settings_file(self, file_path: str) -> None:
        self.console.print_line("I created a default user settings file at")
        self.console.print_line(file_path)
        self.console.print_line("You can edit the settings in this file to your desired amounts.")
        self.console.print_line()

    def delete_excess_log_files(self) -> None:
        limit = get_setting(self.context.settings, "log_file_limit")
        delete_excess_log_files(limit, self.console, self.log_dir)

    def give_error_message_and_exit(self, statement: str, error: BaseException, exit_code: int) -> None:
        """
        Provides a standardized format to display an error and exit.

        Args:
            statement: Text to log and print
            error: Exception causing the early exit
            exit_code: Return code to give the OS
        """
        logger.critical(f"{statement} {error}", exc_info=error)
        self.console.print_with_color(statement, "red")
        self.console.print_line("I've put some additional information in this session's log file.")
        self.early_pause_and_exit(exit_code)

    def early_pause_and_exit(self, exit_code: int) -> None:
        """Ends the program after pausing to prevent immediate terminal window exits."""
        logger.debug(f"Exiting with code {exit_code}.")
        try:
            self.console.wait_for_key("Press any key to exit...")
        except EOFError:
            logger.debug("Input closed, exiting without the pause.")
        sys.exit(exit_code)
