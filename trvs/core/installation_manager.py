import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import requests
from packaging.version import InvalidVersion

from trvs.core.context import ProgramContext
from trvs.core.profile import GameProfile
from trvs.utils import github
from trvs.utils.file_io import compute_md5_hash, find_missing_file
from trvs.utils.settings import APP_NAME

logger = logging.getLogger(__name__)


class ValidationStatus(Enum):
    """Installation validation result enumeration"""

    SUCCESS = "success"
    MISSING_REQUIRED_FILE = "missing_required_file"
    TAMPERED_FILE = "tampered_file"
    MISSING_INSTALL_FILE = "missing_install_file"


@dataclass(frozen=True)
class ValidationOutcome:
    status: ValidationStatus
    file_name: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ValidationStatus.SUCCESS

    def describe(self, abbreviation: str = "TR") -> str:
        """Human readable explanation of the outcome."""
        if self.status is ValidationStatus.MISSING_REQUIRED_FILE:
            return f"Required file {self.file_name} was not found!"
        if self.status is ValidationStatus.TAMPERED_FILE:
            return f"File {self.file_name} was modified.\nGot {self.actual}, expected {self.expected}"
        if self.status is ValidationStatus.MISSING_INSTALL_FILE:
            return (
                f"Parent folder is missing game file {self.file_name}, "
                f"cannot be a {abbreviation} installation."
            )
        return "Installation validated."


SUCCESS = ValidationOutcome(ValidationStatus.SUCCESS)


def validate_md5_hashes(file_audit: Dict[str, str], directory: str) -> ValidationOutcome:
    """
    Checks that files in `directory` match their required MD5 hashes.

    Stops at the first missing or modified file.

    Args:
        file_audit: Mapping of file names to lowercase MD5 hashes, checked in order
        directory: Directory to operate within
    """
    for file_name, expected in file_audit.items():
        try:
            actual = compute_md5_hash(os.path.join(directory, file_name))
        except FileNotFoundError:
            return ValidationOutcome(ValidationStatus.MISSING_REQUIRED_FILE, file_name)
        if actual != expected:
            return ValidationOutcome(ValidationStatus.TAMPERED_FILE, file_name, expected, actual)
    return SUCCESS


def check_game_dir_looks_like_install(game_files, game_dir: str) -> ValidationOutcome:
    """Ensures the target directory contains the bare minimum game files."""
    missing = find_missing_file(game_files, game_dir)
    if missing:
        return ValidationOutcome(ValidationStatus.MISSING_INSTALL_FILE, missing)
    return SUCCESS


def validate_installation_files(profile: GameProfile, game_dir: str) -> ValidationOutcome:
    """
    Validates packaged files, then ensures the target directory looks like a game installation.

    Packaged files are checked first since a modified file is a more precise
    diagnosis than a folder that merely doesn't look right.
    """
    outcome = validate_md5_hashes(profile.packaged_files, game_dir)
    if not outcome.ok:
        return outcome
    logger.info("Successfully validated packaged files using MD5 hashes.")

    outcome = check_game_dir_looks_like_install(profile.game_files, game_dir)
    if outcome.ok:
        logger.info(f"Parent directory seems like a {profile.abbreviation} game installation.")
    return outcome


class InstallationManager:
    """
    Validates install location and packaged files, and checks for program updates.
    """

    def __init__(
        self,
        context: ProgramContext,
        program_manager,
        latest_version_getter: Callable = github.get_latest_version,
    ):
        self.context = context
        self.program_manager = program_manager
        self.console = context.console
        self._get_latest_version = latest_version_getter

    def version_check(self) -> None:
        """Notifies the user if their program is outdated."""
        logger.debug("Running GitHub version checks...")
        profile = self.context.profile
        try:
            latest = self._get_latest_version(
                profile.repo_owner, profile.github_repo, APP_NAME, str(self.context.version)
            )
            if latest is None:
                logger.debug("No releases found.")
                self.console.print_line("I didn't find any latest release information.")
                self.console.print_line("Perhaps no releases exist or the URL was bad.")
                self.console.print_line("If release information was expected, please bring up the issue!")
                self.console.print_line("Otherwise... Let me know how testing goes! :D")
                return

            result = github.compare_versions(self.context.version, latest, 3)
            if result < 0:
                logger.debug(
                    f"Latest GitHub release ({latest}) is newer than the running version ({self.context.version})."
                )
                self.console.print_header("A new release is available!", profile.latest_release_link, "yellow")
                self.console.print_line("You are strongly advised to update to ensure leaderboard compatibility.")
            elif result == 0:
                logger.debug(f"Version is up-to-date ({latest}).")
            else:
                logger.debug(
                    f"Running version ({self.context.version}) has not yet been released on GitHub ({latest})."
                )
                self.console.print_line("You seem to be running a pre-release version.")
                self.console.print_line("Let me know how testing goes! :D")
        except Exception as e:
            if isinstance(e, (requests.RequestException, InvalidVersion, ValueError)):
                logger.error(f"GitHub request failed due to an API/HTTP failure. {e}", exc_info=True)
            else:
                logger.error(f"Version check failed with an unforeseen error. {e}", exc_info=True)
            self.console.print_with_color(
                "Unable to check for the latest version. Consider manually checking:", "yellow"
            )
            self.console.print_line(profile.latest_release_link)
            self.console.print_line("I've put some additional information in this session's log file.")
        finally:
            self.console.print_line()

    def validate_installation(self) -> ValidationOutcome:
        """
        Validates packaged files and the target folder, exiting the program on failure.
        """
        profile = self.context.profile
        try:
            outcome = validate_installation_files(profile, self.context.game_dir)
        except Exception as e:
            statement = "An unhandled exception occurred while validating your installation."
            self.program_manager.give_error_message_and_exit(statement, e, 1)
            raise

        if not outcome.ok:
            message = outcome.describe(profile.abbreviation)
            logger.critical(f"Installation failed to validate ({outcome.status.value}). {message}")
            self.console.print_with_color(message, "red")
            self.console.print_line("You are advised to re-install the latest release to fix the issue:")
            self.console.print_line(profile.latest_release_link)
            self.console.print_line("I've put some additional information in this session's log file.")
            self.program_manager.early_pause_and_exit(2)

        return outcome
