import logging
import os
from typing import List

from trvs.core.context import ProgramContext
from trvs.core.version_swapper import FILE_OPERATION_EXIT_CODE, VersionSwapper

logger = logging.getLogger(__name__)


class FolderSwap:
    """
    Swap plan for releases that ship each game version as a folder of files.

    The user picks a folder from the profile's versions directory; the profile's
    cleanup files are removed from the game folder and the chosen folder is
    copied over it.
    """

    def __init__(self, context: ProgramContext):
        self.context = context
        self.console = context.console

    def list_versions(self) -> List[str]:
        versions_dir = self.context.profile.versions_dir
        if not os.path.isdir(versions_dir):
            return []
        with os.scandir(versions_dir) as entries:
            return sorted(entry.name for entry in entries if entry.is_dir())

    def __call__(self, swapper: VersionSwapper) -> None:
        versions = self.list_versions()
        if not versions:
            error = FileNotFoundError(f"No version folders in {self.context.profile.versions_dir}")
            swapper.program_manager.give_error_message_and_exit(
                "I couldn't find any game versions to swap to.", error, FILE_OPERATION_EXIT_CODE
            )
            return

        self.console.print_line("Which version would you like to swap to?")
        choice = versions[self.console.prompt_choice(versions)]
        logger.info(f"User chose version {choice}.")

        game_dir = self.context.game_dir
        leftovers = [
            os.path.join(game_dir, name)
            for name in self.context.profile.cleanup_files
            if os.path.isfile(os.path.join(game_dir, name))
        ]
        if leftovers and not swapper.try_deleting_files(leftovers):
            self.console.print_with_color(
                "Some files from the previous version could not be removed.", "yellow"
            )

        swapper.try_copying_directory(os.path.join(self.context.profile.versions_dir, choice), game_dir)
        self.console.print_with_color(f"Game files swapped to version: {choice}", "green")
