import logging
from typing import Callable, Iterable, Optional

from trvs.core.context import ProgramContext
from trvs.core.process_guard import GameProcessGuard
from trvs.utils import file_io

logger = logging.getLogger(__name__)

FILE_OPERATION_EXIT_CODE = 3


class VersionSwapper:
    """
    Guarded file operations for version swaps.

    Every operation first makes sure the game isn't running from the game folder,
    since files in use can't be overwritten. Copy failures always end the program;
    delete failures end it only when marked critical.
    """

    def __init__(self, context: ProgramContext, program_manager, guard: Optional[GameProcessGuard] = None):
        self.context = context
        self.program_manager = program_manager
        self.guard = guard or GameProcessGuard(context)

    def swap_versions(self, swap_plan: Callable[["VersionSwapper"], None]) -> None:
        """Runs `swap_plan`, which performs the swap through this swapper's operations."""
        logger.info(f"Starting version swap for {self.context.abbreviation} in {self.context.game_dir}")
        swap_plan(self)
        logger.info("Version swap finished.")

    def try_copying_directory(self, src_dir: str, dest_dir: str) -> None:
        """Copies `src_dir` over `dest_dir`, closing the program if an error occurs."""
        self.guard.ensure_no_game_running(self.context.game_dir)
        try:
            logger.debug(f'Attempting a copy from "{src_dir}" to "{dest_dir}"')
            file_io.copy_directory(src_dir, dest_dir, True)
        except Exception as e:
            self.program_manager.give_error_message_and_exit("Failed to copy files!", e, FILE_OPERATION_EXIT_CODE)

    def try_deleting_files(self, files: Iterable[str], critical: bool = False) -> bool:
        """
        Deletes `files`; if an error occurs, responds according to `critical`.

        Returns:
            True if every file was deleted
        """
        files = list(files)
        self.guard.ensure_no_game_running(self.context.game_dir)
        try:
            logger.debug(f"Attempting to delete the following files: {', '.join(files)}")
            file_io.delete_files(files)
        except Exception as e:
            if critical:
                self.program_manager.give_error_message_and_exit(
                    "Failed to delete files!", e, FILE_OPERATION_EXIT_CODE
                )
            else:
                logger.error(f"Failed to delete files! {e}", exc_info=True)
            return False
        return True

    def try_deleting_directories(self, dirs: Iterable[str], recursive: bool = False, critical: bool = False) -> bool:
        """
        Deletes `dirs`; if an error occurs, responds according to `critical`.

        Args:
            dirs: Directories to delete
            recursive: Whether to delete their files and subdirectories too
            critical: Whether the program should halt upon an error

        Returns:
            True if every directory was deleted
        """
        dirs = list(dirs)
        self.guard.ensure_no_game_running(self.context.game_dir)
        try:
            logger.debug(f"Attempting to delete the following directories: {', '.join(dirs)}")
            file_io.delete_directories(dirs, recursive)
        except Exception as e:
            if critical:
                self.program_manager.give_error_message_and_exit(
                    "Failed to delete directories!", e, FILE_OPERATION_EXIT_CODE
                )
            else:
                logger.error(f"Failed to delete directories! {e}", exc_info=True)
            return False
        return True
