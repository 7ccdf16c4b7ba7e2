import logging
import sys
from typing import List, Optional

from trvs.core.folder_swap import FolderSwap
from trvs.core.installation_manager import InstallationManager
from trvs.core.program_manager import ProgramManager
from trvs.core.version_swapper import VersionSwapper
from trvs.utils.console_io import ConsoleIO

logger = logging.getLogger(__name__)


def run_program(argv: Optional[List[str]] = None, console: Optional[ConsoleIO] = None) -> int:
    """
    Runs the version swapper: setup, version check, installation validation, swap.

    Returns:
        OS exit code
    """
    console = console or ConsoleIO()
    program_manager = ProgramManager(console)
    try:
        context, args = program_manager.manage_program(argv)

        installation_manager = InstallationManager(context, program_manager)
        if args.no_version_check:
            logger.debug("Version check skipped by argument.")
        else:
            installation_manager.version_check()
        installation_manager.validate_installation()

        version_swapper = VersionSwapper(context, program_manager)
        version_swapper.swap_versions(FolderSwap(context))

        console.print_header("Version swap complete!", "Press any key to exit...", "white")
        try:
            console.read_key()
        except EOFError:
            pass
        return 0
    except KeyboardInterrupt:
        logger.debug("User gave SIGINT. Ending program.")
        console.print_line()
        console.print_with_color(
            "Received SIGINT. It's up to you to know the current state of your game!", "yellow"
        )
        return 130
    except Exception as e:
        # A global catch-all for anything the designated error paths didn't handle.
        program_manager.give_error_message_and_exit(
            "An unexpected error occurred, and the program must close.", e, 1
        )
        return 1


def main():
    sys.exit(run_program())


if __name__ == "__main__":
    main()
