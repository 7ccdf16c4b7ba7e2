import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import psutil

from trvs.core.context import ProgramContext

logger = logging.getLogger(__name__)

# Killed processes were observed holding file handles for a moment after
# reporting death, making immediate file writes fail.
POST_KILL_DELAY_SECONDS = 0.1


@dataclass
class RunningGame:
    """A game process found running from the target folder."""

    pid: int
    name: str
    exe: str
    start_time: Optional[datetime]
    process: psutil.Process

    def describe(self) -> str:
        start = self.start_time.strftime("%H:%M:%S") if self.start_time else "unknown"
        return f"Name: {self.name} | ID: {self.pid} | Start time: {start}"

    def has_exited(self) -> bool:
        return not self.process.is_running()

    def kill(self) -> None:
        self.process.kill()


def normalize_dir(path: str) -> str:
    return os.path.normcase(os.path.realpath(path))


def exe_name_matches(exe_path: str, game_exe: str) -> bool:
    """
    Case-insensitive comparison of an executable's base name with the configured name.
    A configured name without an extension also matches on the file stem.
    """
    base_name = os.path.basename(exe_path).lower()
    wanted = game_exe.lower()
    if base_name == wanted:
        return True
    return not os.path.splitext(wanted)[1] and os.path.splitext(base_name)[0] == wanted


def is_game_process_in_dir(exe_path: Optional[str], game_exe: str, game_dir: str) -> bool:
    """True when `exe_path` is `game_exe` sitting directly inside `game_dir` (not a subfolder)."""
    if not exe_path:
        return False
    if not exe_name_matches(exe_path, game_exe):
        return False
    return normalize_dir(os.path.dirname(exe_path)) == normalize_dir(game_dir)


class GameProcessGuard:
    """
    Makes sure the game isn't running from the target folder before files are touched.

    If it is, the user chooses between an automatic kill and closing it themselves;
    either way the guard only returns once the process is gone. A failed process scan
    is reported as a warning and never stops the program.
    """

    def __init__(
        self,
        context: ProgramContext,
        process_iter: Callable = psutil.process_iter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.context = context
        self.console = context.console
        self._process_iter = process_iter
        self._sleep = sleep

    def find_running_game(self, game_dir: str) -> Optional[RunningGame]:
        """
        Finds the first game process running from `game_dir`.

        Returns:
            The running game or None if none was found
        """
        abbreviation = self.context.abbreviation
        logger.debug(f"Checking for a {abbreviation} process running in the target folder...")

        for proc in self._process_iter(["pid", "name", "exe", "create_time"]):
            info = proc.info
            if not is_game_process_in_dir(info.get("exe"), self.context.game_exe, game_dir):
                continue

            create_time = info.get("create_time")
            return RunningGame(
                pid=info.get("pid", proc.pid),
                name=info.get("name") or os.path.basename(info["exe"]),
                exe=info["exe"],
                start_time=datetime.fromtimestamp(create_time) if create_time else None,
                process=proc,
            )
        return None

    def ensure_no_game_running(self, game_dir: Optional[str] = None) -> None:
        """Ensures no game process from `game_dir` (default: the context's game folder) is running."""
        game_dir = game_dir or self.context.game_dir
        abbreviation = self.context.abbreviation
        try:
            game = self.find_running_game(game_dir)
        except Exception as e:
            logger.error(
                f"An unexpected error occurred while trying to find running {abbreviation} processes: {e}",
                exc_info=True,
            )
            self.console.print_with_color(
                f"I was unable to finish searching for running {abbreviation} processes.", "yellow"
            )
            self.console.print_line(
                f"Please note that a {abbreviation} game or background task running from the target folder"
            )
            self.console.print_line("could cause the program to crash due to errors.")
            self.console.print_line(
                f"Double-check and make sure no {abbreviation} game or background task is running."
            )
            return

        if game is None:
            logger.debug(f"No {abbreviation} process of concern found; looks safe to copy files.")
            return

        logger.info(f"Found {abbreviation} process of concern.")
        self._handle_running_game(game)
        logger.info(f"Handled {abbreviation} process of concern.")

    def _handle_running_game(self, game: RunningGame) -> None:
        """Asks the user how to end `game`, then acts accordingly."""
        abbreviation = self.context.abbreviation
        logger.debug(f"Found a {abbreviation} process running from target folder. {game.describe()}")
        self.console.print_with_color(f"{abbreviation} is running from the target folder.", "yellow")
        self.console.print_with_color(game.describe(), "yellow")
        self.console.print_line("Would you like me to end the task for you? If not, I will give a message")
        self.console.write("describing how to find and close it. ")

        if self.console.prompt_yes_no():
            logger.debug(f"User wants the program to kill the running {abbreviation} task.")
            try:
                game.kill()
                logger.info(f"Killed {game.name} (PID: {game.pid}).")
            except Exception as e:
                logger.error(
                    f"An unexpected error occurred while trying to kill the {abbreviation} process: {e}",
                    exc_info=True,
                )
                self.console.print_with_color(
                    f"I was unable to kill the {abbreviation} process. You will have to do it yourself.",
                    "yellow",
                )
                logger.debug("Going into the user prompt loop due to a failure in killing the process.")
                self._wait_for_user_to_close(game)
        else:
            logger.debug(f"User opted to kill the running {abbreviation} process on their own.")
            self._wait_for_user_to_close(game)

        self._sleep(POST_KILL_DELAY_SECONDS)

    def _wait_for_user_to_close(self, game: RunningGame) -> None:
        """Puts the user in a prompt loop until `game` has exited."""
        abbreviation = self.context.abbreviation
        still_running = not game.has_exited()
        if not still_running:
            logger.debug("Process ended before the user prompt loop started.")
            self.console.print_line("Process ended before I could prompt you. Skipping prompt loop.")
            self.console.print_line()

        while still_running:
            self.console.print_line(
                f"Be sure that all {abbreviation} game windows are closed. Then, if you are still"
            )
            self.console.print_line("getting this message, check Task Manager for any phantom processes.")
            self.console.print_line("Press a key to continue. Or press CTRL + C to exit this program.")
            logger.debug("Waiting for user to close the running task.")
            self.console.read_key()
            still_running = not game.has_exited()
            if still_running:
                logger.debug(f"User tried to continue but the {abbreviation} process is still running, looping.")
                self.console.print_line("Process still running, prompting again.")
            else:
                logger.debug(f"User continued the program after the {abbreviation} process had exited.")
                self.console.print_line()
