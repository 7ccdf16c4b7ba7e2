import io
import logging

import pytest

from trvs.core.context import ProgramContext
from trvs.core.profile import GameProfile
from trvs.utils.console_io import ConsoleIO


class RecordingConsole(ConsoleIO):
    """ConsoleIO fed from a script of input lines that records every interaction."""

    def __init__(self, *lines):
        super().__init__(
            stdin=io.StringIO("".join(f"{line}\n" for line in lines)),
            stdout=io.StringIO(),
            use_color=False,
        )
        self.yes_no_prompts = 0
        self.key_reads = 0

    def prompt_yes_no(self, *args, **kwargs):
        self.yes_no_prompts += 1
        return super().prompt_yes_no(*args, **kwargs)

    def read_key(self):
        self.key_reads += 1
        return super().read_key()

    @property
    def output(self):
        return self.stdout.getvalue()


@pytest.fixture
def make_console():
    return RecordingConsole


@pytest.fixture
def game_dir(tmp_path):
    path = tmp_path / "game"
    path.mkdir()
    return path


@pytest.fixture
def make_context(game_dir, tmp_path):
    def _make(console=None, **profile_fields):
        fields = {
            "abbreviation": "TR1",
            "game_exe": "tomb.exe",
            "versions_dir": str(tmp_path / "versions"),
        }
        fields.update(profile_fields)
        return ProgramContext(
            profile=GameProfile(**fields),
            game_dir=str(game_dir),
            console=console or RecordingConsole(),
        )

    return _make


@pytest.fixture(autouse=True)
def restore_root_logging():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
