from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from packaging.version import Version

from trvs.core.profile import GameProfile
from trvs.utils.console_io import ConsoleIO
from trvs.utils.settings import APP_VERSION


@dataclass
class ProgramContext:
    """Everything the program's components share for one run."""

    profile: GameProfile
    game_dir: str
    console: ConsoleIO = field(default_factory=ConsoleIO)
    version: Version = field(default_factory=lambda: Version(APP_VERSION))
    settings: Dict[str, Any] = field(default_factory=dict)
    log_path: Optional[str] = None

    @property
    def abbreviation(self) -> str:
        return self.profile.abbreviation

    @property
    def game_exe(self) -> str:
        return self.profile.game_exe
