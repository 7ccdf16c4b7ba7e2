import logging
import os
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_FILE = "profile.yaml"
DEFAULT_REPO_OWNER = "TombRunners"


class ProfileError(Exception):
    """Raised when a game profile file is missing or malformed."""


@dataclass(frozen=True)
class GameProfile:
    """
    Static data describing one game and its version swapper release.

    `packaged_files` maps file names (relative to the game folder) to lowercase MD5
    hashes of files shipped with the release; its order is the audit order.
    `game_files` are the bare minimum files for recognizing a game installation.
    """

    abbreviation: str
    game_exe: str
    packaged_files: Dict[str, str] = field(default_factory=OrderedDict)
    game_files: Tuple[str, ...] = ()
    versions_dir: str = "versions"
    cleanup_files: Tuple[str, ...] = ()
    ascii_art: Tuple[str, ...] = ()
    repo_owner: str = DEFAULT_REPO_OWNER
    repo_name: str = ""

    @property
    def github_repo(self) -> str:
        return self.repo_name or f"{self.abbreviation.lower()}-version-swapper"

    @property
    def repo_link(self) -> str:
        return f"https://github.com/{self.repo_owner}/{self.github_repo}"

    @property
    def latest_release_link(self) -> str:
        return f"{self.repo_link}/releases/latest"


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ProfileError(f"Profile is missing required text field '{key}'")
    return value.strip()


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ProfileError(f"Profile field '{key}' must be a list of text entries")
    return value


def profile_from_dict(data: Dict[str, Any], base_dir: str = ".") -> GameProfile:
    """
    Builds a GameProfile from parsed profile data.

    Relative `versions_dir` values are resolved against `base_dir`.
    """
    if not isinstance(data, dict):
        raise ProfileError("Invalid profile format, expected a mapping")

    packaged = data.get("packaged_files") or {}
    if not isinstance(packaged, dict):
        raise ProfileError("Profile field 'packaged_files' must map file names to MD5 hashes")

    packaged_files = OrderedDict()
    for file_name, md5_hash in packaged.items():
        md5_hash = str(md5_hash).strip().lower()
        if len(md5_hash) != 32 or any(c not in "0123456789abcdef" for c in md5_hash):
            raise ProfileError(f"Invalid MD5 hash for packaged file '{file_name}': {md5_hash}")
        packaged_files[str(file_name)] = md5_hash

    versions_dir = data.get("versions_dir") or "versions"
    if not os.path.isabs(versions_dir):
        versions_dir = os.path.normpath(os.path.join(base_dir, versions_dir))

    return GameProfile(
        abbreviation=_require_str(data, "abbreviation"),
        game_exe=_require_str(data, "game_exe"),
        packaged_files=packaged_files,
        game_files=tuple(_str_list(data, "game_files")),
        versions_dir=versions_dir,
        cleanup_files=tuple(_str_list(data, "cleanup_files")),
        ascii_art=tuple(_str_list(data, "ascii_art")),
        repo_owner=data.get("repo_owner") or DEFAULT_REPO_OWNER,
        repo_name=data.get("repo_name") or "",
    )


def load_profile(path: str = DEFAULT_PROFILE_FILE) -> GameProfile:
    """Loads a game profile YAML file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ProfileError(f"Game profile not found: {path}") from e
    except yaml.YAMLError as e:
        raise ProfileError(f"YAML parsing error in {path}: {e}") from e

    profile = profile_from_dict(data, base_dir=os.path.dirname(os.path.abspath(path)))
    logger.debug(
        f"Loaded {profile.abbreviation} profile from {path}: "
        f"{len(profile.packaged_files)} packaged files, {len(profile.game_files)} game files"
    )
    return profile
