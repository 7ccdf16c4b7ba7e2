import logging
from typing import Optional

import requests
from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 10


def parse_tag(tag_name: str) -> Version:
    """Parses a release tag like 'v1.2.3' or '1.2.3'."""
    if tag_name[:1] in ("v", "V"):
        tag_name = tag_name[1:]
    return Version(tag_name)


def get_latest_version(
    owner: str,
    repo: str,
    agent_name: str,
    agent_version: str,
    timeout: float = REQUEST_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Optional[Version]:
    """
    Gets the latest release version, based on its tag name, from GitHub.

    Returns:
        The latest release's version, or None if the repo has no releases (or doesn't exist)

    Raises:
        requests.RequestException: The request failed
        packaging.version.InvalidVersion: The tag is not a version
    """
    http = session or requests
    url = f"{GITHUB_API_URL}/repos/{owner}/{repo}/releases/latest"
    headers = {
        "User-Agent": f"{agent_name}/{agent_version}",
        "Accept": "application/vnd.github+json",
    }

    logger.debug(f"Requesting latest release from {url}")
    response = http.get(url, headers=headers, timeout=timeout)
    if response.status_code == 404:
        logger.debug(f"No latest release found for {owner}/{repo}")
        return None
    response.raise_for_status()

    tag_name = response.json().get("tag_name")
    if not tag_name:
        raise InvalidVersion("Latest release has no tag name")
    return parse_tag(tag_name)


def compare_versions(version: Version, other: Optional[Version], significant_parts: int) -> int:
    """
    Compares two versions using only the first `significant_parts` release numbers.

    Missing parts count as 0, so 1.2 and 1.2.0.7 are equal at 3 parts.

    Returns:
        -1 if `version` is less, 0 if equal, 1 if `version` is greater (or `other` is None)
    """
    if other is None:
        return 1

    for part in range(significant_parts):
        mine = version.release[part] if part < len(version.release) else 0
        theirs = other.release[part] if part < len(other.release) else 0
        if mine != theirs:
            return 1 if mine > theirs else -1
    return 0
