# repograph/modules/config.py
"""
Configuration loading.

Two kinds of files:
  - repograph.conf (INI, configparser): tool settings such as logging, fetch
    timeouts and lint limits. Optional; defaults apply when none exists.
  - the repository list (TOML) given on the command line:

        [tarballs]
        repoA = "https://example.org/repoA.tar.gz"
        repoB = "/srv/mirror/repoB.tar"

    Repositories keep the order in which they appear in the file.
"""

import configparser
import os
import sys
from typing import Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from repograph.modules.errors import FatalConfigurationError

DEFAULT_LOCATIONS = [
    "/etc/repograph/repograph.conf",
    os.path.expanduser("~/.config/repograph/repograph.conf"),
]


def default_locations() -> List[str]:
    env = os.environ.get("REPOGRAPH_CONF")
    if env:
        return [env] + DEFAULT_LOCATIONS
    return list(DEFAULT_LOCATIONS)


class SettingsConfig:
    def __init__(self, locations=None):
        self.locations = locations if locations is not None else default_locations()
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        self.reload()

    def reload(self):
        """(Re)load settings from the first existing file, if any."""
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        for path in self.locations:
            if os.path.isfile(path):
                try:
                    self.config.read(path, encoding="utf-8")
                except configparser.Error as e:
                    raise FatalConfigurationError(f"Failed to parse settings file {path}: {e}") from e
                self.loaded_from = path
                return

    def get(self, section, option, fallback=None):
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getboolean(self, section, option, fallback=False):
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getint(self, section, option, fallback=0):
        try:
            return self.config.getint(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback


# Default instance shared by the other modules
config = SettingsConfig()


def load_repositories(path: str) -> Dict[str, str]:
    """
    Read the repository list from a TOML file.
    Returns an ordered dict {repository_id: archive location}.
    """
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except OSError as e:
        raise FatalConfigurationError(f"Failed to read {path!r}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise FatalConfigurationError(f"Failed to parse {path!r}: {e}") from e

    tarballs = data.get("tarballs")
    if not isinstance(tarballs, dict) or not tarballs:
        raise FatalConfigurationError(f"{path!r} does not define any repository in a [tarballs] table")

    repos: Dict[str, str] = {}
    for name, location in tarballs.items():
        if not isinstance(location, str) or not location.strip():
            raise FatalConfigurationError(
                f"Repository {name!r} in {path!r} must map to an archive URL or path")
        repos[name] = location.strip()
    return repos


def fetch_timeout(settings: Optional[SettingsConfig] = None) -> int:
    settings = settings or config
    return settings.getint("fetch", "timeout", fallback=60)


def lint_max_depth(settings: Optional[SettingsConfig] = None) -> Optional[int]:
    """Path length cap for the cycle search; None means unlimited."""
    settings = settings or config
    depth = settings.getint("lint", "max_depth", fallback=0)
    return depth if depth > 0 else None
