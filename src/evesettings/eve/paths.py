"""
Known locations of EVE Online settings on each platform.
"""

import os
import sys
from pathlib import Path
from typing import List

from evesettings.core.config import settings

STEAM_APP_ID = "8500"


def get_possible_settings_paths() -> List[Path]:
    """All base directories that may hold EVE settings on this platform."""
    if sys.platform.startswith("win"):
        paths = _windows_paths()
    elif sys.platform.startswith("linux"):
        paths = _linux_paths()
    else:
        paths = []

    paths.extend(Path(p).expanduser() for p in settings.extra_settings_paths)
    return paths


def _windows_paths() -> List[Path]:
    local_app_data = os.environ.get("LOCALAPPDATA")
    if not local_app_data:
        return []
    return [Path(local_app_data) / "CCP" / "EVE"]


def _linux_paths() -> List[Path]:
    home = Path.home()
    user = os.environ.get("USER") or home.name
    eve_suffix = Path("AppData", "Local", "CCP", "EVE")

    # Steam Proton prefixes
    proton = Path("steamapps", "compatdata", STEAM_APP_ID, "pfx", "drive_c", "users", "steamuser")
    paths = [
        home / ".steam" / "steam" / proton / eve_suffix,
        home / ".local" / "share" / "Steam" / proton / eve_suffix,
    ]

    # Lutris and plain Wine prefixes
    paths.append(home / "Games" / "eve-online" / "drive_c" / "users" / user / eve_suffix)
    paths.append(home / ".wine" / "drive_c" / "users" / user / eve_suffix)
    return paths
