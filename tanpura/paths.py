"""Path helpers for runtime defaults."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "tanpura"
ASSETS_ENV = "TANPURA_ASSETS"


def default_assets_dir() -> Path:
    """Return the directory holding the bundled pitch samples.

    ``$TANPURA_ASSETS`` wins; otherwise ``./Audio`` under the working directory.
    """
    override = os.environ.get(ASSETS_ENV)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / "Audio"
