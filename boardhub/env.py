"""Loading of environment variables from a dotenv file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

_log = logging.getLogger(__name__)


def load_env_variables(path: str | os.PathLike | None = None) -> bool:
    """Load variables from a dotenv file without overriding existing ones.

    Returns True if the file was found and read.
    """
    env_path = Path(path) if path is not None else Path(".env")
    if not env_path.is_file():
        _log.info("no .env file found")
        return False
    load_dotenv(env_path, override=False)
    return True