from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

KEY_ENV = 'SMARTFILE_API_KEY'
PASSWORD_ENV = 'SMARTFILE_API_PASSWORD'
URL_ENV = 'SMARTFILE_API_URL'
VERSION_ENV = 'SMARTFILE_API_VERSION'
THROTTLE_WAIT_ENV = 'SMARTFILE_THROTTLE_WAIT'


def load_env_file(env_path: Path) -> None:
    """Load KEY=VALUE lines into os.environ (lightweight, no python-dotenv dependency).

    Existing non-empty variables are preserved.
    """
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip(); v = v.strip().strip('"').strip("'")
        if not k:
            continue
        existing = os.environ.get(k)
        if existing is None or existing.strip() == '':
            os.environ[k] = v


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    if val is None or val.strip() == '':
        return default
    return val.strip()


def env_flag(name: str, default: bool) -> bool:
    val = env(name)
    if val is None:
        return default
    return val.lower() not in {'0', 'false', 'no'}
