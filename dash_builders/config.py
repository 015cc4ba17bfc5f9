"""Environment-driven settings.

``app.py`` calls ``load_dotenv()`` first, so values may also come from a
``.env`` file next to the app.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ._constants import DEBOUNCE_SECONDS, DEFAULT_PORT, DEFAULT_TIMEOUT

DEFAULT_STORE_PATH = "~/.dash-builders/storage.json"


def _env_number(name, default, cast=float):
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        print(f"[dash-builders] Ignoring invalid {name}={raw!r}")
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    webhook_url: str = ""
    store_path: str = DEFAULT_STORE_PATH
    timeout: float = DEFAULT_TIMEOUT
    debounce: float = DEBOUNCE_SECONDS
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            webhook_url=os.getenv("DISCORD_WEBHOOK_URL", ""),
            store_path=os.getenv("DASH_BUILDERS_STORE", "") or DEFAULT_STORE_PATH,
            timeout=_env_number("DASH_BUILDERS_TIMEOUT", DEFAULT_TIMEOUT),
            debounce=_env_number("DASH_BUILDERS_DEBOUNCE", DEBOUNCE_SECONDS),
            port=_env_number("DASH_BUILDERS_PORT", DEFAULT_PORT, cast=int),
        )
