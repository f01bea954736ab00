from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from tandem_bot.editing.store import SESSION_TTL_SECONDS


@dataclass(slots=True)
class BotConfig:
    """Configuration container for the Tandem language-exchange bot."""

    token: str
    admin_ids: List[int] = field(default_factory=list)
    database_path: Path = field(default=Path("data/tandem.sqlite"))
    redis_url: Optional[str] = None
    session_ttl: int = SESSION_TTL_SECONDS
    default_language: str = "en"
    locales_dir: Optional[Path] = None

    @classmethod
    def load(cls, env_path: str | os.PathLike[str] | None = ".env") -> "BotConfig":
        """Load configuration from environment variables."""
        if env_path is not None:
            load_dotenv(env_path)

        raw_admins = os.getenv("BOT_ADMIN_IDS", "")
        admin_ids = [
            int(value)
            for chunk in raw_admins.split(",")
            if (value := chunk.strip()).isdigit()
        ]

        token = os.getenv("BOT_TOKEN")
        if not token:
            raise RuntimeError(
                "BOT_TOKEN is not defined. Please add it to your .env file before running the bot."
            )

        raw_ttl = os.getenv("EDIT_SESSION_TTL", "").strip()
        try:
            session_ttl = int(raw_ttl) if raw_ttl else SESSION_TTL_SECONDS
        except ValueError as exc:
            raise RuntimeError(f"EDIT_SESSION_TTL must be a number of seconds, got {raw_ttl!r}") from exc
        if session_ttl <= 0:
            raise RuntimeError("EDIT_SESSION_TTL must be positive")

        locales_dir = os.getenv("LOCALES_DIR")
        return cls(
            token=token,
            admin_ids=admin_ids,
            database_path=Path(os.getenv("BOT_DATABASE", "data/tandem.sqlite")).expanduser(),
            redis_url=os.getenv("REDIS_URL") or None,
            session_ttl=session_ttl,
            default_language=os.getenv("DEFAULT_LANGUAGE", "en").strip() or "en",
            locales_dir=Path(locales_dir).expanduser() if locales_dir else None,
        )


__all__ = ["BotConfig"]
