from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from tandem_bot import messages

LOGGER = logging.getLogger(__name__)


class Localizer:
    """Translation lookup with an explicit miss result."""

    def __init__(
        self,
        tables: Optional[Mapping[str, Mapping[str, str]]] = None,
        *,
        default_language: str = "en",
        locales_dir: Optional[Path] = None,
    ) -> None:
        source = messages.TRANSLATIONS if tables is None else tables
        self._tables: dict[str, dict[str, str]] = {lang: dict(table) for lang, table in source.items()}
        self.default_language = default_language
        self._reported_missing: set[str] = set()
        if locales_dir is not None:
            self.load_overrides(locales_dir)

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(self._tables)

    def load_overrides(self, locales_dir: Path) -> None:
        for path in sorted(locales_dir.glob("*.json")):
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                LOGGER.warning("Skipping translation file %s: %s", path, exc)
                continue
            if not isinstance(payload, dict):
                LOGGER.warning("Skipping translation file %s: expected an object", path)
                continue
            table = self._tables.setdefault(path.stem, {})
            table.update({str(key): str(value) for key, value in payload.items()})
            LOGGER.info("Loaded %d translation(s) for %s from %s", len(payload), path.stem, path)

    def resolve_language(self, lang: Optional[str]) -> str:
        if lang and lang in self._tables:
            return lang
        return self.default_language

    def lookup(self, lang: Optional[str], key: str) -> Optional[str]:
        table = self._tables.get(lang or "", {})
        if key in table:
            return table[key]
        return self._tables.get(self.default_language, {}).get(key)

    def get(self, lang: Optional[str], key: str, default: Optional[str] = None, **fmt: Any) -> str:
        text = self.lookup(lang, key)
        if text is None:
            if key not in self._reported_missing:
                self._reported_missing.add(key)
                LOGGER.warning("Missing translation for %r (language %s)", key, lang)
            return default if default is not None else key
        if fmt:
            try:
                return text.format(**fmt)
            except (KeyError, IndexError, ValueError):
                LOGGER.warning("Translation %r could not be formatted with %s", key, sorted(fmt))
        return text


__all__ = ["Localizer"]
