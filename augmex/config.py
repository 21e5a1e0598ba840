"""CMS application configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# keys data/settings.json may change; everything else comes from the environment
NON_SENSITIVE_KEYS = {"SITE_URL", "DEFAULT_PAGE_SIZE"}


@dataclass
class CmsConfig:
    """Settings for one CMS process."""

    database_url: str
    secret_key: str
    jwt_secret: str
    site_url: str = ""
    log_level: str = "INFO"
    auth_cookie: str = "auth-token"
    default_page_size: int = 10
    max_page_size: int = 100
    data_dir: Optional[Path] = None

    @property
    def settings_file(self) -> Optional[Path]:
        return self.data_dir / "settings.json" if self.data_dir else None

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "CmsConfig":
        """Build the config from the environment, then apply settings.json."""

        project_root = Path(__file__).resolve().parent.parent
        load_dotenv(env_file or project_root / ".env")

        data_dir = Path(os.environ.get("AUGMEX_DATA_DIR", project_root / "data"))
        secret_key = os.environ.get("SECRET_KEY", "dev_secret")
        config = cls(
            database_url=os.environ.get("DATABASE_URL", "sqlite:///data/augmex.db"),
            secret_key=secret_key,
            jwt_secret=os.environ.get("JWT_SECRET") or secret_key,
            site_url=os.environ.get("SITE_URL", "").rstrip("/"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            auth_cookie=os.environ.get("AUTH_COOKIE", "auth-token"),
            default_page_size=_as_int(os.environ.get("DEFAULT_PAGE_SIZE"), 10, "DEFAULT_PAGE_SIZE"),
            max_page_size=_as_int(os.environ.get("MAX_PAGE_SIZE"), 100, "MAX_PAGE_SIZE"),
            data_dir=data_dir,
        )
        return config.with_overrides(_read_settings(config.settings_file))

    def with_overrides(self, overrides: Dict[str, Any]) -> "CmsConfig":
        updates = {k: v for k, v in (overrides or {}).items() if k in NON_SENSITIVE_KEYS}
        if not updates:
            return self
        config = self
        if "SITE_URL" in updates:
            config = replace(config, site_url=str(updates["SITE_URL"] or "").rstrip("/"))
        if "DEFAULT_PAGE_SIZE" in updates:
            size = _as_int(updates["DEFAULT_PAGE_SIZE"], config.default_page_size, "DEFAULT_PAGE_SIZE")
            config = replace(config, default_page_size=min(size, config.max_page_size))
        return config


def _as_int(value: Any, default: int, name: str) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if parsed < 1:
        raise ValueError(f"{name} must be at least 1")
    return parsed


def _read_settings(path: Optional[Path]) -> Dict[str, Any]:
    if path is None or not path.exists():
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data
