"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_URGENT_KEYWORDS = ("urgent", "emergency", "critical", "asap", "important", "crisis", "immediate")
DEFAULT_MEDIA_KEYWORDS = ("media", "interview", "press", "journalist", "reporter", "news", "publication")
DEFAULT_AUDIT_KEYWORDS = ("audit", "inspection", "review", "compliance", "examination", "assessment")


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _split_list(raw: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if not raw:
        return default
    items = tuple(item.strip().lower() for item in raw.split(",") if item.strip())
    return items or default


def _parse_ids(raw: str | None) -> tuple[int, ...]:
    if not raw:
        return ()
    ids: list[int] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            ids.append(int(item))
        except ValueError:
            logger.warning("Ignoring non-numeric admin id %r", item)
    return tuple(ids)


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    telegram_bot_token: str = ""
    action_group_chat_id: str = ""
    admin_user_ids: tuple[int, ...] = ()
    webhook_url: str = ""
    webhook_secret: str = ""
    port: int = 3000

    database_url: str = "sqlite+aiosqlite:///./data/analytics.db"
    faq_path: str = "data/faq.json"

    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    etherscan_base_url: str = "https://api.etherscan.io"
    moralis_base_url: str = "https://deep-index.moralis.io/api/v2.2"
    etherscan_api_key: str = ""
    moralis_api_key: str = ""
    cache_ttl: float = 300.0
    cache_max_entries: int = 1000
    request_timeout: float = 10.0

    urgent_keywords: tuple[str, ...] = DEFAULT_URGENT_KEYWORDS
    media_keywords: tuple[str, ...] = DEFAULT_MEDIA_KEYWORDS
    audit_keywords: tuple[str, ...] = DEFAULT_AUDIT_KEYWORDS

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_user_ids

    @property
    def forwarding_enabled(self) -> bool:
        return bool(self.action_group_chat_id)


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        action_group_chat_id=os.getenv("ACTION_GROUP_CHAT_ID", ""),
        admin_user_ids=_parse_ids(os.getenv("ADMIN_USER_IDS")),
        webhook_url=os.getenv("WEBHOOK_URL", ""),
        webhook_secret=os.getenv("WEBHOOK_SECRET", ""),
        port=int(os.getenv("PORT", "3000")),
        database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/analytics.db"),
        faq_path=os.getenv("FAQ_PATH", "data/faq.json"),
        coingecko_base_url=os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3"),
        etherscan_base_url=os.getenv("ETHERSCAN_BASE_URL", "https://api.etherscan.io"),
        moralis_base_url=os.getenv("MORALIS_BASE_URL", "https://deep-index.moralis.io/api/v2.2"),
        etherscan_api_key=os.getenv("ETHERSCAN_API_KEY", ""),
        moralis_api_key=os.getenv("MORALIS_API_KEY", ""),
        cache_ttl=float(os.getenv("CACHE_TTL", "300")),
        cache_max_entries=int(os.getenv("CACHE_MAX_ENTRIES", "1000")),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "10")),
        urgent_keywords=_split_list(os.getenv("URGENT_KEYWORDS"), DEFAULT_URGENT_KEYWORDS),
        media_keywords=_split_list(os.getenv("MEDIA_KEYWORDS"), DEFAULT_MEDIA_KEYWORDS),
        audit_keywords=_split_list(os.getenv("AUDIT_KEYWORDS"), DEFAULT_AUDIT_KEYWORDS),
    )


def warn_missing(settings: Settings) -> None:
    """Log a warning for every optional integration that is not configured."""

    if not settings.action_group_chat_id:
        logger.warning("ACTION_GROUP_CHAT_ID not set - forwarded requests will only be logged.")
    if not settings.moralis_api_key:
        logger.warning("MORALIS_API_KEY not set - wallet queries are disabled.")
    if not settings.etherscan_api_key:
        logger.warning("ETHERSCAN_API_KEY not set - gas prices fall back to estimates.")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
