from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_API_URL = "https://www.ibaraki-ct.ac.jp/info/wp-json/wp/v2/posts"
DEFAULT_POST_ID = "65544"
DEFAULT_FETCH_TIMEOUT = 8.0
DEFAULT_PORT = 3000


@dataclass
class Settings:
    base_api_url: str = DEFAULT_BASE_API_URL
    default_post_id: str = DEFAULT_POST_ID
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT


def get_fetch_timeout() -> float:
    raw = os.getenv("KYUKO_FETCH_TIMEOUT")
    if not raw:
        return DEFAULT_FETCH_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logging.warning("Invalid KYUKO_FETCH_TIMEOUT %s, falling back to %s", raw, DEFAULT_FETCH_TIMEOUT)
        return DEFAULT_FETCH_TIMEOUT
    if value <= 0:
        logging.warning("KYUKO_FETCH_TIMEOUT must be positive, got %s", raw)
        return DEFAULT_FETCH_TIMEOUT
    return value


def get_port() -> int:
    raw = os.getenv("KYUKO_PORT")
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        logging.warning("Invalid KYUKO_PORT %s, falling back to %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT


def get_settings() -> Settings:
    settings = Settings(
        base_api_url=os.getenv("KYUKO_BASE_API_URL", DEFAULT_BASE_API_URL).rstrip("/"),
        default_post_id=os.getenv("KYUKO_DEFAULT_POST_ID", DEFAULT_POST_ID),
        fetch_timeout=get_fetch_timeout(),
        host=os.getenv("KYUKO_HOST", "127.0.0.1"),
        port=get_port(),
    )
    if not settings.default_post_id.isdigit():
        logging.warning("KYUKO_DEFAULT_POST_ID %r is not numeric", settings.default_post_id)
    return settings
