from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import httpx

from cairos.cli.config import ClientConfig, ConfigError, save_config


logger = logging.getLogger(__name__)


def run_setup(*, config_path: Path, base_url: str, out: TextIO) -> int:
    """Write a fresh config pointing at ``base_url``; any stored token is dropped."""
    try:
        url = httpx.URL(base_url.strip())
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid base URL: {base_url}") from exc
    if url.scheme not in {"http", "https"} or not url.host:
        raise ConfigError(f"Base URL must be an http(s) URL: {base_url}")

    save_config(config_path, ClientConfig(base_url=str(url).rstrip("/")))
    logger.info("setup: config_written path=%s", config_path)
    print(f"Configuration saved to {config_path}", file=out)
    return 0
