"""Client configuration stored as TOML in the user's config directory.

The file holds the backend base URL and, once logged in, the bearer token.
Writes go through a temporary file in the same directory followed by
``os.replace`` so a crash never leaves a half-written config behind.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

import tomli_w


logger = logging.getLogger(__name__)

APP_DIR_NAME = "cairos"
CONFIG_FILE_NAME = "config.toml"
DEFAULT_BASE_URL = "https://localhost"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    token: str | None = None

    def to_toml(self) -> dict[str, str]:
        # TOML has no null, an absent token is simply omitted.
        data = {"base_url": self.base_url}
        if self.token:
            data["token"] = self.token
        return data

    @classmethod
    def from_toml(cls, data: Mapping[str, object]) -> ClientConfig:
        base_url = data.get("base_url", DEFAULT_BASE_URL)
        token = data.get("token")
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigError("base_url must be a non-empty string.")
        if token is not None and not isinstance(token, str):
            raise ConfigError("token must be a string.")
        return cls(base_url=base_url.strip(), token=token or None)


def resolve_config_dir(
    *,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
    home: Path | None = None,
) -> Path:
    environ = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform
    home = Path.home() if home is None else home

    if platform == "darwin":
        return home / "Library" / "Application Support" / APP_DIR_NAME
    if platform.startswith("win"):
        appdata = environ.get("APPDATA")
        if not appdata:
            raise ConfigError("APPDATA is not set.")
        return Path(appdata) / APP_DIR_NAME
    xdg = environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else home / ".config"
    return base / APP_DIR_NAME


def resolve_config_path(
    override: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
    home: Path | None = None,
) -> Path:
    if override:
        return Path(override).expanduser()
    return resolve_config_dir(environ=environ, platform=platform, home=home) / CONFIG_FILE_NAME


def load_config(path: Path) -> ClientConfig:
    """Read the config, creating it with defaults on first use."""
    if not path.exists():
        config = ClientConfig()
        save_config(path, config)
        logger.info("config: created path=%s", path)
        return config
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc
    return ClientConfig.from_toml(data)


def save_config(path: Path, config: ClientConfig) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            tomli_w.dump(config.to_toml(), fh)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def store_token(path: Path, token: str | None) -> ClientConfig:
    config = replace(load_config(path), token=token)
    save_config(path, config)
    return config


def clear_token(path: Path) -> ClientConfig:
    return store_token(path, None)
