"""Client configuration.

Loaded from ~/.asciichat/config.yml (or --config / ASCIICHAT_CONFIG).
A missing file means defaults; unknown keys are ignored.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import get_args

import yaml

from asciichat.tui.state import INITIAL_PAGE, PageName

CONFIG_ENV = "ASCIICHAT_CONFIG"
DEFAULT_DIR = Path.home() / ".asciichat"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    initial_page: PageName = INITIAL_PAGE
    log_file: Path = field(default_factory=lambda: DEFAULT_DIR / "asciichat.log")
    log_level: str = "INFO"
    show_log_in_chat: bool = True

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def default_config_path() -> Path:
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env).expanduser()
    return DEFAULT_DIR / "config.yml"


def config_from_dict(raw: dict) -> ClientConfig:
    known = {f.name for f in fields(ClientConfig)}
    values = {k: v for k, v in raw.items() if k in known}

    if "log_level" in values and not isinstance(values["log_level"], str):
        raise ConfigError("'log_level' must be a string")

    if "log_level" in values:
        level = values["log_level"].upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"unknown log level {values['log_level']!r}")
        values["log_level"] = level

    if "initial_page" in values and values["initial_page"] not in get_args(PageName):
        raise ConfigError(f"unknown page {values['initial_page']!r}")

    if "show_log_in_chat" in values and not isinstance(values["show_log_in_chat"], bool):
        raise ConfigError("'show_log_in_chat' must be true or false")

    if "log_file" in values:
        if not isinstance(values["log_file"], str):
            raise ConfigError("'log_file' must be a path")
        values["log_file"] = Path(values["log_file"]).expanduser()

    return ClientConfig(**values)


def load_config(path: Path | None = None) -> ClientConfig:
    cfg_path = path or default_config_path()
    if not cfg_path.exists():
        return ClientConfig()

    try:
        raw = yaml.safe_load(cfg_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {cfg_path}: {e}") from None

    if raw is None:
        return ClientConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid config file {cfg_path} (expected a mapping)")
    return config_from_dict(raw)


def configure_logging(cfg: ClientConfig) -> None:
    """File logging for the TUI; the terminal itself belongs to the renderer."""
    cfg.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=cfg.log_file,
        level=cfg.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
