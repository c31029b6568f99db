"""
Configuration for tuimark.

All tunable parameters in one place. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/tuimark/config.toml) if exists
3. Environment variables (TUIMARK_*) override file
4. CLI flags override everything
"""

from __future__ import annotations

import contextlib
import logging
import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class CodegenConfig:
    """Markup generation settings."""
    indent: int = 2  # spaces per nesting level


@dataclass
class ParserConfig:
    """Markup parsing settings."""
    max_depth: int = 256  # deeper nesting is rejected instead of exhausting the stack


@dataclass
class LoggingConfig:
    """Log level used by the CLI."""
    level: str = "WARNING"


@dataclass
class Config:
    """Root config with all settings."""
    codegen: CodegenConfig = field(default_factory=CodegenConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "tuimark" / "config.toml"
    return Path.home() / ".config" / "tuimark" / "config.toml"


def load_config() -> Config:
    """Load config from file if exists, else return defaults."""
    config = Config()
    path = get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = _apply_toml(config, data)
        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.warning("Ignoring config file %s: %s", path, e)

    # env var overrides
    config = _apply_env(config)

    return config


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config."""
    if "codegen" in data:
        c = data["codegen"]
        if "indent" in c:
            config.codegen.indent = int(c["indent"])

    if "parser" in data:
        p = data["parser"]
        if "max_depth" in p:
            config.parser.max_depth = int(p["max_depth"])

    if "logging" in data:
        lg = data["logging"]
        if "level" in lg:
            config.logging.level = str(lg["level"]).upper()

    return config


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str, type]] = {
        "TUIMARK_INDENT": ("codegen", "indent", int),
        "TUIMARK_MAX_DEPTH": ("parser", "max_depth", int),
        "TUIMARK_LOG_LEVEL": ("logging", "level", str),
    }

    for env_key, (section, attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            with contextlib.suppress(ValueError, AttributeError):
                converted = val.upper() if attr == "level" else conv(val)
                setattr(getattr(config, section), attr, converted)

    return config


# Module-level config instance, loaded once on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached config so the next get_config() reloads it."""
    global _config
    _config = None
