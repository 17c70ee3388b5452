"""Connect-to-a-thing example: configuration defaults overridden from the environment.

    THING_URL=https://thing.example THING_USERNAME=admin python -m example.main
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field

from loguru import logger

from envirotron import env_field, override


@dataclass
class LogConfig:
    """Logging settings; ``level`` must be a loguru level name."""
    level: str = env_field("THING_LOG_LEVEL", default="INFO")


@dataclass
class Config:
    """Connection settings for the thing.

    Attributes:
        url: Endpoint to connect to
        username: Account name
        password: Account password
        log: Logging section, overridden through its own fields
    """
    url: str = env_field("THING_URL", default="")
    username: str = env_field("THING_USERNAME", default="")
    password: str = env_field("THING_PASSWORD", default="")
    log: LogConfig = field(default_factory=LogConfig)


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    logger.enable("envirotron")


def main() -> None:
    """Example entry point."""
    config = Config()
    override(config)
    _configure_logging(config.log.level)

    logger.debug(f"Loaded configuration for {config.url}")
    print(f"connecting to {config.url}, as {config.username}")


__all__ = ["Config", "LogConfig", "main"]

if __name__ == "__main__":
    main()
