"""
Environment configuration for the puzzle bot.

Every knob comes from an environment variable (or a .env file) with a
default that works for local development (server on port 1337, no Slack webhook).
"""
from dataclasses import dataclass
import os
from typing import Any, Callable

from dotenv import load_dotenv


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    env = os.environ.get(name)
    if env is None or env == "":
        return default
    return cast(env) if cast else env


@dataclass(frozen=True)
class Settings:
    # Public base URL used in board image links
    server_url: str = "http://localhost:1337"
    port: int = 1337

    # Outbound chat transport; None disables posting
    slack_webhook_url: str | None = None

    # Puzzle supply
    puzzle_api_url: str = "https://chessblunders.org/api/blunder/get"
    puzzle_api_timeout_s: float = 10.0

    board_image_size: int = 720
    log_level: str = "INFO"


def load_settings(env_file: str | None = None) -> Settings:
    # Values already in the environment win over the .env file
    load_dotenv(env_file)
    return Settings(
        server_url=_get("SERVER_URL", Settings.server_url).rstrip("/"),
        port=int(_get("PORT", Settings.port, cast=int)),
        slack_webhook_url=_get("SLACK_WEBHOOK_URL", None),
        puzzle_api_url=_get("PUZZLE_API_URL", Settings.puzzle_api_url),
        puzzle_api_timeout_s=float(_get("PUZZLE_API_TIMEOUT_S", Settings.puzzle_api_timeout_s, cast=float)),
        board_image_size=int(_get("BOARD_IMAGE_SIZE", Settings.board_image_size, cast=int)),
        log_level=str(_get("LOG_LEVEL", Settings.log_level)).upper(),
    )
