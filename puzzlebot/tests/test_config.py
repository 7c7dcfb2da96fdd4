import os

from puzzlebot.config import Settings, load_settings

KEYS = (
    "SERVER_URL",
    "PORT",
    "SLACK_WEBHOOK_URL",
    "PUZZLE_API_URL",
    "PUZZLE_API_TIMEOUT_S",
    "BOARD_IMAGE_SIZE",
    "LOG_LEVEL",
)


def test_defaults_without_environment(monkeypatch, tmp_path):
    for key in KEYS:
        monkeypatch.delenv(key, raising=False)
    empty = tmp_path / ".env"
    empty.write_text("")

    settings = load_settings(str(empty))

    assert settings == Settings()


def test_env_file_is_loaded(monkeypatch, tmp_path):
    for key in KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("PORT", "9000")
    env_file = tmp_path / ".env"
    env_file.write_text(
        "SERVER_URL=https://chess.example.com/\n"
        "SLACK_WEBHOOK_URL=https://hooks.example.com/T/B/X\n"
        "PORT=8080\n"
    )

    try:
        settings = load_settings(str(env_file))
    finally:
        os.environ.pop("SERVER_URL", None)
        os.environ.pop("SLACK_WEBHOOK_URL", None)

    assert settings.server_url == "https://chess.example.com"
    assert settings.slack_webhook_url == "https://hooks.example.com/T/B/X"
    # The real environment wins over the file
    assert settings.port == 9000
