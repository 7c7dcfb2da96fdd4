import asyncio

import chess
import pytest

from puzzlebot.config import Settings
from puzzlebot.errors import MessengerError, PuzzleFetchError
from puzzlebot.machine import PuzzleBot
from puzzlebot.puzzle_source import PuzzleRecord
from puzzlebot.session import SessionStore

SERVER_URL = "http://bot.test"


def make_record(line=("Nf6", "e5", "Ne4"), blunder="e4", elo=1500, fen=chess.STARTING_FEN) -> PuzzleRecord:
    return PuzzleRecord(fen_before=fen, blunder_move=blunder, forced_line=list(line), elo=elo)


class FakePuzzleSource:
    """Hands out queued records (or raises queued errors) in order."""

    def __init__(self, *items) -> None:
        self.items = list(items) or [make_record()]
        self.calls = 0
        self.delay = 0.0

    async def fetch(self) -> PuzzleRecord:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        item = self.items.pop(0) if len(self.items) > 1 else self.items[0]
        if isinstance(item, Exception):
            raise item
        return item


class RecordingMessenger:
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    async def post(self, channel: str, text: str) -> None:
        if self.fail:
            raise MessengerError("webhook down")
        self.sent.append((channel, text))


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def source() -> FakePuzzleSource:
    return FakePuzzleSource()


@pytest.fixture
def bot(store, source) -> PuzzleBot:
    return PuzzleBot(store, source, SERVER_URL)


@pytest.fixture
def settings() -> Settings:
    return Settings(server_url=SERVER_URL)


@pytest.fixture
def failing_source() -> FakePuzzleSource:
    return FakePuzzleSource(PuzzleFetchError("boom"))
