import asyncio
import weakref
from dataclasses import dataclass, field
from typing import Dict

from puzzlebot.board import PuzzleBoard


@dataclass
class Session:
    """One channel's puzzle. A fresh instance is Idle."""
    active: bool = False
    board: PuzzleBoard | None = None
    solution_line: list[str] = field(default_factory=list)
    rating: int | None = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only copy of what the formatter needs from a session."""
    fen: str
    turn: str
    legal_moves: tuple[str, ...]
    rating: int

    @classmethod
    def of(cls, session: Session) -> "SessionSnapshot":
        if not session.active or session.board is None or session.rating is None:
            raise ValueError("cannot snapshot an inactive session")
        return cls(
            fen=session.board.fen(),
            turn=session.board.turn(),
            legal_moves=tuple(session.board.legal_moves()),
            rating=session.rating,
        )


# ---- Per-channel storage ----
class SessionStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        # Locks live only while a command holds or awaits them
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, channel: str) -> Session | None:
        return self._sessions.get(channel)

    def set(self, channel: str, session: Session) -> None:
        self._sessions[channel] = session

    def reset(self, channel: str) -> Session:
        """Replace the channel's session with a fresh Idle one."""
        session = Session()
        self._sessions[channel] = session
        return session

    def session(self, channel: str) -> Session:
        """Return the channel's session, creating an Idle one on first use."""
        session = self._sessions.get(channel)
        if session is None:
            session = self.reset(channel)
        return session

    def lock(self, channel: str) -> asyncio.Lock:
        lock = self._locks.get(channel)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[channel] = lock
        return lock

    def channels(self) -> list[str]:
        return list(self._sessions)
