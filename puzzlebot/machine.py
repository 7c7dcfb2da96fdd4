"""
Per-channel puzzle state machine.

Each channel is either Idle (no puzzle) or InProgress (waiting for the
player's move). Inbound text is classified as `new`, `resign` or a move,
and every command produces exactly one Reply. Commands on one channel run
one at a time under that channel's lock; channels never share state.
"""
import logging
from dataclasses import dataclass
from enum import Enum

from puzzlebot import formatter
from puzzlebot.board import PuzzleBoard
from puzzlebot.errors import IllegalMoveError, PuzzleBotError
from puzzlebot.puzzle_source import PuzzleSource
from puzzlebot.session import Session, SessionSnapshot, SessionStore

log = logging.getLogger("puzzle_machine")


class Command(Enum):
    NEW = "new"
    RESIGN = "resign"
    MOVE = "move"


class Outcome(Enum):
    STARTED = "started"
    BUSY = "busy"
    NO_PUZZLE = "no_puzzle"
    RESIGNED = "resigned"
    ILLEGAL_MOVE = "illegal_move"
    WRONG_MOVE = "wrong_move"
    CONTINUE = "continue"
    SOLVED = "solved"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL_ERROR = "internal_error"
    ERROR = "error"


@dataclass(frozen=True)
class Reply:
    text: str
    outcome: Outcome


def classify(text: str) -> Command:
    """`new` and `resign` match case-insensitively; anything else is a move."""
    word = text.strip().lower()
    if word == "new":
        return Command.NEW
    if word == "resign":
        return Command.RESIGN
    return Command.MOVE


class PuzzleBot:
    def __init__(self, store: SessionStore, source: PuzzleSource, server_url: str) -> None:
        self.store = store
        self.source = source
        self.server_url = server_url

    async def handle(self, channel: str, text: str) -> Reply:
        command = classify(text)
        async with self.store.lock(channel):
            try:
                if command is Command.NEW:
                    return await self.new_puzzle(channel)
                if command is Command.RESIGN:
                    return self.resign(channel)
                return self.move(channel, text.strip())
            except Exception:
                # Sessions are only ever replaced whole, so the stored one is still consistent
                log.exception("channel %s: unhandled error for %r", channel, text)
                return Reply(formatter.GENERIC_FAILURE, Outcome.ERROR)

    # ---- Commands ----
    async def new_puzzle(self, channel: str) -> Reply:
        current = self.store.session(channel)
        if current.active:
            return Reply(
                formatter.describe_busy(SessionSnapshot.of(current), self.server_url),
                Outcome.BUSY,
            )

        try:
            record = await self.source.fetch()
            board = PuzzleBoard(record.fen_before)
            board.push(record.blunder_move)
        except PuzzleBotError as exc:
            log.warning("channel %s: could not start puzzle: %s", channel, exc)
            self.store.reset(channel)
            return Reply(formatter.UPSTREAM_FAILURE, Outcome.UPSTREAM_FAILURE)

        session = Session(
            active=True,
            board=board,
            solution_line=list(record.forced_line),
            rating=record.elo,
        )
        self.store.set(channel, session)
        log.info("channel %s: started puzzle elo=%s moves=%d", channel, record.elo, len(record.forced_line))
        return Reply(
            formatter.describe_puzzle(SessionSnapshot.of(session), self.server_url),
            Outcome.STARTED,
        )

    def resign(self, channel: str) -> Reply:
        if not self.store.session(channel).active:
            return Reply(formatter.NO_PUZZLE, Outcome.NO_PUZZLE)
        self.store.reset(channel)
        log.info("channel %s: resigned", channel)
        return Reply(formatter.RESIGNED, Outcome.RESIGNED)

    def move(self, channel: str, text: str) -> Reply:
        session = self.store.session(channel)
        if not session.active or session.board is None:
            return Reply(formatter.NO_PUZZLE, Outcome.NO_PUZZLE)

        # Work on a copy so a rejected move cannot touch the stored position
        board = session.board.copy()
        try:
            move = board.parse(text)
        except IllegalMoveError:
            return Reply(
                formatter.describe_illegal(text, session.board.legal_moves()),
                Outcome.ILLEGAL_MOVE,
            )

        line = list(session.solution_line)
        expected = line.pop(0)
        # Compare moves, not notation: "Nbd7"/"Nd7" or "e8Q"/"e8=Q" are the same move
        try:
            expected_move = board.parse(expected)
        except IllegalMoveError:
            self.store.reset(channel)
            log.error(
                "channel %s: solution move %r is illegal in %s, discarding puzzle",
                channel, expected, board.fen(),
            )
            return Reply(formatter.INTERNAL_ERROR, Outcome.INTERNAL_ERROR)

        if move != expected_move:
            played, wanted = board.san(move), board.san(expected_move)
            self.store.reset(channel)
            log.info("channel %s: wrong move %s, expected %s", channel, played, wanted)
            return Reply(formatter.describe_wrong(played, wanted), Outcome.WRONG_MOVE)

        board.play(move)

        if not line:
            self.store.reset(channel)
            log.info("channel %s: solved", channel)
            return Reply(formatter.SOLVED, Outcome.SOLVED)

        reply_move = line.pop(0)
        try:
            opponent = board.push(reply_move)
        except IllegalMoveError:
            self.store.reset(channel)
            log.error(
                "channel %s: forced reply %r is illegal in %s, discarding puzzle",
                channel, reply_move, board.fen(),
            )
            return Reply(formatter.INTERNAL_ERROR, Outcome.INTERNAL_ERROR)

        if not line:
            # A line ending on the opponent's move leaves nothing for the player
            self.store.reset(channel)
            log.error("channel %s: forced line ended on opponent reply %s", channel, opponent)
            return Reply(formatter.INTERNAL_ERROR, Outcome.INTERNAL_ERROR)

        advanced = Session(active=True, board=board, solution_line=line, rating=session.rating)
        self.store.set(channel, advanced)
        return Reply(
            formatter.describe_continuation(opponent, SessionSnapshot.of(advanced), self.server_url),
            Outcome.CONTINUE,
        )
