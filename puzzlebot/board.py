import re

import chess

from puzzlebot.errors import IllegalMoveError, InvalidPositionError

UCI_RE = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$", re.I)
CASTLE_ZERO = {"0-0": "O-O", "0-0-0": "O-O-O", "o-o": "O-O", "o-o-o": "O-O-O"}


# Thin wrapper around chess.Board that owns one puzzle position
class PuzzleBoard:
    def __init__(self, fen: str = chess.STARTING_FEN) -> None:
        try:
            self.board = chess.Board(fen)
        except ValueError as exc:
            raise InvalidPositionError(f"invalid FEN: {fen!r}") from exc

    def parse(self, text: str) -> chess.Move:
        """Resolve SAN or UCI text into a legal move for the side to play."""
        token = text.strip()
        token = CASTLE_ZERO.get(token, token)
        if not token:
            raise IllegalMoveError("empty move")

        if UCI_RE.match(token):
            try:
                move = chess.Move.from_uci(token.lower())
            except ValueError:
                move = None
            if move is not None and move in self.board.legal_moves:
                return move

        try:
            return self.board.parse_san(token)
        except ValueError as exc:
            raise IllegalMoveError(f"{token} is not legal here") from exc

    def push(self, text: str) -> str:
        """
        Play a move on the board.
        Returns the move in SAN, raises IllegalMoveError and leaves the
        board untouched otherwise.
        """
        return self.play(self.parse(text))

    def play(self, move: chess.Move) -> str:
        san = self.board.san(move)
        self.board.push(move)
        return san

    def san(self, move: chess.Move) -> str:
        return self.board.san(move)

    def fen(self) -> str:
        return self.board.fen()

    def turn(self) -> str:
        return "White" if self.board.turn == chess.WHITE else "Black"

    def legal_moves(self) -> list[str]:
        return sorted(self.board.san(m) for m in self.board.legal_moves)

    def copy(self) -> "PuzzleBoard":
        clone = PuzzleBoard.__new__(PuzzleBoard)
        clone.board = self.board.copy()
        return clone
