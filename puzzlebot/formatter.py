from urllib.parse import quote

from puzzlebot.session import SessionSnapshot

NO_PUZZLE = "There is no puzzle in progress. Say `new` to start one."
RESIGNED = "Giving up already? The answer was right there. Say `new` when you want another go."
SOLVED = "Puzzle solved, well played! Say `new` for another one."
UPSTREAM_FAILURE = "Something went wrong while fetching a puzzle. Please try `new` again in a moment."
GENERIC_FAILURE = "Something went wrong. Please try again."
INTERNAL_ERROR = (
    ":warning: Internal error: this puzzle's solution data is inconsistent, so the puzzle "
    "has been discarded. Say `new` to start a different one."
)


def image_url(server_url: str, fen: str) -> str:
    return f"{server_url.rstrip('/')}/puzzle/{quote(fen, safe='')}"


def _legal(moves) -> str:
    return ", ".join(moves) if moves else "(none)"


def describe_puzzle(snapshot: SessionSnapshot, server_url: str) -> str:
    return (
        f"This puzzle is rated ELO {snapshot.rating}. {snapshot.turn} to move. "
        f"Legal moves: {_legal(snapshot.legal_moves)}. "
        f"{image_url(server_url, snapshot.fen)}"
    )


def describe_busy(snapshot: SessionSnapshot, server_url: str) -> str:
    return (
        "There is already a puzzle in progress. "
        + describe_puzzle(snapshot, server_url)
        + " Say `resign` first if you want a new one."
    )


def describe_continuation(opponent_move: str, snapshot: SessionSnapshot, server_url: str) -> str:
    return (
        f"Correct! Opponent plays {opponent_move}. {snapshot.turn} to move. "
        f"Legal moves: {_legal(snapshot.legal_moves)}. "
        f"{image_url(server_url, snapshot.fen)}"
    )


def describe_illegal(move: str, legal_moves) -> str:
    return f"{move} is not a legal move here. Legal moves: {_legal(legal_moves)}."


def describe_wrong(move: str, expected: str) -> str:
    return (
        f"{move} is not correct, the best move was {expected}. "
        "The puzzle has been abandoned. Say `new` to try another."
    )
