class PuzzleBotError(Exception):
    """Base class for everything the bot raises on purpose."""


class IllegalMoveError(PuzzleBotError):
    """A move the board adapter refuses."""


class PuzzleFetchError(PuzzleBotError):
    """The puzzle API failed or answered with a record we cannot use."""


class MessengerError(PuzzleBotError):
    """Posting a reply to the chat transport failed."""


class InvalidPositionError(PuzzleBotError):
    """A FEN the board adapter cannot set up."""
