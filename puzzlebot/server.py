from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
import logging
from urllib.parse import unquote

import cairosvg
import chess
import chess.svg
import uvicorn

from puzzlebot.config import Settings, load_settings
from puzzlebot.errors import MessengerError
from puzzlebot.events import Challenge, ChatCommand, parse_event
from puzzlebot.machine import PuzzleBot
from puzzlebot.messenger import Messenger, SlackWebhookMessenger
from puzzlebot.puzzle_source import BlunderPuzzleSource, PuzzleSource
from puzzlebot.session import SessionStore

log = logging.getLogger("puzzle_server")


def render_board(fen: str, size: int) -> bytes:
    """Render a FEN to PNG. Raises ValueError for a FEN python-chess rejects."""
    board = chess.Board(fen)
    svg = chess.svg.board(board, size=size)
    return cairosvg.svg2png(bytestring=svg.encode("utf-8"))


def create_app(
    settings: Settings | None = None,
    store: SessionStore | None = None,
    source: PuzzleSource | None = None,
    messenger: Messenger | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    store = store if store is not None else SessionStore()
    source = source or BlunderPuzzleSource(settings.puzzle_api_url, settings.puzzle_api_timeout_s)
    messenger = messenger or SlackWebhookMessenger(settings.slack_webhook_url)
    bot = PuzzleBot(store, source, settings.server_url)

    app = FastAPI()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.store = store
    app.state.bot = bot

    # ---- Health ----
    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    # ---- Chat events ----
    @app.post("/puzzle")
    async def puzzle_event(request: Request) -> Response:
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse({"error": "Request body must be JSON"}, status_code=400)

        parsed = parse_event(payload)
        if isinstance(parsed, Challenge):
            return Response(parsed.challenge, media_type="text/plain")
        if not isinstance(parsed, ChatCommand):
            return JSONResponse({"ok": True})

        # The store is already updated when handle() returns
        reply = await bot.handle(parsed.channel, parsed.text)
        log.info("channel %s: %r -> %s", parsed.channel, parsed.text, reply.outcome.value)

        try:
            await messenger.post(parsed.channel, reply.text)
        except MessengerError as exc:
            log.warning("channel %s: reply not delivered: %s", parsed.channel, exc)

        return JSONResponse({"text": reply.text, "outcome": reply.outcome.value})

    # ---- Board images ----
    @app.get("/puzzle/{fen:path}")
    async def board_image(fen: str) -> Response:
        # Rendering is a side channel: a failure here never touches sessions
        try:
            png = render_board(unquote(fen), settings.board_image_size)
        except ValueError as exc:
            log.warning("could not render %r: %s", fen, exc)
            return JSONResponse({"error": "Something went wrong"}, status_code=500)
        return Response(png, media_type="image/png")

    return app


app = create_app()


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    log.info("Chessbot active on port %d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
