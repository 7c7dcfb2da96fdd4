"""Puzzle supply: records from the chessblunders.org API."""
import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from puzzlebot.errors import PuzzleFetchError

log = logging.getLogger("puzzle_source")


class PuzzleRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fen_before: str = Field(alias="fenBefore")
    blunder_move: str = Field(alias="blunderMove")
    forced_line: list[str] = Field(alias="forcedLine", min_length=1)
    elo: int

    @field_validator("fen_before", "blunder_move")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("forced_line")
    @classmethod
    def validate_forced_line(cls, value: list[str]) -> list[str]:
        moves = [m.strip() for m in value]
        if any(not m for m in moves):
            raise ValueError("forced line contains a blank move")
        return moves


class PuzzleSource(Protocol):
    async def fetch(self) -> PuzzleRecord: ...


class BlunderPuzzleSource:
    """Asks the blunder API for an exploratory puzzle."""

    def __init__(
        self,
        url: str,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self.transport = transport

    async def fetch(self) -> PuzzleRecord:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
                resp = await client.post(self.url, json={"type": "explore"})
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise PuzzleFetchError(f"puzzle API request failed: {exc}") from exc

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise PuzzleFetchError("puzzle API response has no data object")

        try:
            record = PuzzleRecord.model_validate(data)
        except ValidationError as exc:
            raise PuzzleFetchError(f"malformed puzzle record: {exc}") from exc

        log.debug("fetched puzzle elo=%s line=%s", record.elo, record.forced_line)
        return record
