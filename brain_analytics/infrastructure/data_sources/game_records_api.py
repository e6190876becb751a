"""
Game Records API Data Source

Fetches a user's game history from the game platform's HTTP API
(`GET /api/users/{user_id}/data`, body `{"games": [...]}` with camelCase
fields and epoch-millisecond or ISO-8601 timestamps).
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

import httpx

from brain_analytics.domain.entities.entities import GameRecord
from brain_analytics.domain.exceptions import UpstreamFetchException
from brain_analytics.domain.repositories.repositories import GameRecordRepository
from brain_analytics.utils.time_utils import ensure_aware, from_epoch_millis


logger = logging.getLogger(__name__)


@dataclass
class GameRecordsApiConfig:
    """Configuration for the game records API."""
    base_url: Optional[str] = None
    api_token: Optional[str] = None
    timeout: float = 10.0

    def __post_init__(self):
        if self.base_url is None:
            self.base_url = os.getenv("GAME_RECORDS_API_URL", "http://localhost:3000")
        if self.api_token is None:
            self.api_token = os.getenv("GAME_RECORDS_API_TOKEN")
        self.timeout = float(os.getenv("GAME_RECORDS_API_TIMEOUT", self.timeout))


class GameRecordsApiSource(GameRecordRepository):
    """
    Record store backed by the game platform's user data endpoint.

    Transport errors, non-2xx responses and malformed payloads all
    surface as UpstreamFetchException.
    """

    SOURCE_NAME = "GameRecordsAPI"

    def __init__(
        self,
        config: Optional[GameRecordsApiConfig] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.config = config or GameRecordsApiConfig()
        self._client = client

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    def _fetch(self, user_id: str) -> Dict[str, Any]:
        url = f"{self.config.base_url.rstrip('/')}/api/users/{user_id}/data"
        client = self._client or httpx.Client(timeout=self.config.timeout)

        try:
            response = client.get(url, headers=self._headers())
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{self.SOURCE_NAME} returned {e.response.status_code} for user {user_id}")
            raise UpstreamFetchException(
                f"Failed to fetch user data: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.SOURCE_NAME} request failed for user {user_id}: {e}")
            raise UpstreamFetchException(f"Failed to fetch user data: {e}") from e
        except ValueError as e:
            raise UpstreamFetchException(f"Invalid JSON from {self.SOURCE_NAME}: {e}") from e
        finally:
            if self._client is None:
                client.close()

    def get_records(self, user_id: str) -> List[GameRecord]:
        payload = self._fetch(user_id)
        games = payload.get("games", []) if isinstance(payload, dict) else None
        if not isinstance(games, list):
            raise UpstreamFetchException(f"Unexpected payload from {self.SOURCE_NAME}")

        try:
            records = [self._parse_record(game) for game in games]
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamFetchException(f"Malformed game record from {self.SOURCE_NAME}: {e}") from e

        logger.debug(f"Fetched {len(records)} game records for user {user_id}")
        return records

    @staticmethod
    def _parse_timestamp(value: Any) -> datetime:
        if isinstance(value, (int, float)):
            return from_epoch_millis(value)
        return ensure_aware(datetime.fromisoformat(str(value).replace("Z", "+00:00")))

    @classmethod
    def _parse_record(cls, data: Dict[str, Any]) -> GameRecord:
        return GameRecord(
            game_type=data["gameType"],
            difficulty=data.get("difficulty", "medium"),
            score=int(data["score"]),
            play_time=float(data.get("playTime") or 0),
            mistakes=int(data.get("mistakes") or 0),
            completed=bool(data.get("completed", False)),
            timestamp=cls._parse_timestamp(data["timestamp"]),
        )
