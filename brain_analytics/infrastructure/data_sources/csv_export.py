"""
CSV Export Data Source

Loads game records from a CSV export of the game platform into an
in-memory record store.
"""

import logging
import numbers
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from brain_analytics.domain.entities.entities import GameRecord
from brain_analytics.infrastructure.repositories.game_record_repository import (
    InMemoryGameRecordRepository,
)
from brain_analytics.utils.time_utils import ensure_aware

logger = logging.getLogger(__name__)

# Exports from the platform use camelCase headers
COLUMN_ALIASES = {
    "userId": "user_id",
    "gameType": "game_type",
    "playTime": "play_time",
    "createdAt": "timestamp",
    "created_at": "timestamp",
}

REQUIRED_COLUMNS = ["user_id", "game_type", "score", "timestamp"]


def _parse_timestamp(value) -> Optional[datetime]:
    if pd.isna(value):
        return None
    if isinstance(value, numbers.Number):
        parsed = pd.to_datetime(value, unit="ms", utc=True)
    else:
        parsed = pd.to_datetime(str(value), utc=True)
    return ensure_aware(parsed.to_pydatetime())


def parse_records(df: pd.DataFrame) -> Dict[str, List[GameRecord]]:
    """
    Parse a DataFrame into records grouped by user.

    Rows with an unknown game, a missing timestamp or invalid values
    are skipped with a warning.
    """
    df = df.rename(columns=COLUMN_ALIASES)
    if not all(col in df.columns for col in REQUIRED_COLUMNS):
        raise ValueError(f"Missing required columns. Available: {df.columns.tolist()}")

    records: Dict[str, List[GameRecord]] = defaultdict(list)
    skipped = 0

    for idx, row in df.iterrows():
        try:
            timestamp = _parse_timestamp(row["timestamp"])
            if timestamp is None:
                skipped += 1
                continue

            difficulty = row.get("difficulty")
            play_time = row.get("play_time")
            mistakes = row.get("mistakes")
            completed = row.get("completed")

            records[str(row["user_id"])].append(GameRecord(
                game_type=str(row["game_type"]),
                difficulty=str(difficulty) if pd.notna(difficulty) else "medium",
                score=int(row["score"]),
                play_time=float(play_time) if pd.notna(play_time) else 0.0,
                mistakes=int(mistakes) if pd.notna(mistakes) else 0,
                completed=str(completed).strip().lower() in ("1", "true", "yes")
                if pd.notna(completed) else False,
                timestamp=timestamp,
            ))
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping row {idx}: {e}")
            skipped += 1

    if skipped:
        logger.info(f"Skipped {skipped} of {len(df)} rows")
    return dict(records)


def load_csv_store(source: Any) -> InMemoryGameRecordRepository:
    """Read a CSV export into an in-memory record store."""
    df = pd.read_csv(source, encoding="utf-8", on_bad_lines="skip")
    records = parse_records(df)
    logger.info(f"Loaded {sum(len(r) for r in records.values())} records for {len(records)} users")
    return InMemoryGameRecordRepository(records)
