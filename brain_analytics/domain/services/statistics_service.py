"""
Statistics Domain Service

Descriptive statistics over game-record histories: means, dispersion,
least-squares trend, consistency and session grouping.
"""

import math
from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from typing import Hashable, List, Sequence, TypeVar

from brain_analytics.domain.constants import MIN_IMPROVEMENT_RECORDS, SESSION_GAP_MINUTES
from brain_analytics.domain.entities.entities import GameRecord
from brain_analytics.utils.time_utils import to_local


H = TypeVar("H", bound=Hashable)


@dataclass
class Session:
    """A run of records with inter-record gaps under the session gap."""
    records: List[GameRecord]

    @property
    def duration(self) -> int:
        # Measured in games played, not elapsed time
        return len(self.records)

    @property
    def start_time(self):
        return self.records[0].timestamp

    @property
    def end_time(self):
        return self.records[-1].timestamp


class StatisticsService:
    @staticmethod
    def mean(values: Sequence[float]) -> float:
        """Arithmetic mean; 0 for an empty sequence."""
        if not values:
            return 0.0
        return sum(values) / len(values)

    @staticmethod
    def median(values: Sequence[float]) -> float:
        if not values:
            return 0.0
        ordered = sorted(values)
        mid = len(ordered) // 2
        if len(ordered) % 2 == 0:
            return (ordered[mid - 1] + ordered[mid]) / 2
        return float(ordered[mid])

    @staticmethod
    def variance(values: Sequence[float]) -> float:
        """Population variance; 0 for an empty sequence."""
        if not values:
            return 0.0
        avg = StatisticsService.mean(values)
        return sum((v - avg) ** 2 for v in values) / len(values)

    @staticmethod
    def standard_deviation(values: Sequence[float]) -> float:
        return math.sqrt(StatisticsService.variance(values))

    @staticmethod
    def trend(values: Sequence[float]) -> float:
        """
        Ordinary least-squares slope of values against their index.

        Returns 0 with fewer than two points.
        """
        n = len(values)
        if n < 2:
            return 0.0

        x_mean = (n - 1) / 2
        y_mean = StatisticsService.mean(values)

        numerator = 0.0
        denominator = 0.0
        for i, y in enumerate(values):
            numerator += (i - x_mean) * (y - y_mean)
            denominator += (i - x_mean) ** 2

        return 0.0 if denominator == 0 else numerator / denominator

    @staticmethod
    def consistency(values: Sequence[float]) -> float:
        """
        Inverse coefficient of variation, clipped to [0, 1].

        1 - stddev/mean, with 1 for fewer than two points and 0 when
        the mean is not positive.
        """
        if len(values) < 2:
            return 1.0

        avg = StatisticsService.mean(values)
        std = StatisticsService.standard_deviation(values)
        if avg <= 0:
            return 1.0 if std == 0 else 0.0

        return min(1.0, max(0.0, 1.0 - std / avg))

    @staticmethod
    def recent_improvement(values: Sequence[float]) -> float:
        """mean(last 5) - mean(previous 5), or 0 with fewer than 10 points."""
        if len(values) < MIN_IMPROVEMENT_RECORDS:
            return 0.0
        recent = values[-5:]
        older = values[-10:-5]
        return StatisticsService.mean(recent) - StatisticsService.mean(older)

    @staticmethod
    def improvement_rate(values: Sequence[float]) -> float:
        """Relative change of the last 3 points against the 3 before them."""
        if len(values) < 5:
            return 0.0

        recent = values[-3:]
        older = values[-6:-3]
        if not older:
            return 0.0

        older_mean = StatisticsService.mean(older)
        return (StatisticsService.mean(recent) - older_mean) / max(older_mean, 1)

    @staticmethod
    def long_term_improvement(values: Sequence[float]) -> float:
        """mean(last 10) - mean(first 10), or 0 with fewer than 10 points."""
        if len(values) < MIN_IMPROVEMENT_RECORDS:
            return 0.0
        return StatisticsService.mean(values[-10:]) - StatisticsService.mean(values[:10])

    @staticmethod
    def clamp_unit(value: float) -> float:
        """Clamp a value to [0, 1]."""
        return min(1.0, max(0.0, value))

    @staticmethod
    def sort_by_time(records: Sequence[GameRecord]) -> List[GameRecord]:
        return sorted(records, key=lambda r: r.timestamp)

    @staticmethod
    def completion_rate(records: Sequence[GameRecord]) -> float:
        if not records:
            return 0.0
        return sum(1 for r in records if r.completed) / len(records)

    @staticmethod
    def abandonment_rate(records: Sequence[GameRecord]) -> float:
        if not records:
            return 0.0
        return sum(1 for r in records if not r.completed) / len(records)

    @staticmethod
    def group_into_sessions(
        records: Sequence[GameRecord],
        gap_minutes: int = SESSION_GAP_MINUTES,
    ) -> List[Session]:
        """
        Partition records into sessions.

        Records are sorted by timestamp; a record closer than `gap_minutes`
        to the previous one joins its session.
        """
        gap = timedelta(minutes=gap_minutes)
        sessions: List[Session] = []
        current: List[GameRecord] = []

        for record in StatisticsService.sort_by_time(records):
            if current and record.timestamp - current[-1].timestamp < gap:
                current.append(record)
                continue
            if current:
                sessions.append(Session(records=current))
            current = [record]

        if current:
            sessions.append(Session(records=current))

        return sessions

    @staticmethod
    def daily_activity(records: Sequence[GameRecord]) -> List[int]:
        """Record counts per weekday (Monday=0 ... Sunday=6)."""
        counts = [0] * 7
        for record in records:
            counts[to_local(record.timestamp).weekday()] += 1
        return counts

    @staticmethod
    def hourly_activity(records: Sequence[GameRecord]) -> List[int]:
        counts = [0] * 24
        for record in records:
            counts[to_local(record.timestamp).hour] += 1
        return counts

    @staticmethod
    def most_frequent(items: Sequence[H]) -> H:
        """Most common item; ties go to the item seen first."""
        if not items:
            raise ValueError("most_frequent() requires at least one item")
        return Counter(items).most_common(1)[0][0]
