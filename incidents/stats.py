"""Dashboard statistics over a user's incidents.

All grouping is done in Python over the already-filtered incident list so
the same function serves every reporting period.
"""
from collections import Counter, OrderedDict
from datetime import date, timedelta
from typing import Dict, Iterable, Optional

WEEKDAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

PERIODS = {
    'last-30-days': 30,
    'last-90-days': 90,
    'last-6-months': 182,
    'all-time': None,
}

TREND_MONTHS = 6


def period_start(period: str, today: date) -> Optional[date]:
    """First day included by *period*, or None for all time.

    Raises ``ValueError`` for an unknown period name."""
    if period not in PERIODS:
        raise ValueError(f"Unknown period '{period}'")
    days = PERIODS[period]
    if days is None:
        return None
    return today - timedelta(days=days - 1)


def _month_key(year: int, month: int) -> str:
    return f'{year:04d}-{month:02d}'


def _last_months(today: date, count: int):
    year, month = today.year, today.month
    keys = []
    for _ in range(count):
        keys.append(_month_key(year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def average_safety_rating(incidents: Iterable) -> float:
    """Mean of the incidents that carry a rating, to one decimal place."""
    ratings = [i.safety_rating for i in incidents if i.safety_rating is not None]
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 1)


def compute_incident_stats(incidents, audio_durations: Dict[int, int] = None,
                           today: Optional[date] = None) -> dict:
    """Aggregate *incidents* into the dashboard payload.

    ``audio_durations`` maps incident id to its total recorded seconds.
    Weekday, month and "this month" buckets use the date the incident
    happened, not when it was logged.
    """
    incidents = list(incidents)
    audio_durations = audio_durations or {}
    today = today or date.today()

    behavior_counts = Counter(i.behavior_type for i in incidents)
    weekday_counts = Counter(WEEKDAYS[i.date.weekday()] for i in incidents)
    month_counts = Counter(_month_key(i.date.year, i.date.month) for i in incidents)
    mood_shift = Counter(
        f'{i.mood_before}->{i.mood_after}'
        for i in incidents if i.mood_before and i.mood_after
    )

    weekly_pattern = OrderedDict((day, weekday_counts.get(day, 0)) for day in WEEKDAYS)
    monthly_trend = OrderedDict(
        (key, month_counts.get(key, 0)) for key in _last_months(today, TREND_MONTHS)
    )

    return {
        'total': len(incidents),
        'thisMonth': month_counts.get(_month_key(today.year, today.month), 0),
        'avgSafetyRating': average_safety_rating(incidents),
        'ratedCount': sum(1 for i in incidents if i.safety_rating is not None),
        'totalAudioDuration': sum(audio_durations.get(i.id, 0) for i in incidents),
        'behaviorTypeDistribution': dict(behavior_counts.most_common()),
        'weeklyPattern': weekly_pattern,
        'monthlyTrend': monthly_trend,
        'moodShift': dict(mood_shift.most_common()),
    }
