"""Kickoff timing helpers shared by the scoring and coaching services."""
from __future__ import annotations

from datetime import datetime, timezone

from gameday.models.domain import Game


def resolve_now(now: datetime | None = None) -> datetime:
    """Return ``now`` as an aware UTC datetime, defaulting to the current time."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def seconds_until_kickoff(game: Game, now: datetime | None = None) -> float:
    """Signed seconds until kickoff (negative once the game has started)."""
    return (game.kickoff_utc - resolve_now(now)).total_seconds()


def hours_until_kickoff(game: Game, now: datetime | None = None) -> float:
    """Hours until kickoff, floored at zero for games already under way."""
    return max(0.0, seconds_until_kickoff(game, now) / 3600.0)


def minutes_until_kickoff(game: Game, now: datetime | None = None) -> int:
    """Whole minutes until kickoff, floored at zero."""
    return max(0, int(seconds_until_kickoff(game, now) / 60))


def time_window(minutes_to_kickoff: int) -> str:
    """Human phrase for the kickoff window, e.g. ``"45 minutes"`` or ``"3 hours"``."""
    if minutes_to_kickoff <= 0:
        return "live-game time"
    if minutes_to_kickoff < 60:
        return f"{minutes_to_kickoff} minutes"
    hours = minutes_to_kickoff // 60
    return f"{hours} hour{'' if hours == 1 else 's'}"


def kickoff_badge(minutes_to_kickoff: int) -> str:
    """Compact countdown badge: ``LIVE``, ``45m`` or ``3h``."""
    if minutes_to_kickoff <= 0:
        return "LIVE"
    if minutes_to_kickoff < 60:
        return f"{minutes_to_kickoff}m"
    return f"{minutes_to_kickoff // 60}h"
