"""Demo game and metrics for local runs."""
from datetime import datetime, timedelta, timezone

from gameday.models.domain import AthleteMetrics, AthleteType, Game


def demo_game(reference: datetime | None = None) -> Game:
    """Game kicking off eight hours after ``reference``."""
    reference = reference or datetime.now(timezone.utc)
    return Game(title="Upcoming Game", kickoff_time=reference + timedelta(hours=8))


def demo_metrics(reference: datetime | None = None) -> AthleteMetrics:
    """Plausible soccer metrics that drift with the local time of day."""
    hour = (reference or datetime.now(timezone.utc)).astimezone().hour

    sleep_hours = max(5.5, min(9.0, 7.2 + (0.3 if hour < 12 else -0.2)))
    return AthleteMetrics(
        athlete_type=AthleteType.SOCCER,
        sleep_hours=round(sleep_hours, 1),
        soreness=4 if hour < 12 else 5,
        stress=5 if hour < 18 else 6,
        hydration_oz=56.0 if hour < 12 else 78.0,
        training_intensity=6 if hour < 15 else 4,
    )
