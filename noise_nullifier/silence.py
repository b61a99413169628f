"""Build Alertmanager silences from extracted labels."""

from datetime import datetime, timedelta, timezone

from noise_nullifier.labels import is_alternation
from noise_nullifier.models.silence import Matcher, Silence

ACKNOWLEDGE_DURATION = timedelta(hours=1)
CREATED_BY = "PagerDuty-AlertManager bridge"
COMMENT = "Silenced by our PagerDuty-AlertManager bridge based on incident data"


def build_matchers(labels: dict[str, str]) -> list[Matcher]:
    return [
        Matcher(name=key, value=value, is_regex=is_alternation(value))
        for key, value in labels.items()
    ]


def build_silence(
    labels: dict[str, str],
    now: datetime | None = None,
    duration: timedelta = ACKNOWLEDGE_DURATION,
) -> Silence:
    """Create a silence covering ``labels`` that starts now and lasts ``duration``.

    Matchers keep the order of ``labels``. Values containing ``|`` are sent as
    regex matchers. A naive ``now`` is taken as UTC. An empty mapping produces
    a silence without matchers.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    starts_at = now.replace(microsecond=0)

    return Silence(
        matchers=build_matchers(labels),
        starts_at=starts_at,
        ends_at=starts_at + duration,
        created_by=CREATED_BY,
        comment=COMMENT,
    )
