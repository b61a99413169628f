from datetime import datetime, timedelta, timezone

from noise_nullifier.models.silence import Matcher
from noise_nullifier.silence import (
    ACKNOWLEDGE_DURATION,
    COMMENT,
    CREATED_BY,
    build_matchers,
    build_silence,
)

NOW = datetime(2026, 10, 19, 12, 30, 15, 123456, tzinfo=timezone.utc)


class TestBuildMatchers:
    def test_one_matcher_per_label_in_order(self):
        matchers = build_matchers({"alertname": "HighCPU", "instance": "node1"})
        assert matchers == [
            Matcher(name="alertname", value="HighCPU", is_regex=False),
            Matcher(name="instance", value="node1", is_regex=False),
        ]

    def test_alternation_value_is_regex(self):
        matchers = build_matchers({"severity": "critical|warning"})
        assert matchers[0].is_regex is True


class TestBuildSilence:
    def test_window_is_one_hour(self):
        silence = build_silence({"alertname": "HighCPU"}, now=NOW)
        assert silence.ends_at - silence.starts_at == timedelta(hours=1)
        assert ACKNOWLEDGE_DURATION == timedelta(hours=1)

    def test_start_is_truncated_to_seconds(self):
        silence = build_silence({}, now=NOW)
        assert silence.starts_at == NOW.replace(microsecond=0)

    def test_defaults_to_current_utc_time(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        silence = build_silence({"a": "b"})
        after = datetime.now(timezone.utc)
        assert before <= silence.starts_at <= after
        assert silence.starts_at.tzinfo is not None

    def test_provenance(self):
        silence = build_silence({"a": "b"}, now=NOW)
        assert silence.created_by == CREATED_BY
        assert silence.comment == COMMENT

    def test_empty_labels_give_empty_matchers(self):
        assert build_silence({}, now=NOW).matchers == []

    def test_custom_duration(self):
        silence = build_silence({"a": "b"}, now=NOW, duration=timedelta(minutes=5))
        assert silence.ends_at == NOW.replace(microsecond=0) + timedelta(minutes=5)

    def test_wire_format(self):
        silence = build_silence({"instance": "node1|node2"}, now=NOW)
        assert silence.to_wire() == {
            "matchers": [{"name": "instance", "value": "node1|node2", "isRegex": True}],
            "startsAt": "2026-10-19T12:30:15+00:00",
            "endsAt": "2026-10-19T13:30:15+00:00",
            "createdBy": CREATED_BY,
            "comment": COMMENT,
        }

    def test_naive_now_is_treated_as_utc(self):
        silence = build_silence({"a": "b"}, now=datetime(2026, 10, 19, 12, 0))
        assert silence.starts_at.tzinfo is timezone.utc
        assert silence.to_wire()["startsAt"] == "2026-10-19T12:00:00+00:00"
        assert silence.to_wire()["endsAt"] == "2026-10-19T13:00:00+00:00"
