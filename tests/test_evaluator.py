"""Tests for the croniter-backed cron evaluator."""

from datetime import datetime, timedelta, timezone

import pytest

from scheduled.cron import CroniterEvaluator
from scheduled.errors import ConfigurationError


UTC = timezone.utc


class TestCroniterEvaluator:
    def test_next_minute(self):
        evaluator = CroniterEvaluator()
        now = datetime(2024, 1, 1, 0, 0, 30, tzinfo=UTC)
        assert evaluator.next("* * * * *", now) == datetime(2024, 1, 1, 0, 1, 0, tzinfo=UTC)

    def test_next_is_strictly_after_matching_instant(self):
        evaluator = CroniterEvaluator()
        now = datetime(2024, 1, 1, 0, 1, 0, tzinfo=UTC)
        assert evaluator.next("* * * * *", now) == datetime(2024, 1, 1, 0, 2, 0, tzinfo=UTC)

    def test_daily_expression(self):
        evaluator = CroniterEvaluator()
        now = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
        assert evaluator.next("10 9 * * *", now) == datetime(2024, 1, 2, 9, 10, 0, tzinfo=UTC)

    def test_timezone_is_applied(self):
        evaluator = CroniterEvaluator("Asia/Shanghai")
        # 00:30 UTC is 08:30 in Shanghai; next 09:00 Shanghai is 01:00 UTC
        now = datetime(2024, 1, 1, 0, 30, 0, tzinfo=UTC)
        result = evaluator.next("0 9 * * *", now)
        assert result - now == timedelta(minutes=30)

    @pytest.mark.parametrize("expression", ["not a cron", "61 * * * *", "* * *", ""])
    def test_malformed_expression(self, expression):
        with pytest.raises(ConfigurationError):
            CroniterEvaluator().next(expression, datetime(2024, 1, 1, tzinfo=UTC))

    def test_unknown_timezone(self):
        with pytest.raises(ConfigurationError):
            CroniterEvaluator("Mars/Olympus_Mons")
