"""Cron expression support."""

from scheduled.cron.evaluator import CronEvaluator, CroniterEvaluator

__all__ = [
    "CronEvaluator",
    "CroniterEvaluator",
]
