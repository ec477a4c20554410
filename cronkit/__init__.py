"""Cron-style task scheduling with seconds resolution, driven by explicit ticks."""

__version__ = "0.1.0"

__all__ = ["clock", "cron", "cron_data", "randomization", "schedule", "task", "timetypes"]