"""Background jobs."""

from yeild.scheduler.jobs import scheduler, setup_scheduler

__all__ = ["scheduler", "setup_scheduler"]
