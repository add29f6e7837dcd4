"""
Run orchestration for the mirror.

Modules:
- types: TaskResult
- jobs: one-shot mirror run
- scheduler: APScheduler-based recurring runs
"""

from .jobs import TASK_NAME, mirror_feed, run_mirror
from .scheduler import create_scheduler, run_scheduler
from .types import TaskResult

__all__ = [
    "TASK_NAME",
    "TaskResult",
    "create_scheduler",
    "mirror_feed",
    "run_mirror",
    "run_scheduler",
]
