"""Temporal worker configuration for return-leg projection.

Pure configuration data; nothing here reads the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import final

TASK_QUEUE: str = "trs-return-leg"


@final
@dataclass(frozen=True, slots=True)
class WorkerConfig:
    """Connection and activity settings for the projection worker."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = TASK_QUEUE
    activity_timeout_s: int = 60
    max_activity_attempts: int = 3
    retry_initial_interval_s: int = 2
    retry_maximum_interval_s: int = 30

    def __post_init__(self) -> None:
        if self.activity_timeout_s <= 0:
            raise TypeError(f"WorkerConfig.activity_timeout_s must be > 0, got {self.activity_timeout_s}")
        if self.max_activity_attempts <= 0:
            raise TypeError(
                f"WorkerConfig.max_activity_attempts must be > 0, got {self.max_activity_attempts}"
            )

    @property
    def activity_timeout(self) -> timedelta:
        return timedelta(seconds=self.activity_timeout_s)
