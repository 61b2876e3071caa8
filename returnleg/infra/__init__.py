"""returnleg.infra: deployment configuration."""

from returnleg.infra.config import WorkerConfig as WorkerConfig
