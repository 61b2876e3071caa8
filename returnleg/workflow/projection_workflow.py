"""Durable workflow projecting the payments of one return leg.

Determinism contract: no I/O, no clock, no randomness here. The only
step is the projection activity.
"""

from __future__ import annotations

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from returnleg.infra.config import WorkerConfig
    from returnleg.workflow.activities import project_return_leg_payments
    from returnleg.workflow.types import ProjectionInput, ProjectionOutput

_CONFIG = WorkerConfig()

# The activity reports rejected input as ProjectionOutput.error, so only
# worker or transport failures ever reach this policy.
PROJECTION_RETRY = RetryPolicy(
    initial_interval=timedelta(seconds=_CONFIG.retry_initial_interval_s),
    backoff_coefficient=2.0,
    maximum_interval=timedelta(seconds=_CONFIG.retry_maximum_interval_s),
    maximum_attempts=_CONFIG.max_activity_attempts,
)


@workflow.defn(name="ReturnLegProjection")
class ReturnLegProjectionWorkflow:
    """Project a return leg's payments against a market snapshot."""

    @workflow.run
    async def run(self, inp: ProjectionInput) -> ProjectionOutput:
        return await workflow.execute_activity(
            project_return_leg_payments,
            inp,
            start_to_close_timeout=_CONFIG.activity_timeout,
            retry_policy=PROJECTION_RETRY,
        )
