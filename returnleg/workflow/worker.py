"""Worker hosting the return-leg projection workflow and activity.

Usage::

    import asyncio
    from returnleg.workflow.worker import run_worker

    asyncio.run(run_worker())
"""

from __future__ import annotations

from temporalio.client import Client
from temporalio.worker import Worker

from returnleg.infra.config import WorkerConfig
from returnleg.workflow.activities import project_return_leg_payments
from returnleg.workflow.converter import RETURNLEG_DATA_CONVERTER
from returnleg.workflow.projection_workflow import ReturnLegProjectionWorkflow


def build_worker(client: Client, config: WorkerConfig) -> Worker:
    return Worker(
        client,
        task_queue=config.task_queue,
        workflows=[ReturnLegProjectionWorkflow],
        activities=[project_return_leg_payments],
    )


async def run_worker(config: WorkerConfig | None = None) -> None:
    """Connect to Temporal and run the worker until interrupted."""
    config = config or WorkerConfig()
    client = await Client.connect(
        config.target_host, namespace=config.namespace,
        data_converter=RETURNLEG_DATA_CONVERTER,
    )
    await build_worker(client, config).run()
