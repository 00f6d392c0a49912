import logging

from arq import create_pool
from arq.connections import RedisSettings
from arq.jobs import Job

from creditflow.core.config import settings

logger = logging.getLogger(__name__)

# Redis connection settings
redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)

# Fixed id: arq refuses a second job with this id while one is queued or running.
SETTLEMENT_JOB_ID = "settlement-run"


async def enqueue_settlement_run() -> Job | None:
    """
    Enqueue an out-of-schedule settlement run.

    Returns:
        The arq job, or None when a settlement run is already queued or running.
    """
    pool = await create_pool(redis_settings)
    try:
        job = await pool.enqueue_job("run_settlement_task", _job_id=SETTLEMENT_JOB_ID)
    finally:
        await pool.close()

    if job is None:
        logger.info("Settlement run %s already queued, not enqueuing another", SETTLEMENT_JOB_ID)
    else:
        logger.info("Enqueued settlement run %s", job.job_id)
    return job
