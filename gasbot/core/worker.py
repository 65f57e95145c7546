"""Shard workers – poll the gas oracle and publish the result as bot status."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

import aiohttp

from .errors import ChatConnectionError, FetchError, PublishError, record_error
from ..bots.status import StatusPublisher
from ..monitoring.metrics import CYCLES_TOTAL, ERRORS_TOTAL, observe_prices
from ..oracle.gas import GasOracle, format_status

if TYPE_CHECKING:
    from ..settings import Settings

log = logging.getLogger(__name__)

POLL_INTERVAL = 30  # seconds


async def run_cycle(worker_id: int, oracle: GasOracle, publisher: StatusPublisher) -> bool:
    """Fetch once and publish. Returns True when the status was updated."""
    shard = str(worker_id)
    try:
        snapshot = await oracle.fetch_snapshot()
    except FetchError as e:
        CYCLES_TOTAL.labels(shard=shard, outcome="fetch_error").inc()
        record_error("fetch", worker_id, e)
        return False

    observe_prices(snapshot.fast, snapshot.mid, snapshot.slow)
    text = format_status(snapshot)
    log.info("WorkerId %d got %s", worker_id, text)

    try:
        await publisher.publish(text)
    except PublishError as e:
        CYCLES_TOTAL.labels(shard=shard, outcome="publish_error").inc()
        record_error("publish", worker_id, e)
        return False

    CYCLES_TOTAL.labels(shard=shard, outcome="published").inc()
    return True


async def worker_loop(
    worker_id: int,
    oracle: GasOracle,
    publisher: StatusPublisher,
    interval: float = POLL_INTERVAL,
    cycles: Optional[int] = None,
) -> None:
    """Endless loop – one cycle, then a fixed sleep. *cycles* bounds it for one-off runs."""
    done = 0
    while cycles is None or done < cycles:
        try:
            await run_cycle(worker_id, oracle, publisher)
        except Exception:  # noqa: BLE001
            CYCLES_TOTAL.labels(shard=str(worker_id), outcome="crashed").inc()
            ERRORS_TOTAL.labels(scope="cycle").inc()
            log.exception("✖ worker %d cycle failed", worker_id)
        done += 1
        await asyncio.sleep(interval)


async def run_worker(worker_id: int, settings: "Settings") -> None:
    """Open this shard's session and poll until the process is stopped."""
    publisher = StatusPublisher(settings.token, worker_id, settings.shard_count)
    try:
        await publisher.open()
    except ChatConnectionError as e:
        record_error("connect", worker_id, e)
        raise

    try:
        async with aiohttp.ClientSession() as session:
            oracle = GasOracle(settings.api_key, session, settings.oracle_url)
            await worker_loop(worker_id, oracle, publisher, settings.poll_interval)
    finally:
        await publisher.close()


async def run_shards(settings: "Settings") -> None:
    """Launch one worker per shard and wait on all of them."""
    log.info("🚀 starting %d shard worker(s)", settings.shard_count)
    await asyncio.gather(*(run_worker(i, settings) for i in range(settings.shard_count)))
