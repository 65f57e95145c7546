"""Prometheus metrics for the status workers."""
from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, start_http_server

log = logging.getLogger(__name__)

GAS_PRICE_GWEI = Gauge("gas_price_gwei", "Latest rounded gas price in gwei", ["tier"])
CYCLES_TOTAL = Counter("status_cycles_total", "Poll cycles by outcome", ["shard", "outcome"])
ERRORS_TOTAL = Counter("errors_total", "Total errors logged", ["scope"])


def observe_prices(fast: int, mid: int, slow: int) -> None:
    GAS_PRICE_GWEI.labels(tier="fast").set(fast)
    GAS_PRICE_GWEI.labels(tier="mid").set(mid)
    GAS_PRICE_GWEI.labels(tier="slow").set(slow)


def start_exporter(port: int) -> None:
    """Serve ``/metrics`` on *port* from a background thread."""
    start_http_server(port)
    log.info("📈 metrics exporter listening on :%d", port)
