"""Error taxonomy and centralised error recorder – logs and bumps Prometheus counter."""
from __future__ import annotations

import logging

from ..monitoring.metrics import ERRORS_TOTAL

log = logging.getLogger(__name__)


class GasBotError(Exception):
    """Base class for every error raised by gasbot."""


class ConfigError(GasBotError):
    """A required setting is missing or invalid. Fatal at startup."""


class ChatConnectionError(GasBotError):
    """The Discord session could not be opened. Fatal for the worker."""


class FetchError(GasBotError):
    """The gas oracle could not produce a snapshot this cycle."""


class TransportError(FetchError):
    pass


class DecodeError(FetchError):
    pass


class PriceParseError(FetchError):
    pass


class PublishError(GasBotError):
    """The status update was rejected or could not be sent."""


def record_error(scope: str, worker_id: int, exc: BaseException) -> None:
    """Log *exc* for *worker_id* and increment the error counter."""
    ERRORS_TOTAL.labels(scope=scope).inc()
    log.error("[%s] worker %d: %s", scope, worker_id, exc)
