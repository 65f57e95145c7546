from .status import StatusPublisher

__all__ = ["StatusPublisher"]
