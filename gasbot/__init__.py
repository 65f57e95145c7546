"""GasBot – publishes Ethereum gas oracle tiers as a Discord bot status."""
from importlib.metadata import version as _pkg_version

__all__: list[str] = ["__version__"]

try:
    __version__: str = _pkg_version("gasbot")
except Exception:  # pragma: no cover – during local dev the dist metadata may be missing
    __version__ = "0.0.0"
