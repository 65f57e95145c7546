from .gas import GasOracle, GasSnapshot, format_status

__all__ = ["GasOracle", "GasSnapshot", "format_status"]
