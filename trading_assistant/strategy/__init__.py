"""Strategy selection policy"""

from .catalog import Horizon, StrategyCatalog

__all__ = ["Horizon", "StrategyCatalog"]
