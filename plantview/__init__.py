"""Plant performance (OEE) dashboard package."""

from .config import Config  # noqa: F401
from .dashboard import create_dashboard  # noqa: F401

__all__ = ["Config", "create_dashboard"]
