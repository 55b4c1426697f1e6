"""Provider adapters: submit a task, fetch its status, cancel it remotely."""

from .base import ProviderAdapter
from .factory import create_adapter
from .luma import LumaAdapter
from .runway import RunwayAdapter

__all__ = [
    "ProviderAdapter",
    "LumaAdapter",
    "RunwayAdapter",
    "create_adapter",
]
