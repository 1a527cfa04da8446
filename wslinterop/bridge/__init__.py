from .base import Bridge
from .request import RemoteRequest
from .result import BridgeResult

__all__ = ["Bridge", "BridgeResult", "RemoteRequest"]
