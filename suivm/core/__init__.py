"""Version store, artifact acquisition and lifecycle operations."""

from .acquirer import Acquirer, Mode
from .lifecycle import LifecycleController
from .store import Store

__all__ = ["Acquirer", "Mode", "LifecycleController", "Store"]
