"""Singleton metaclass for process-wide clients."""

import threading
from typing import Any


class SingletonMeta(type):
    """
    Metaclass returning one shared instance per class.

    Instance creation is guarded by a lock (double-checked), so concurrent
    first calls still build a single instance.
    """

    _instances: dict[type, Any] = {}
    _lock: threading.Lock = threading.Lock()

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            with cls._lock:
                if cls not in cls._instances:
                    cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]
