"""
Live Intel Collectors - Base.

All collectors MUST implement this interface so the registry
can dispatch by source id without knowing the concrete class.
"""

import inspect
import random
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from ..models import IntelPayload


CollectFunction = Callable[[], Union[IntelPayload, Awaitable[IntelPayload]]]


class IntelCollector(ABC):
    """
    Abstract base class for all intelligence collectors.

    A collector has a single capability: collect() one reading.
    Failures are signalled by raising; the Collector Runner
    turns them into health updates.
    """

    @abstractmethod
    async def collect(self) -> IntelPayload:
        """Produce one reading (metrics plus advisories)."""
        pass


class SimulatedCollector(IntelCollector):
    """Base for the self-contained simulated collectors."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    @property
    def rng(self) -> random.Random:
        return self._rng


class FunctionCollector(IntelCollector):
    """
    Adapts a plain callable (sync or async) to IntelCollector.

    Usage:
        registry.register(descriptor, FunctionCollector(lambda: payload))
    """

    def __init__(self, func: CollectFunction) -> None:
        self._func = func

    async def collect(self) -> IntelPayload:
        result: Any = self._func()
        if inspect.isawaitable(result):
            result = await result
        return result
