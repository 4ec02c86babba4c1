# File: src/parkinglot/domain/strategies.py
"""
Strategy Pattern Implementation for Slot Allocation

This module implements the Strategy Pattern to encapsulate the algorithm that
decides which free slot a parking level hands out next. The level registry
only talks to the SlotAllocationStrategy interface, so new policies can be
added without touching it.

Strategies:
1. NearestFirstStrategy - lowest free slot number first (entrance side)
2. FarthestFirstStrategy - highest free slot number first

Both keep the free slots in a binary heap with lazy deletion:
add / get_slot are O(log n), remove_slot is O(1) with the removed entry
discarded the next time it reaches the top of the heap.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Set, Type
import heapq
import logging


# ============================================================================
# STRATEGY INTERFACE
# ============================================================================

class SlotAllocationStrategy(ABC):
    """
    Abstract base class for slot allocation strategies
    Defines the interface used by the level registry
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def add(self, slot: int) -> None:
        """Mark a slot as free so it can be handed out again"""
        pass

    @abstractmethod
    def get_slot(self) -> Optional[int]:
        """
        Remove and return the next slot according to the policy
        Returns: slot number, or None when no slot is free
        """
        pass

    @abstractmethod
    def remove_slot(self, slot: int) -> None:
        """Withdraw a slot from the free set (no-op if it is not free)"""
        pass

    @abstractmethod
    def free_slots(self) -> Set[int]:
        """Snapshot of the currently free slot numbers"""
        pass

    def __len__(self) -> int:
        return len(self.free_slots())

    def get_strategy_name(self) -> str:
        """Get human-readable strategy name"""
        return self.__class__.__name__.replace("Strategy", "")

    def __str__(self) -> str:
        return f"{self.get_strategy_name()} Strategy"


# ============================================================================
# HEAP BACKED STRATEGIES
# ============================================================================

class _HeapSlotStrategy(SlotAllocationStrategy):
    """Shared heap bookkeeping; subclasses only choose the ordering key"""

    def __init__(self):
        super().__init__()
        self._heap: List[int] = []
        self._free: Set[int] = set()

    @staticmethod
    @abstractmethod
    def _key(slot: int) -> int:
        pass

    def add(self, slot: int) -> None:
        if slot in self._free:
            return
        self._free.add(slot)
        heapq.heappush(self._heap, self._key(slot))

    def get_slot(self) -> Optional[int]:
        while self._heap:
            slot = self._key(heapq.heappop(self._heap))
            if slot in self._free:
                self._free.remove(slot)
                return slot
            # stale entry left behind by remove_slot
        return None

    def remove_slot(self, slot: int) -> None:
        self._free.discard(slot)
        # Rebuild once stale entries dominate so the heap stays O(free slots)
        if len(self._heap) > 2 * len(self._free) + 16:
            self._heap = [self._key(s) for s in self._free]
            heapq.heapify(self._heap)

    def peek(self) -> Optional[int]:
        """Return the slot get_slot would hand out, without removing it"""
        while self._heap and self._key(self._heap[0]) not in self._free:
            heapq.heappop(self._heap)
        if not self._heap:
            return None
        return self._key(self._heap[0])

    def free_slots(self) -> Set[int]:
        return set(self._free)

    def __len__(self) -> int:
        return len(self._free)


class NearestFirstStrategy(_HeapSlotStrategy):
    """
    Strategy: Nearest-first allocation
    - Always hands out the smallest free slot number
    - Models drivers preferring spots closest to the entrance
    """

    @staticmethod
    def _key(slot: int) -> int:
        return slot


class FarthestFirstStrategy(_HeapSlotStrategy):
    """
    Strategy: Farthest-first allocation
    - Always hands out the largest free slot number
    """

    @staticmethod
    def _key(slot: int) -> int:
        # Negation is its own inverse, so the same key maps back to the slot
        return -slot


# ============================================================================
# STRATEGY FACTORY
# ============================================================================

class SlotStrategyFactory:
    """Creates slot allocation strategies from configuration names"""

    _strategies: Dict[str, Type[SlotAllocationStrategy]] = {
        "nearest_first": NearestFirstStrategy,
        "farthest_first": FarthestFirstStrategy,
    }

    def __init__(self, default_type: str = "nearest_first"):
        if default_type not in self._strategies:
            raise ValueError(f"Unknown slot allocation strategy: {default_type}")
        self.default_type = default_type

    def create(self) -> SlotAllocationStrategy:
        """Create a fresh instance of the default strategy"""
        return self.create_by_type(self.default_type)

    @classmethod
    def create_by_type(cls, strategy_type: str) -> SlotAllocationStrategy:
        """Create a strategy by its configuration name"""
        strategy_class = cls._strategies.get(strategy_type)
        if strategy_class is None:
            raise ValueError(
                f"Unknown slot allocation strategy: {strategy_type}. "
                f"Available: {', '.join(sorted(cls._strategies))}"
            )
        return strategy_class()

    @classmethod
    def available_types(cls) -> List[str]:
        return sorted(cls._strategies)
