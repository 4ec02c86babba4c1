# File: src/parkinglot/infrastructure/repositories.py
"""
Repository for the Parking Lot Aggregate

The parking lot lives only in memory. The repository is the single owner of
the MultiLevelParkingLot instance and makes its lifecycle explicit:

- get_or_create() builds the lot exactly once, even when several threads
  race on the first call (double-checked locking)
- teardown() releases every level and clears the reference, after which a
  new lot can be created

A repository is an ordinary object handed to the parking service, so each
service (and each test) can own an independent lot.
"""

from typing import Callable, Optional, Sequence
import logging
import threading

from ..domain.aggregates import MultiLevelParkingLot
from ..domain.strategies import SlotAllocationStrategy, SlotStrategyFactory


class ParkingLotRepository:
    """In-memory holder of the one MultiLevelParkingLot"""

    def __init__(
        self,
        strategy_factory: Optional[SlotStrategyFactory] = None,
        case_sensitive_colors: bool = False
    ):
        self.strategy_factory = strategy_factory or SlotStrategyFactory()
        self.case_sensitive_colors = case_sensitive_colors
        self._parking_lot: Optional[MultiLevelParkingLot] = None
        self._lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def get_or_create(
        self,
        levels: Sequence[int],
        capacities: Sequence[int]
    ) -> MultiLevelParkingLot:
        """
        Return the parking lot, building it on the first call
        Arguments of later calls are ignored until teardown()
        """
        parking_lot = self._parking_lot
        if parking_lot is None:
            with self._lock:
                if self._parking_lot is None:
                    self._parking_lot = self._build(levels, capacities)
                    return self._parking_lot
                parking_lot = self._parking_lot

        if list(levels) != parking_lot.level_numbers:
            self._logger.warning(
                f"Parking lot already exists with levels {parking_lot.level_numbers}; "
                f"ignoring requested levels {list(levels)}"
            )
        return parking_lot

    def get(self) -> Optional[MultiLevelParkingLot]:
        """Current parking lot, or None if none has been created"""
        return self._parking_lot

    def exists(self) -> bool:
        return self._parking_lot is not None

    def teardown(self) -> None:
        """Tear down the parking lot and clear the reference"""
        with self._lock:
            parking_lot, self._parking_lot = self._parking_lot, None
        if parking_lot is not None:
            parking_lot.teardown()
            self._logger.info("Parking lot removed from repository")

    def _build(
        self,
        levels: Sequence[int],
        capacities: Sequence[int]
    ) -> MultiLevelParkingLot:
        provider: Callable[[], SlotAllocationStrategy] = self.strategy_factory.create
        return MultiLevelParkingLot(
            list(levels),
            list(capacities),
            strategy_provider=provider,
            case_sensitive_colors=self.case_sensitive_colors
        )
