# File: src/parkinglot/domain/aggregates.py
"""
Aggregate Roots for the Parking Lot System
Following Domain-Driven Design (DDD) Aggregate Pattern

Aggregates:
1. ParkingLevel - one level's occupancy and reverse lookup state
2. MultiLevelParkingLot - the level registry keyed by level number

Key Concepts:
- All modifications go through aggregate root methods
- The slot -> vehicle and registration -> slot maps are exact inverses
- The allocation strategy's free set is the complement of the occupied slots
- Domain events are raised for every park and leave
"""

from typing import Callable, Dict, List, Optional, Sequence
import logging

from .models import (
    Vehicle, SlotStatus, DomainEvent,
    VehicleParkedEvent, VehicleLeftEvent,
    NOT_AVAILABLE, VEHICLE_ALREADY_EXIST, NOT_FOUND
)
from .strategies import SlotAllocationStrategy, NearestFirstStrategy


class UnknownLevelError(LookupError):
    """Raised when a level number has no registry in the parking lot"""

    def __init__(self, level: int):
        super().__init__(f"Parking level {level} does not exist")
        self.level = level


# ============================================================================
# PARKING LEVEL (per level registry)
# ============================================================================

class ParkingLevel:
    """
    Aggregate Root: One parking level with a fixed number of slots
    Owns the occupancy maps and the allocation strategy for its slots
    """

    def __init__(
        self,
        level: int,
        capacity: int,
        strategy: Optional[SlotAllocationStrategy] = None,
        case_sensitive_colors: bool = False
    ):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"Capacity must be a positive integer, got: {capacity!r}")

        self._logger = logging.getLogger(self.__class__.__name__)
        self.level = level
        self._capacity = capacity
        self.case_sensitive_colors = case_sensitive_colors

        # Internal state
        self._occupied_by_slot: Dict[int, Vehicle] = {}     # slot -> vehicle
        self._slot_by_registration: Dict[str, int] = {}     # registration -> slot
        self._strategy = strategy if strategy is not None else NearestFirstStrategy()
        self._events: List[DomainEvent] = []
        self._torn_down = False

        for slot in range(1, capacity + 1):
            self._strategy.add(slot)

        self._logger.debug(
            f"Created level {level} with {capacity} slots ({self._strategy})"
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def strategy(self) -> SlotAllocationStrategy:
        return self._strategy

    # ========================================================================
    # PUBLIC BUSINESS METHODS
    # ========================================================================

    def park_vehicle(self, vehicle: Vehicle) -> int:
        """
        Park a vehicle in the nearest slot the strategy offers
        Returns: slot number, VEHICLE_ALREADY_EXIST or NOT_AVAILABLE
        """
        self._ensure_active()

        if vehicle.registration_no in self._slot_by_registration:
            self._logger.debug(f"Vehicle {vehicle.registration_no} is already parked")
            return VEHICLE_ALREADY_EXIST

        slot = self._strategy.get_slot()
        if slot is None:
            self._logger.debug(f"Level {self.level} is full")
            return NOT_AVAILABLE

        self._occupied_by_slot[slot] = vehicle
        self._slot_by_registration[vehicle.registration_no] = slot

        self._events.append(VehicleParkedEvent(
            level=self.level,
            slot_number=slot,
            registration_no=vehicle.registration_no,
            color=vehicle.color
        ))
        self._logger.debug(f"Vehicle {vehicle.registration_no} parked in slot {slot}")
        return slot

    def leave_slot(self, slot_number: int) -> bool:
        """
        Free the given slot
        Returns: True if a vehicle left, False if the slot was already empty
        """
        self._ensure_active()

        vehicle = self._occupied_by_slot.pop(slot_number, None)
        if vehicle is None:
            return False

        del self._slot_by_registration[vehicle.registration_no]
        self._strategy.add(slot_number)

        self._events.append(VehicleLeftEvent(
            level=self.level,
            slot_number=slot_number,
            registration_no=vehicle.registration_no
        ))
        self._logger.debug(f"Vehicle {vehicle.registration_no} left slot {slot_number}")
        return True

    # ========================================================================
    # QUERY METHODS (Read-only)
    # ========================================================================

    def occupied_slots(self) -> List[SlotStatus]:
        """Occupied slots in ascending slot order"""
        return [
            SlotStatus(slot, vehicle.registration_no, vehicle.color)
            for slot, vehicle in sorted(self._occupied_by_slot.items())
        ]

    def status(self) -> List[str]:
        """Tab separated status rows in ascending slot order"""
        return [status.to_row() for status in self.occupied_slots()]

    def available_slot_count(self) -> int:
        return self._capacity - len(self._occupied_by_slot)

    def occupied_slot_count(self) -> int:
        return len(self._occupied_by_slot)

    def registrations_by_color(self, color: str) -> List[str]:
        """Registration numbers of vehicles with the given color, by slot"""
        matches = self._color_matcher(color)
        return [
            vehicle.registration_no
            for _, vehicle in sorted(self._occupied_by_slot.items())
            if matches(vehicle.color)
        ]

    def slots_by_color(self, color: str) -> List[int]:
        """Slot numbers of vehicles with the given color, ascending"""
        matches = self._color_matcher(color)
        return [
            slot
            for slot, vehicle in sorted(self._occupied_by_slot.items())
            if matches(vehicle.color)
        ]

    def slot_for_registration(self, registration_no: str) -> int:
        """Slot of the given registration number, or NOT_FOUND"""
        return self._slot_by_registration.get(registration_no, NOT_FOUND)

    def vehicle_in_slot(self, slot_number: int) -> Optional[Vehicle]:
        return self._occupied_by_slot.get(slot_number)

    # ========================================================================
    # EVENTS, INVARIANTS AND LIFECYCLE
    # ========================================================================

    def clear_events(self) -> List[DomainEvent]:
        """Return and clear pending domain events"""
        events, self._events = self._events, []
        return events

    def validate_invariants(self) -> None:
        """Validate aggregate invariants"""
        # Invariant 1: the two maps are exact inverses
        if len(self._occupied_by_slot) != len(self._slot_by_registration):
            raise ValueError(
                f"Occupancy maps out of sync: {len(self._occupied_by_slot)} slots, "
                f"{len(self._slot_by_registration)} registrations"
            )
        for slot, vehicle in self._occupied_by_slot.items():
            if self._slot_by_registration.get(vehicle.registration_no) != slot:
                raise ValueError(
                    f"Vehicle {vehicle.registration_no} in slot {slot} "
                    f"is not mapped back to that slot"
                )

        # Invariant 2: free set is the complement of the occupied slots
        expected_free = set(range(1, self._capacity + 1)) - set(self._occupied_by_slot)
        if self._strategy.free_slots() != expected_free:
            raise ValueError(f"Free slot set mismatch on level {self.level}")

    def teardown(self) -> None:
        """Release all held state; safe to call more than once"""
        if self._torn_down:
            return
        for slot in self._occupied_by_slot:
            self._strategy.add(slot)
        self._occupied_by_slot.clear()
        self._slot_by_registration.clear()
        self._events.clear()
        self._torn_down = True
        self._logger.debug(f"Level {self.level} torn down")

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    # ========================================================================
    # INTERNAL HELPER METHODS
    # ========================================================================

    def _ensure_active(self) -> None:
        if self._torn_down:
            raise RuntimeError(f"Parking level {self.level} has been torn down")

    def _color_matcher(self, color: str) -> Callable[[str], bool]:
        if self.case_sensitive_colors:
            return lambda candidate: candidate == color
        wanted = color.casefold()
        return lambda candidate: candidate.casefold() == wanted

    def __str__(self) -> str:
        return (
            f"ParkingLevel {self.level}: "
            f"{self.occupied_slot_count()}/{self._capacity} occupied"
        )


# ============================================================================
# MULTI LEVEL PARKING LOT
# ============================================================================

class MultiLevelParkingLot:
    """
    Aggregate Root: All levels of the parking lot
    Pure delegation to the addressed ParkingLevel
    """

    def __init__(
        self,
        levels: Sequence[int],
        capacities: Sequence[int],
        strategy_provider: Optional[Callable[[], SlotAllocationStrategy]] = None,
        case_sensitive_colors: bool = False
    ):
        if len(levels) != len(capacities):
            raise ValueError(
                f"Levels and capacities must have the same length, "
                f"got {len(levels)} and {len(capacities)}"
            )
        if not levels:
            raise ValueError("At least one level is required")
        if len(set(levels)) != len(levels):
            raise ValueError(f"Duplicate level numbers: {list(levels)}")

        self._logger = logging.getLogger(self.__class__.__name__)
        provider = strategy_provider or NearestFirstStrategy

        self._levels: Dict[int, ParkingLevel] = {}
        for level, capacity in zip(levels, capacities):
            self._levels[level] = ParkingLevel(
                level,
                capacity,
                strategy=provider(),
                case_sensitive_colors=case_sensitive_colors
            )

        self._logger.info(
            f"Created parking lot with levels "
            f"{', '.join(f'{lvl}:{cap}' for lvl, cap in zip(levels, capacities))}"
        )

    @property
    def level_numbers(self) -> List[int]:
        return sorted(self._levels)

    def level(self, level: int) -> ParkingLevel:
        """Get the registry of a level; raises UnknownLevelError"""
        try:
            return self._levels[level]
        except KeyError:
            raise UnknownLevelError(level) from None

    def park(self, level: int, vehicle: Vehicle) -> int:
        return self.level(level).park_vehicle(vehicle)

    def leave(self, level: int, slot_number: int) -> bool:
        return self.level(level).leave_slot(slot_number)

    def status(self, level: int) -> List[str]:
        return self.level(level).status()

    def occupied_slots(self, level: int) -> List[SlotStatus]:
        return self.level(level).occupied_slots()

    def available_slot_count(self, level: int) -> int:
        return self.level(level).available_slot_count()

    def registrations_by_color(self, level: int, color: str) -> List[str]:
        return self.level(level).registrations_by_color(color)

    def slots_by_color(self, level: int, color: str) -> List[int]:
        return self.level(level).slots_by_color(color)

    def slot_for_registration(self, level: int, registration_no: str) -> int:
        return self.level(level).slot_for_registration(registration_no)

    def collect_events(self) -> List[DomainEvent]:
        """Drain pending events from every level, in level order"""
        events: List[DomainEvent] = []
        for level in self.level_numbers:
            events.extend(self._levels[level].clear_events())
        return events

    def teardown(self) -> None:
        """Tear down every level and forget them"""
        for registry in self._levels.values():
            registry.teardown()
        self._levels.clear()
        self._logger.info("Parking lot torn down")

    def __str__(self) -> str:
        return f"MultiLevelParkingLot(levels={self.level_numbers})"
