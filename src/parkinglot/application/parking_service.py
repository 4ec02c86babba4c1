# File: src/parkinglot/application/parking_service.py
"""
Parking Lot Application Service

This module implements the application service layer: the single entry
point callers use to create the parking lot, park and unpark vehicles and
query occupancy.

Responsibilities:
1. Enforce the lot lifecycle (create once, use, clean up)
2. Serialize mutations against queries with one reader/writer lock
3. Translate registry results into human-readable reports
4. Surface every failure as exactly one ParkingServiceError

The existence check and the work it guards always run under the same lock
hold, so a lot cannot be created or removed in between.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar
from contextlib import contextmanager
import logging

from ..config import ParkingConfig
from ..domain.models import (
    Car, DomainEvent,
    NOT_AVAILABLE, VEHICLE_ALREADY_EXIST, NOT_FOUND
)
from ..domain.aggregates import MultiLevelParkingLot, UnknownLevelError
from ..domain.strategies import SlotStrategyFactory
from ..infrastructure.locks import ReadWriteLock, LockTimeoutError
from ..infrastructure.messaging import EventBus, LoggingEventHandler, ALL_EVENTS
from ..infrastructure.repositories import ParkingLotRepository


T = TypeVar("T")

STATUS_HEADER = "Slot No.\tRegistration No.\tColor"


# ============================================================================
# ERROR CODES AND EXCEPTIONS
# ============================================================================

class ErrorCode(Enum):
    """User facing error messages"""
    PARKING_ALREADY_EXIST = "Sorry Parking Already Created, It CAN NOT be again recreated."
    PARKING_NOT_EXIST_ERROR = "Sorry, Car Parking Does not Exist"
    PARKING_LEVEL_NOT_EXIST = "Sorry, Parking Level {level} Does not Exist"
    INVALID_VALUE = "{variable} value is incorrect"
    INVALID_FILE = "Invalid File"
    PROCESSING_ERROR = "Processing Error"
    INVALID_REQUEST = "Invalid Request"

    def format(self, **params: Any) -> str:
        return self.value.format(**params) if params else self.value


class ParkingServiceError(Exception):
    """Base exception for parking service errors"""

    def __init__(self, error_code: ErrorCode, message: Optional[str] = None, **params: Any):
        super().__init__(message or error_code.format(**params))
        self.error_code = error_code
        self.params = params


class ParkingAlreadyExistsError(ParkingServiceError):
    """Exception when a parking lot is created while one exists"""

    def __init__(self):
        super().__init__(ErrorCode.PARKING_ALREADY_EXIST)


class ParkingNotExistError(ParkingServiceError):
    """Exception when the parking lot (or the addressed level) does not exist"""

    def __init__(self, level: Optional[int] = None):
        if level is None:
            super().__init__(ErrorCode.PARKING_NOT_EXIST_ERROR)
        else:
            super().__init__(ErrorCode.PARKING_LEVEL_NOT_EXIST, level=level)


class ProcessingError(ParkingServiceError):
    """Exception wrapping an unexpected fault; the cause is always chained"""

    def __init__(self, cause: BaseException):
        super().__init__(ErrorCode.PROCESSING_ERROR, f"{ErrorCode.PROCESSING_ERROR.value}: {cause}")
        self.__cause__ = cause


class InvalidValueError(ParkingServiceError):
    """Exception when a named parameter fails validation"""

    def __init__(self, variable: str):
        super().__init__(ErrorCode.INVALID_VALUE, variable=variable)
        self.variable = variable


# ============================================================================
# DATA TRANSFER OBJECTS (DTOs)
# ============================================================================

class AllocationStatus(Enum):
    ALLOCATED = "allocated"
    LOT_FULL = "lot_full"
    ALREADY_PARKED = "already_parked"


@dataclass
class ParkingAllocationDTO:
    """DTO for parking allocation results"""
    status: AllocationStatus
    slot_number: Optional[int] = None
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is AllocationStatus.ALLOCATED

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["success"] = self.success
        return data


# ============================================================================
# MAIN PARKING SERVICE
# ============================================================================

class ParkingService:
    """
    Main application service for the parking lot

    States:
    - UNINITIALIZED: the repository holds no parking lot
    - ACTIVE: create_parking_lot() succeeded and do_cleanup() was not called

    Queries take the shared lock; create, park, unpark and cleanup take the
    exclusive lock.
    """

    def __init__(
        self,
        repository: Optional[ParkingLotRepository] = None,
        event_bus: Optional[EventBus] = None,
        reporter: Optional[Callable[[str], None]] = None,
        config: Optional[ParkingConfig] = None
    ):
        """
        Initialize the parking service

        Args:
            repository: Owner of the parking lot. Built from config if omitted.
            event_bus: Receives domain events after each park/leave.
            reporter: Sink for human-readable results (default: print).
            config: Runtime settings (strategy, color policy, lock timeout).
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config = config or ParkingConfig()

        self.repository = repository or ParkingLotRepository(
            strategy_factory=SlotStrategyFactory(self.config.allocation_strategy),
            case_sensitive_colors=self.config.case_sensitive_colors
        )
        if event_bus is None:
            event_bus = EventBus()
            event_bus.subscribe(ALL_EVENTS, LoggingEventHandler())
        self.event_bus = event_bus
        self._reporter = reporter or print
        self._lock = ReadWriteLock()

        self.logger.debug("ParkingService initialized")

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    def create_parking_lot(self, level: int, capacity: int) -> None:
        """Create a single level parking lot; fails if one already exists"""
        with self._locked(exclusive=True):
            if self.repository.exists():
                raise ParkingAlreadyExistsError()
            self._validate_int("level", level, positive=False)
            self._validate_int("capacity", capacity)
            try:
                self.repository.get_or_create([level], [capacity])
            except ValueError as e:
                raise ProcessingError(e)
            self.logger.info(f"Created parking lot with {capacity} slots on level {level}")
            self._report(f"Created parking lot with {capacity} slots")

    def do_cleanup(self) -> None:
        """Remove the parking lot; no-op if none exists"""
        with self._locked(exclusive=True):
            if self.repository.exists():
                self.repository.teardown()
                self.logger.info("Parking lot cleaned up")

    def is_active(self) -> bool:
        with self._locked(exclusive=False):
            return self.repository.exists()

    # ========================================================================
    # COMMANDS (write lock)
    # ========================================================================

    def park(self, level: int, registration_no: str, color: str) -> ParkingAllocationDTO:
        """
        Park a vehicle on the given level

        Returns: ParkingAllocationDTO with the allocated slot, or the reason
        no slot was allocated
        """
        events: List[DomainEvent] = []
        try:
            with self._locked(exclusive=True):
                lot = self._require_parking_lot()
                self._validate_text("registration_number", registration_no)
                self._validate_text("color", color)

                result = self._run(level, lambda: lot.park(level, Car(registration_no, color)))
                events = lot.collect_events()

                if result == NOT_AVAILABLE:
                    allocation = ParkingAllocationDTO(
                        AllocationStatus.LOT_FULL, message="Sorry, parking lot is full"
                    )
                elif result == VEHICLE_ALREADY_EXIST:
                    allocation = ParkingAllocationDTO(
                        AllocationStatus.ALREADY_PARKED, message="Sorry, vehicle is already parked."
                    )
                else:
                    allocation = ParkingAllocationDTO(
                        AllocationStatus.ALLOCATED,
                        slot_number=result,
                        message=f"Allocated slot number: {result}"
                    )
                self._report(allocation.message)
        finally:
            # Events match the committed state even if reporting failed
            self.event_bus.publish_all(events)
        return allocation

    def unpark(self, level: int, slot_number: int) -> bool:
        """
        Free a slot on the given level

        Returns: True if a vehicle left, False if the slot was already empty
        """
        events: List[DomainEvent] = []
        try:
            with self._locked(exclusive=True):
                lot = self._require_parking_lot()
                self._validate_int("slot_number", slot_number)
                freed = self._run(level, lambda: lot.leave(level, slot_number))
                events = lot.collect_events()

                if freed:
                    self._report(f"Slot number {slot_number} is free")
                else:
                    self._report("Slot number is Empty Already.")
        finally:
            self.event_bus.publish_all(events)
        return freed

    # ========================================================================
    # QUERIES (read lock)
    # ========================================================================

    def get_status(self, level: int) -> List[str]:
        """Tab separated rows of the occupied slots, ascending by slot"""
        with self._locked(exclusive=False):
            lot = self._require_parking_lot()
            rows = self._run(level, lambda: lot.status(level))

            self._report(STATUS_HEADER)
            if not rows:
                self._report("Sorry, parking lot is empty.")
            for row in rows:
                self._report(row)
            return rows

    def get_available_slots_count(self, level: int) -> int:
        with self._locked(exclusive=False):
            lot = self._require_parking_lot()
            return self._run(level, lambda: lot.available_slot_count(level))

    def get_reg_number_for_color(self, level: int, color: str) -> List[str]:
        """Registration numbers of the vehicles with the given color"""
        with self._locked(exclusive=False):
            lot = self._require_parking_lot()
            self._validate_text("color", color)
            registrations = self._run(level, lambda: lot.registrations_by_color(level, color))
            self._report_list(registrations)
            return registrations

    def get_slot_numbers_from_color(self, level: int, color: str) -> List[int]:
        """Slot numbers of the vehicles with the given color"""
        with self._locked(exclusive=False):
            lot = self._require_parking_lot()
            self._validate_text("color", color)
            slots = self._run(level, lambda: lot.slots_by_color(level, color))
            self._report_list(slots)
            return slots

    def get_slot_no_from_registration_no(self, level: int, registration_no: str) -> int:
        """Slot of the given registration number, or NOT_FOUND"""
        with self._locked(exclusive=False):
            lot = self._require_parking_lot()
            self._validate_text("registration_number", registration_no)
            slot = self._run(level, lambda: lot.slot_for_registration(level, registration_no))
            if slot == NOT_FOUND:
                self._report("Not Found")
            else:
                self._report(str(slot))
            return slot

    # ========================================================================
    # INTERNAL HELPER METHODS
    # ========================================================================

    @contextmanager
    def _locked(self, exclusive: bool) -> Iterator[None]:
        """Hold the shared or exclusive lock; a timeout becomes ProcessingError"""
        timeout = self.config.lock_timeout_seconds
        acquired = (
            self._lock.acquire_write(timeout) if exclusive
            else self._lock.acquire_read(timeout)
        )
        if not acquired:
            kind = "write" if exclusive else "read"
            self.logger.warning(f"Timed out waiting {timeout}s for the {kind} lock")
            raise ProcessingError(LockTimeoutError(f"Could not acquire {kind} lock within {timeout}s"))
        try:
            yield
        finally:
            if exclusive:
                self._lock.release_write()
            else:
                self._lock.release_read()

    def _require_parking_lot(self) -> MultiLevelParkingLot:
        lot = self.repository.get()
        if lot is None:
            raise ParkingNotExistError()
        return lot

    def _run(self, level: int, operation: Callable[[], T]) -> T:
        """Run a registry call, translating its failures to service errors"""
        try:
            return operation()
        except UnknownLevelError:
            raise ParkingNotExistError(level) from None
        except Exception as e:
            self.logger.error(f"Error processing request on level {level}: {e}", exc_info=True)
            raise ProcessingError(e)

    def _report(self, message: str) -> None:
        """Send a message to the reporter; a failing reporter becomes ProcessingError"""
        self.logger.debug(message)
        try:
            self._reporter(message)
        except Exception as e:
            self.logger.error(f"Reporter failed on {message!r}: {e}", exc_info=True)
            raise ProcessingError(e)

    def _report_list(self, values: List[Any]) -> None:
        if values:
            self._report(",".join(str(value) for value in values))
        else:
            self._report("Not Found")

    @staticmethod
    def _validate_int(name: str, value: Any, positive: bool = True) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidValueError(name)
        if positive and value <= 0:
            raise InvalidValueError(name)

    @staticmethod
    def _validate_text(name: str, value: Any) -> None:
        if not isinstance(value, str) or not value.strip():
            raise InvalidValueError(name)


# ============================================================================
# FACTORY
# ============================================================================

class ParkingServiceFactory:
    """Factory for creating parking service instances"""

    @staticmethod
    def create_default_service() -> ParkingService:
        return ParkingService()

    @staticmethod
    def create_service_with_config(
        config: ParkingConfig,
        reporter: Optional[Callable[[str], None]] = None
    ) -> ParkingService:
        return ParkingService(config=config, reporter=reporter)
