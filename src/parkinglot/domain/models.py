# File: src/parkinglot/domain/models.py
"""
Domain Models for the Parking Lot System

This module contains:
1. Value Objects: Vehicle, Car and SlotStatus (immutable, no identity)
2. Result sentinels returned by the slot registry
3. Domain Events: Events representing slot occupancy changes

Vehicles are identified by their registration number while parked; the
registry never mutates them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional
from datetime import datetime
import uuid


# ============================================================================
# REGISTRY RESULT SENTINELS
# ============================================================================

NOT_AVAILABLE = -1           # park: no free slot left on the level
VEHICLE_ALREADY_EXIST = -2   # park: registration number already parked
NOT_FOUND = -1               # reverse lookup: registration number not parked


# ============================================================================
# VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)
class Vehicle:
    """
    Value Object: A vehicle as seen by the parking lot
    Only the registration number and the color matter here
    """
    registration_no: str
    color: str

    def __post_init__(self):
        """Validate vehicle attributes after initialization"""
        if not isinstance(self.registration_no, str) or not self.registration_no.strip():
            raise ValueError("Vehicle registration number cannot be empty")

        if not isinstance(self.color, str) or not self.color.strip():
            raise ValueError("Vehicle color cannot be empty")

        object.__setattr__(self, 'registration_no', self.registration_no.strip())
        object.__setattr__(self, 'color', self.color.strip())

    @property
    def kind(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "kind": self.kind,
            "registration_no": self.registration_no,
            "color": self.color,
        }

    def __str__(self) -> str:
        return f"[registrationNo={self.registration_no}, color={self.color}]"


@dataclass(frozen=True)
class Car(Vehicle):
    """Value Object: The vehicle kind accepted by the parking service"""


@dataclass(frozen=True)
class SlotStatus:
    """
    Value Object: One occupied slot as reported by the status query
    """
    slot_number: int
    registration_no: str
    color: str

    def to_row(self) -> str:
        """Render as a tab separated status row"""
        return f"{self.slot_number}\t{self.registration_no}\t{self.color}"

    def __str__(self) -> str:
        return self.to_row()


# ============================================================================
# DOMAIN EVENTS
# ============================================================================

class DomainEvent(ABC):
    """
    Base class for all domain events
    Events represent something that happened in the domain
    """

    event_type = "domain.event"

    def __init__(self):
        self.event_id = str(uuid.uuid4())
        self.timestamp = datetime.now()
        self.version = "1.0"

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization"""
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__} at {self.timestamp}"


class VehicleParkedEvent(DomainEvent):
    """Event raised when a vehicle is parked"""

    event_type = "vehicle.parked"

    def __init__(
        self,
        level: int,
        slot_number: int,
        registration_no: str,
        color: str,
        timestamp: Optional[datetime] = None
    ):
        super().__init__()
        self.level = level
        self.slot_number = slot_number
        self.registration_no = registration_no
        self.color = color
        if timestamp:
            self.timestamp = timestamp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "data": {
                "level": self.level,
                "slot_number": self.slot_number,
                "registration_no": self.registration_no,
                "color": self.color
            }
        }


class VehicleLeftEvent(DomainEvent):
    """Event raised when a vehicle leaves its slot"""

    event_type = "vehicle.left"

    def __init__(
        self,
        level: int,
        slot_number: int,
        registration_no: str,
        timestamp: Optional[datetime] = None
    ):
        super().__init__()
        self.level = level
        self.slot_number = slot_number
        self.registration_no = registration_no
        if timestamp:
            self.timestamp = timestamp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "data": {
                "level": self.level,
                "slot_number": self.slot_number,
                "registration_no": self.registration_no
            }
        }
