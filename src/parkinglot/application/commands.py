# File: src/parkinglot/application/commands.py
"""
Command Pattern Implementation for the Parking Lot System

Each input line ("park KA-01-HH-1234 White") becomes a Command object that
calls exactly one ParkingService operation. The CommandFactory knows the
keyword of every command and how many parameters it takes; the
CommandProcessor validates lines, executes them and keeps going when one
fails.

Command keywords:
    create_parking_lot {capacity}
    park {registration_number} {color}
    leave {slot_number}
    status
    registration_numbers_for_cars_with_color {color}
    slot_numbers_for_cars_with_color {color}
    slot_number_for_registration_number {registration_number}
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Type
import logging

from .parking_service import (
    ParkingService, ParkingServiceError, InvalidValueError, ErrorCode
)


# ============================================================================
# COMMAND INTERFACES AND BASE CLASSES
# ============================================================================

class Command(ABC):
    """
    Abstract base class for all commands

    A command holds the raw string arguments of one input line and knows
    which service operation they map to.
    """

    keyword: str = ""
    parameter_count: int = 0

    def __init__(self, args: Sequence[str]):
        if len(args) != self.parameter_count:
            raise ValueError(
                f"{self.keyword} takes {self.parameter_count} parameter(s), got {len(args)}"
            )
        self.args = list(args)
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def execute(self, service: ParkingService, level: int) -> Any:
        """Execute the command on the given level"""
        pass

    @staticmethod
    def _parse_int(name: str, raw: str) -> int:
        try:
            return int(raw)
        except ValueError:
            raise InvalidValueError(name) from None

    def get_description(self) -> str:
        """Get human-readable command description"""
        return " ".join([self.keyword] + self.args)

    def __str__(self) -> str:
        return self.get_description()


class CreateParkingLotCommand(Command):
    keyword = "create_parking_lot"
    parameter_count = 1

    def execute(self, service: ParkingService, level: int) -> None:
        capacity = self._parse_int("capacity", self.args[0])
        return service.create_parking_lot(level, capacity)


class ParkCommand(Command):
    keyword = "park"
    parameter_count = 2

    def execute(self, service: ParkingService, level: int):
        registration_no, color = self.args
        return service.park(level, registration_no, color)


class LeaveCommand(Command):
    keyword = "leave"
    parameter_count = 1

    def execute(self, service: ParkingService, level: int) -> bool:
        slot_number = self._parse_int("slot_number", self.args[0])
        return service.unpark(level, slot_number)


class StatusCommand(Command):
    keyword = "status"
    parameter_count = 0

    def execute(self, service: ParkingService, level: int) -> List[str]:
        return service.get_status(level)


class RegistrationNumbersForColorCommand(Command):
    keyword = "registration_numbers_for_cars_with_color"
    parameter_count = 1

    def execute(self, service: ParkingService, level: int) -> List[str]:
        return service.get_reg_number_for_color(level, self.args[0])


class SlotNumbersForColorCommand(Command):
    keyword = "slot_numbers_for_cars_with_color"
    parameter_count = 1

    def execute(self, service: ParkingService, level: int) -> List[int]:
        return service.get_slot_numbers_from_color(level, self.args[0])


class SlotNumberForRegistrationCommand(Command):
    keyword = "slot_number_for_registration_number"
    parameter_count = 1

    def execute(self, service: ParkingService, level: int) -> int:
        return service.get_slot_no_from_registration_no(level, self.args[0])


# ============================================================================
# COMMAND FACTORY
# ============================================================================

class CommandFactory:
    """Factory for creating commands from input lines"""

    command_classes: Dict[str, Type[Command]] = {
        command_class.keyword: command_class
        for command_class in (
            CreateParkingLotCommand,
            ParkCommand,
            LeaveCommand,
            StatusCommand,
            RegistrationNumbersForColorCommand,
            SlotNumbersForColorCommand,
            SlotNumberForRegistrationCommand,
        )
    }

    @classmethod
    def register(cls, command_class: Type[Command]) -> None:
        """Add (or replace) a command keyword"""
        cls.command_classes[command_class.keyword] = command_class

    @classmethod
    def parameter_map(cls) -> Dict[str, int]:
        """Keyword -> expected parameter count"""
        return {
            keyword: command_class.parameter_count
            for keyword, command_class in cls.command_classes.items()
        }

    @staticmethod
    def tokenize(line: str) -> List[str]:
        return line.split()

    @classmethod
    def is_valid(cls, line: str) -> bool:
        """Known keyword and exactly the expected number of parameters"""
        tokens = cls.tokenize(line)
        if not tokens:
            return False
        command_class = cls.command_classes.get(tokens[0])
        if command_class is None:
            return False
        return len(tokens) - 1 == command_class.parameter_count

    @classmethod
    def create_command(cls, line: str) -> Optional[Command]:
        """
        Create a command instance from an input line

        Returns: Command instance or None if the line is not a valid command
        """
        if not cls.is_valid(line):
            return None
        keyword, *args = cls.tokenize(line)
        return cls.command_classes[keyword](args)


# Keyword -> parameter count of the built-in commands
COMMAND_PARAMETERS: Dict[str, int] = CommandFactory.parameter_map()


# ============================================================================
# COMMAND PROCESSOR
# ============================================================================

@dataclass
class CommandResult:
    """Outcome of one processed input line"""
    line: str
    success: bool
    value: Any = None
    error: Optional[str] = None


class CommandProcessor:
    """
    Validates and executes input lines against a parking service

    Service errors are reported through the reporter and logged; processing
    of later lines continues.
    """

    def __init__(
        self,
        service: ParkingService,
        level: int = 1,
        reporter: Optional[Callable[[str], None]] = None
    ):
        self.service = service
        self.level = level
        self._reporter = reporter or print
        self.logger = logging.getLogger(self.__class__.__name__)

    def validate(self, line: str) -> bool:
        return CommandFactory.is_valid(line)

    def execute(self, line: str) -> Any:
        """
        Execute a validated line

        Raises: ParkingServiceError from the service, or INVALID_REQUEST
        if the line is not a valid command
        """
        command = CommandFactory.create_command(line.strip())
        if command is None:
            raise ParkingServiceError(ErrorCode.INVALID_REQUEST)
        self.logger.debug(f"Executing command: {command.get_description()}")
        return command.execute(self.service, self.level)

    def process_line(self, line: str) -> CommandResult:
        """Validate and execute one line, reporting any failure"""
        line = line.strip()
        if not self.validate(line):
            self.logger.warning(f"Invalid command: {line!r}")
            return CommandResult(line, False, error=ErrorCode.INVALID_REQUEST.value)

        try:
            value = self.execute(line)
        except ParkingServiceError as e:
            self.logger.info(f"Command failed: {line!r}: {e}")
            self._reporter(str(e))
            return CommandResult(line, False, error=str(e))

        return CommandResult(line, True, value=value)

    def process_lines(self, lines: Sequence[str]) -> List[CommandResult]:
        """Batch processing; invalid lines are reported with their line number"""
        results = []
        for line_no, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                continue
            if not self.validate(line):
                self._reporter(f"Incorrect Command Found at line: {line_no} ,Input: {line}")
                results.append(CommandResult(line, False, error=ErrorCode.INVALID_REQUEST.value))
                continue
            results.append(self.process_line(line))
        return results

    def process_file(self, path: str) -> List[CommandResult]:
        """Process every line of a command file"""
        try:
            with open(path, "r", encoding="utf-8") as f:
                lines = f.readlines()
        except OSError as e:
            self.logger.error(f"Cannot read command file {path}: {e}")
            raise ParkingServiceError(ErrorCode.INVALID_FILE) from e

        self.logger.info(f"Processing {len(lines)} line(s) from {path}")
        return self.process_lines(lines)
