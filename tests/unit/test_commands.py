#!/usr/bin/env python3
"""
Command Pattern Unit Tests

Tests for command parsing, the CommandFactory and the CommandProcessor.
"""

import os
import sys
import tempfile
import unittest
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from parkinglot.application.commands import (
    Command, CommandFactory, CommandProcessor, COMMAND_PARAMETERS,
    CreateParkingLotCommand, ParkCommand, LeaveCommand, StatusCommand,
    RegistrationNumbersForColorCommand, SlotNumbersForColorCommand,
    SlotNumberForRegistrationCommand
)
from parkinglot.application.parking_service import (
    ParkingService, ParkingServiceError, ErrorCode, InvalidValueError
)
from parkinglot.infrastructure.messaging import EventBus


class TestCommandFactory(unittest.TestCase):
    """Unit tests for CommandFactory"""

    def test_parameter_map(self):
        self.assertEqual(COMMAND_PARAMETERS, {
            "create_parking_lot": 1,
            "park": 2,
            "leave": 1,
            "status": 0,
            "registration_numbers_for_cars_with_color": 1,
            "slot_numbers_for_cars_with_color": 1,
            "slot_number_for_registration_number": 1,
        })

    def test_is_valid(self):
        """Test keyword and parameter count are both checked"""
        self.assertTrue(CommandFactory.is_valid("park KA-01-HH-1234 White"))
        self.assertTrue(CommandFactory.is_valid("  status  "))
        self.assertFalse(CommandFactory.is_valid("park KA-01-HH-1234"))
        self.assertFalse(CommandFactory.is_valid("status now"))
        self.assertFalse(CommandFactory.is_valid("fly away"))
        self.assertFalse(CommandFactory.is_valid(""))

    def test_create_command(self):
        expected = {
            "create_parking_lot 6": CreateParkingLotCommand,
            "park A White": ParkCommand,
            "leave 4": LeaveCommand,
            "status": StatusCommand,
            "registration_numbers_for_cars_with_color White": RegistrationNumbersForColorCommand,
            "slot_numbers_for_cars_with_color White": SlotNumbersForColorCommand,
            "slot_number_for_registration_number A": SlotNumberForRegistrationCommand,
        }
        for line, command_class in expected.items():
            command = CommandFactory.create_command(line)
            self.assertIsInstance(command, command_class)
            self.assertEqual(command.get_description(), line)
        self.assertIsNone(CommandFactory.create_command("leave"))

    def test_wrong_argument_count_rejected_by_command(self):
        with self.assertRaises(ValueError):
            ParkCommand(["A"])

    def test_register_custom_command(self):
        class PingCommand(Command):
            keyword = "ping"
            parameter_count = 0

            def execute(self, service, level):
                return "pong"

        saved = dict(CommandFactory.command_classes)
        try:
            CommandFactory.register(PingCommand)
            self.assertTrue(CommandFactory.is_valid("ping"))
            self.assertEqual(CommandFactory.create_command("ping").execute(None, 1), "pong")
        finally:
            CommandFactory.command_classes = saved
        self.assertFalse(CommandFactory.is_valid("ping"))


class TestCommandProcessor(unittest.TestCase):
    """Unit tests for CommandProcessor"""

    def setUp(self):
        self.messages = []
        self.service = ParkingService(event_bus=EventBus(), reporter=self.messages.append)
        self.processor = CommandProcessor(self.service, level=1, reporter=self.messages.append)

    def tearDown(self):
        self.service.do_cleanup()

    def test_execute_returns_service_result(self):
        self.processor.execute("create_parking_lot 3")
        allocation = self.processor.execute("park A White")
        self.assertEqual(allocation.slot_number, 1)
        self.assertEqual(self.processor.execute("slot_number_for_registration_number A"), 1)
        self.assertEqual(self.processor.execute("status"), ["1\tA\tWhite"])

    def test_execute_invalid_line(self):
        with self.assertRaises(ParkingServiceError) as ctx:
            self.processor.execute("park")
        self.assertEqual(ctx.exception.error_code, ErrorCode.INVALID_REQUEST)

    def test_non_numeric_argument(self):
        with self.assertRaises(InvalidValueError) as ctx:
            self.processor.execute("create_parking_lot six")
        self.assertEqual(str(ctx.exception), "capacity value is incorrect")

    def test_process_line_reports_service_errors(self):
        """Test failures are reported and processing can continue"""
        result = self.processor.process_line("status")
        self.assertFalse(result.success)
        self.assertEqual(result.error, ErrorCode.PARKING_NOT_EXIST_ERROR.value)
        self.assertEqual(self.messages, ["Sorry, Car Parking Does not Exist"])

        self.assertTrue(self.processor.process_line("create_parking_lot 2").success)

    def test_process_lines_reports_incorrect_commands(self):
        results = self.processor.process_lines([
            "create_parking_lot 2\n",
            "\n",
            "park A White\n",
            "jump B\n",
            "park B Black\n",
        ])
        self.assertEqual(len(results), 4)
        self.assertEqual([r.success for r in results], [True, True, False, True])
        self.assertEqual(self.messages, [
            "Created parking lot with 2 slots",
            "Allocated slot number: 1",
            "Incorrect Command Found at line: 4 ,Input: jump B",
            "Allocated slot number: 2",
        ])

    def test_process_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False) as f:
            f.write("create_parking_lot 6\npark A White\nleave 1\nleave 1\n")
        self.addCleanup(os.unlink, f.name)

        results = self.processor.process_file(f.name)
        self.assertTrue(all(r.success for r in results))
        self.assertEqual(self.messages[-2:], ["Slot number 1 is free", "Slot number is Empty Already."])

    def test_process_missing_file(self):
        with self.assertRaises(ParkingServiceError) as ctx:
            self.processor.process_file("/nonexistent/commands.txt")
        self.assertEqual(ctx.exception.error_code, ErrorCode.INVALID_FILE)
        self.assertEqual(str(ctx.exception), "Invalid File")


if __name__ == "__main__":
    unittest.main()
