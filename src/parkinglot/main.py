# File: src/parkinglot/main.py
"""
Main application entry point for the Parking Lot System

Usage:
    parkinglot                  interactive mode, type 'exit' to quit
    parkinglot <input_file>     batch mode, one command per line
"""

from typing import List, Optional, TextIO
import argparse
import logging
import os
import sys

from .config import ParkingConfig, load_config
from .application.commands import CommandProcessor
from .application.parking_service import ParkingService, ParkingServiceError


BANNER = "\n".join([
    "=" * 67,
    "=" * 19 + "        PARKING LOT        " + "=" * 21,
    "=" * 67,
])

USAGE = "\n".join([
    "--------------Please Enter one of the below commands. {variable} to be replaced -----------------------",
    "A) For creating parking lot of size n               ---> create_parking_lot {capacity}",
    "B) To park a car                                    ---> park <<car_number>> {car_clour}",
    "C) Remove(Unpark) car from parking                  ---> leave {slot_number}",
    "D) Print status of parking slot                     ---> status",
    "E) Get cars registration no for the given car color ---> registration_numbers_for_cars_with_color {car_color}",
    "F) Get slot numbers for the given car color         ---> slot_numbers_for_cars_with_color {car_color}",
    "G) Get slot number for the given car number         ---> slot_number_for_registration_number {car_number}",
])


def setup_logging(config: ParkingConfig) -> logging.Logger:
    """Setup application logging configuration"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if config.log_file:
        log_dir = os.path.dirname(config.log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )
    return logging.getLogger(__name__)


def print_usage(out: Optional[TextIO] = None) -> None:
    print(USAGE, file=out or sys.stdout)


def interactive_mode(processor: CommandProcessor, stdin: Optional[TextIO] = None) -> None:
    """Read commands until 'exit' or end of input"""
    stdin = stdin or sys.stdin
    print("Please Enter 'exit' to end Execution")
    print("Input:")
    for raw in stdin:
        line = raw.strip()
        if line.lower() == "exit":
            break
        if not line:
            continue
        if processor.validate(line):
            processor.process_line(line)
        else:
            print_usage()


def file_mode(processor: CommandProcessor, path: str) -> None:
    processor.process_file(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parkinglot",
        description="Multi-level parking lot slot allocation"
    )
    parser.add_argument(
        "input_file", nargs="?",
        help="file with one command per line; interactive mode if omitted"
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="override the configured log level"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    if args.log_level:
        config.log_level = args.log_level

    logger = setup_logging(config)
    logger.info("Starting parking lot application")

    service = ParkingService(config=config)
    processor = CommandProcessor(service, level=config.default_level)

    print(BANNER)
    print_usage()

    try:
        if args.input_file:
            file_mode(processor, args.input_file)
        else:
            interactive_mode(processor)
    except ParkingServiceError as e:
        logger.error(f"Aborted: {e}")
        print(str(e), file=sys.stderr)
        return 1
    finally:
        service.do_cleanup()

    return 0


if __name__ == "__main__":
    sys.exit(main())
