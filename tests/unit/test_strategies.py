#!/usr/bin/env python3
"""
Slot Allocation Strategy Unit Tests

Tests for the nearest-first and farthest-first policies and the factory.
"""

import random
import sys
import unittest
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from parkinglot.domain.strategies import (
    SlotAllocationStrategy,
    NearestFirstStrategy,
    FarthestFirstStrategy,
    SlotStrategyFactory
)


class TestNearestFirstStrategy(unittest.TestCase):
    """Unit tests for NearestFirstStrategy"""

    def setUp(self):
        self.strategy = NearestFirstStrategy()
        for slot in range(1, 6):
            self.strategy.add(slot)

    def test_hands_out_slots_in_ascending_order(self):
        """Test slots come out smallest first"""
        self.assertEqual([self.strategy.get_slot() for _ in range(5)], [1, 2, 3, 4, 5])

    def test_exhaustion_returns_none(self):
        """Test an empty strategy signals exhaustion with None"""
        for _ in range(5):
            self.strategy.get_slot()
        self.assertIsNone(self.strategy.get_slot())
        self.assertEqual(len(self.strategy), 0)

    def test_returned_slot_is_preferred_again(self):
        """Test a freed low slot is handed out before higher ones"""
        for _ in range(4):
            self.strategy.get_slot()
        self.strategy.add(2)
        self.assertEqual(self.strategy.get_slot(), 2)
        self.assertEqual(self.strategy.get_slot(), 5)

    def test_remove_slot_withdraws_from_free_set(self):
        """Test removed slots are skipped"""
        self.strategy.remove_slot(1)
        self.strategy.remove_slot(3)
        self.assertEqual(self.strategy.free_slots(), {2, 4, 5})
        self.assertEqual(self.strategy.get_slot(), 2)
        self.assertEqual(self.strategy.get_slot(), 4)

    def test_remove_then_add_makes_slot_selectable(self):
        """Test the add/remove interface is symmetric"""
        self.strategy.remove_slot(1)
        self.strategy.add(1)
        self.assertEqual(self.strategy.get_slot(), 1)
        self.assertEqual(self.strategy.get_slot(), 2)

    def test_remove_absent_slot_is_noop(self):
        """Test removing a slot that is not free changes nothing"""
        self.strategy.remove_slot(42)
        self.assertEqual(len(self.strategy), 5)

    def test_add_is_idempotent(self):
        """Test adding a free slot twice keeps one copy"""
        self.strategy.add(3)
        self.assertEqual(len(self.strategy), 5)
        handed_out = [self.strategy.get_slot() for _ in range(6)]
        self.assertEqual(handed_out, [1, 2, 3, 4, 5, None])

    def test_peek_does_not_consume(self):
        """Test peek reports the next slot without removing it"""
        self.strategy.remove_slot(1)
        self.assertEqual(self.strategy.peek(), 2)
        self.assertEqual(self.strategy.get_slot(), 2)

    def test_always_returns_minimum_of_free_set(self):
        """Test random add/remove/get sequences against a plain set"""
        rng = random.Random(7)
        strategy = NearestFirstStrategy()
        free = set()
        for _ in range(2000):
            op = rng.random()
            slot = rng.randint(1, 40)
            if op < 0.4:
                strategy.add(slot)
                free.add(slot)
            elif op < 0.6:
                strategy.remove_slot(slot)
                free.discard(slot)
            else:
                expected = min(free) if free else None
                self.assertEqual(strategy.get_slot(), expected)
                free.discard(expected)
            self.assertEqual(strategy.free_slots(), free)

    def test_strategy_name(self):
        """Test human-readable name"""
        self.assertEqual(self.strategy.get_strategy_name(), "NearestFirst")
        self.assertEqual(str(self.strategy), "NearestFirst Strategy")


class TestFarthestFirstStrategy(unittest.TestCase):
    """Unit tests for FarthestFirstStrategy"""

    def test_hands_out_slots_in_descending_order(self):
        """Test slots come out largest first"""
        strategy = FarthestFirstStrategy()
        for slot in range(1, 4):
            strategy.add(slot)
        self.assertEqual([strategy.get_slot() for _ in range(4)], [3, 2, 1, None])

    def test_returned_slot_is_reused(self):
        """Test a freed high slot is handed out first"""
        strategy = FarthestFirstStrategy()
        for slot in range(1, 4):
            strategy.add(slot)
        strategy.get_slot()
        strategy.get_slot()
        strategy.add(3)
        self.assertEqual(strategy.get_slot(), 3)
        self.assertEqual(strategy.get_slot(), 1)


class TestSlotStrategyFactory(unittest.TestCase):
    """Unit tests for SlotStrategyFactory"""

    def test_create_by_type(self):
        """Test known names map to their strategies"""
        self.assertIsInstance(
            SlotStrategyFactory.create_by_type("nearest_first"), NearestFirstStrategy
        )
        self.assertIsInstance(
            SlotStrategyFactory.create_by_type("farthest_first"), FarthestFirstStrategy
        )

    def test_unknown_type_rejected(self):
        """Test unknown names raise ValueError"""
        with self.assertRaises(ValueError):
            SlotStrategyFactory.create_by_type("round_robin")
        with self.assertRaises(ValueError):
            SlotStrategyFactory("round_robin")

    def test_create_returns_fresh_instances(self):
        """Test every level gets its own strategy object"""
        factory = SlotStrategyFactory()
        first, second = factory.create(), factory.create()
        self.assertIsInstance(first, SlotAllocationStrategy)
        self.assertIsNot(first, second)

    def test_available_types(self):
        self.assertEqual(
            SlotStrategyFactory.available_types(), ["farthest_first", "nearest_first"]
        )


if __name__ == "__main__":
    unittest.main()
