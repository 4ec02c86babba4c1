"""
Integration Tests Package for the Parking Lot System

These tests drive the real service stack (service, repository, level
registry, strategy, lock and event bus) with no mocks.

Integration tests focus on:
1. Concurrent callers against one parking service
2. Batch command files end to end
"""

import sys
from pathlib import Path

# Add the src directory to Python path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))


class IntegrationTestConfig:
    """Configuration for integration tests"""

    WORKER_THREADS = 16
    OPERATIONS_PER_WORKER = 200

    # Seconds a worker thread may take before the test fails
    JOIN_TIMEOUT = 30.0

    SAMPLE_COLORS = ["White", "Black", "Red", "Blue"]
