"""
Shared fixtures for Route Matcher tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import LISBON, make_stop, make_user


@pytest.fixture
def requester():
    """One stop in Lisbon, 2024-06-01 to 2024-06-10."""
    return make_user(
        "me",
        [make_stop(LISBON, "2024-06-01", "2024-06-10", "Lisbon")],
        ["surfing", "climbing", "yoga"],
    )
