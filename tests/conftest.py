"""
Shared test fixtures for polygon triangulation and extrusion tests.
"""
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def square_ring():
    """10x10 square, counter-clockwise in (x, z)."""
    return [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


@pytest.fixture
def square_hole():
    """2x2 hole centred in the square."""
    return [(4.0, 4.0), (6.0, 4.0), (6.0, 6.0), (4.0, 6.0)]


@pytest.fixture
def l_shape_ring():
    """Concave L outline, area 64."""
    return [
        (0.0, 0.0),
        (10.0, 0.0),
        (10.0, 4.0),
        (4.0, 4.0),
        (4.0, 10.0),
        (0.0, 10.0),
    ]


@pytest.fixture
def big_square_ring():
    return [(0.0, 0.0), (20.0, 0.0), (20.0, 20.0), (0.0, 20.0)]


@pytest.fixture
def c_shape_hole():
    """Concave C hole (area 64) whose vertex mean falls in its mouth."""
    return [
        (4.0, 4.0),
        (16.0, 4.0),
        (16.0, 6.0),
        (6.0, 6.0),
        (6.0, 14.0),
        (16.0, 14.0),
        (16.0, 16.0),
        (4.0, 16.0),
    ]


@pytest.fixture
def hexagon_ring():
    import math

    return [
        (5.0 * math.cos(math.pi * k / 3.0), 5.0 * math.sin(math.pi * k / 3.0))
        for k in range(6)
    ]
