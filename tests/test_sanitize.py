"""Tests for ring sanitization."""
import math

import pytest

from polyprism.sanitize import DEFAULT_EPSILON, remove_duplicate_points, sanitize_ring


def _min_consecutive_distance(ring):
    n = len(ring)
    return min(
        math.hypot(ring[i][0] - ring[(i + 1) % n][0], ring[i][1] - ring[(i + 1) % n][1])
        for i in range(n)
    )


class TestRemoveDuplicatePoints:

    def test_drops_exact_consecutive_duplicate(self):
        ring = [(0.0, 0.0), (0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        remove_duplicate_points(ring)
        assert ring == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]

    def test_drops_point_within_epsilon(self):
        ring = [(0.0, 0.0), (1.0, 0.0), (1.0 + 5e-7, 0.0), (1.0, 1.0)]
        remove_duplicate_points(ring)
        assert ring == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]

    def test_keeps_point_just_beyond_epsilon(self):
        ring = [(0.0, 0.0), (1.0, 0.0), (1.0 + 2e-6, 0.0), (1.0, 1.0)]
        remove_duplicate_points(ring)
        assert len(ring) == 4

    def test_closing_duplicate_loses_only_trailing_point(self, square_ring):
        ring = list(square_ring) + [(0.0, 1e-7)]
        remove_duplicate_points(ring)
        assert ring == square_ring

    def test_mutates_in_place(self):
        ring = [(0.0, 0.0), (0.0, 0.0), (3.0, 0.0), (0.0, 3.0)]
        alias = ring
        remove_duplicate_points(ring)
        assert alias is ring
        assert len(alias) == 3

    def test_degenerate_ring_is_not_rejected(self):
        ring = [(0.0, 0.0), (0.0, 0.0)]
        remove_duplicate_points(ring)
        assert ring == [(0.0, 0.0)]

    def test_empty_and_single_point(self):
        empty = []
        remove_duplicate_points(empty)
        assert empty == []
        single = [(2.0, 3.0)]
        remove_duplicate_points(single)
        assert single == [(2.0, 3.0)]

    def test_cluster_collapses_to_first_point(self):
        ring = [(0.0, 0.0), (0.6, 0.0), (1.2, 0.0), (5.0, 0.0), (5.0, 5.0)]
        remove_duplicate_points(ring, epsilon=1.0)
        assert ring == [(0.0, 0.0), (5.0, 0.0), (5.0, 5.0)]

    def test_backtracking_point_does_not_leave_close_neighbours(self):
        ring = [(0.0, 0.0), (0.9, 0.0), (-0.2, 0.0), (0.0, 10.0), (-10.0, 5.0)]
        remove_duplicate_points(ring, epsilon=1.0)
        assert _min_consecutive_distance(ring) >= 1.0


class TestSanitizeRing:

    def test_returns_owned_copy(self, square_ring):
        raw = [list(p) for p in square_ring] + [[0.0, 0.0]]
        ring = sanitize_ring(raw)
        assert ring == square_ring
        assert len(raw) == 5

    def test_no_close_consecutive_points_after_sanitize(self):
        raw = [
            (0.0, 0.0), (0.0, 0.0), (5.0, 0.0), (5.0, 1e-8), (10.0, 0.0),
            (10.0, 10.0), (10.0, 10.0 + 1e-9), (0.0, 10.0), (1e-9, 0.0),
        ]
        ring = sanitize_ring(raw)
        assert _min_consecutive_distance(ring) >= DEFAULT_EPSILON
        assert len(ring) == 5

    def test_idempotent(self, l_shape_ring):
        raw = list(l_shape_ring) + [l_shape_ring[0], l_shape_ring[0]]
        once = sanitize_ring(raw)
        twice = sanitize_ring(once)
        assert once == twice == l_shape_ring

    def test_accepts_extra_coordinates(self):
        ring = sanitize_ring([(0, 0, 9), (1, 0, 9), (0, 1, 9)])
        assert ring == [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]

    def test_rejects_short_points(self):
        with pytest.raises(ValueError):
            sanitize_ring([(0.0,), (1.0, 0.0), (0.0, 1.0)])
