import numpy as np
import pytest

from graph_layout import forces


@pytest.fixture
def points():
    return np.random.default_rng(3).uniform(-1, 1, size=(6, 5))


def test_repulsion_is_antisymmetric():
    a = np.array([0.1, 0.2, -0.3, 0.0])
    b = np.array([0.4, -0.1, 0.2, 0.5])
    step_a = forces.repulsion_step(a, b, 2.0, 1.0, 1e-3)
    step_b = forces.repulsion_step(b, a, 2.0, 1.0, 1e-3)
    np.testing.assert_allclose(step_a, -step_b)
    # pushed apart
    assert np.linalg.norm((a + step_a) - (b + step_b)) > np.linalg.norm(a - b)


def test_repulsion_capped_by_strength():
    a = np.zeros(3)
    b = np.array([0.5, 0.0, 0.0])
    step = forces.repulsion_step(a, b, 10.0, 0.2, 1e-3)
    assert np.linalg.norm(step) == pytest.approx(0.1)


def test_repulsion_ignores_distant_pairs():
    step = forces.repulsion_step(np.zeros(3), np.array([3.0, 0.0, 0.0]), 2.0, 1.0, 1e-3)
    assert not step.any()


def test_coincident_points_do_not_divide_by_zero():
    step = forces.repulsion_step(np.ones(3), np.ones(3), 2.0, 1.0, 1e-3)
    assert np.all(np.isfinite(step))


def test_spring_is_antisymmetric_and_restores_length():
    a = np.array([0.0, 0.0, 0.0])
    b = np.array([3.0, 0.0, 0.0])
    step_a = forces.spring_step(a, b, 1.0, 1.0, 1e-3)
    step_b = forces.spring_step(b, a, 1.0, 1.0, 1e-3)
    np.testing.assert_allclose(step_a, -step_b)
    # full strength closes the gap to the rest length in one step
    assert np.linalg.norm((a + step_a) - (b + step_b)) == pytest.approx(1.0)


def test_self_loop_contributes_nothing(points):
    before = points.copy()
    forces.apply_springs(points, 5, [(2, 2)], 1.0, 1.0, 1e-3)
    forces.apply_hierarchy(points, [(2, 2)], 1.0, 0.5)
    np.testing.assert_array_equal(points, before)
    batched = before.copy()
    forces.batched_springs(batched, 5, [(2, 2)], 1.0, 1.0, 1e-3)
    forces.batched_hierarchy(batched, [(2, 2)], 1.0, 0.5)
    np.testing.assert_array_equal(batched, before)


def test_hierarchy_pushes_parent_up_child_down(points):
    points[0, 2] = 0.0
    points[1, 2] = 0.0
    before = points.copy()
    forces.apply_hierarchy(points, [(0, 1)], 1.0, 0.25)
    assert points[0, 2] == pytest.approx(0.25)
    assert points[1, 2] == pytest.approx(-0.25)
    # only the vertical axis moves
    np.testing.assert_array_equal(np.delete(points, 2, axis=1), np.delete(before, 2, axis=1))


def test_hierarchy_leaves_separated_pairs_alone(points):
    points[0, 2] = 2.0
    points[1, 2] = 0.0
    before = points.copy()
    forces.apply_hierarchy(points, [(0, 1)], 1.0, 0.25)
    np.testing.assert_array_equal(points, before)


def test_passes_only_touch_active_dims(points):
    before = points.copy()
    forces.apply_repulsion(points, 3, 5.0, 1.0, 1e-3)
    forces.apply_springs(points, 3, [(0, 1), (2, 3)], 0.5, 1.0, 1e-3)
    np.testing.assert_array_equal(points[:, 3:], before[:, 3:])
    assert not np.array_equal(points[:, :3], before[:, :3])


def test_batched_repulsion_is_sum_of_pair_steps(points):
    expected = np.zeros_like(points[:, :4])
    n = len(points)
    for i in range(n):
        for j in range(i + 1, n):
            step = forces.repulsion_step(points[i, :4], points[j, :4], 1.5, 0.3, 1e-3)
            expected[i] += step
            expected[j] -= step
    batched = points.copy()
    forces.batched_repulsion(batched, 4, 1.5, 0.3, 1e-3)
    np.testing.assert_allclose(batched[:, :4] - points[:, :4], expected, atol=1e-12)
    # total displacement cancels out pairwise
    np.testing.assert_allclose(expected.sum(axis=0), 0.0, atol=1e-12)


def test_batched_springs_match_single_edge_sequential(points):
    seq = points.copy()
    bat = points.copy()
    forces.apply_springs(seq, 4, [(1, 4)], 0.3, 1.0, 1e-3)
    forces.batched_springs(bat, 4, [(1, 4)], 0.3, 1.0, 1e-3)
    np.testing.assert_allclose(seq, bat)
