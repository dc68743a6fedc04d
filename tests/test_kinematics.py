import numpy as np
import pytest

from arbodyn.core.kinematics import forward_kinematics
from arbodyn.core.spatial import log6
from arbodyn.model import Data, sample_models

EPS = 1e-6


def joint_snapshot(model, q, v=None):
    data = Data(model)
    forward_kinematics(model, data, q, v)
    return data


def test_placements_compose_along_the_chain(tests_setup):
    model, state = tests_setup
    data = joint_snapshot(model, state.q)
    assert data.kinematic_level == 0
    for i in model.tree:
        expected = data.oMi[model.parents[i]] @ data.liMi[i]
        assert data.oMi[i].is_approx(expected)
        q_i = state.q[model.q_slice(i)]
        liMi = model.joint_placements[i] @ model.joints[i].placement(q_i)
        assert data.liMi[i].is_approx(liMi)


def test_velocity_matches_placement_derivative(tests_setup):
    model, state = tests_setup
    data = joint_snapshot(model, state.q, state.v)
    assert data.kinematic_level == 1
    plus = joint_snapshot(model, model.integrate(state.q, EPS * state.v))
    minus = joint_snapshot(model, model.integrate(state.q, -EPS * state.v))
    for i in model.tree:
        M_inv = data.oMi[i].inverse()
        fd = (log6(M_inv @ plus.oMi[i]).vector - log6(M_inv @ minus.oMi[i]).vector) / (
            2 * EPS
        )
        assert fd == pytest.approx(data.v[i].vector, abs=1e-6)
        assert data.ov[i].is_approx(data.oMi[i].act(data.v[i]))


def test_acceleration_matches_velocity_derivative_at_constant_velocity(tests_setup):
    model, state = tests_setup
    data = Data(model)
    forward_kinematics(model, data, state.q, state.v, np.zeros(model.nv))
    assert data.kinematic_level == 2
    plus = joint_snapshot(model, model.integrate(state.q, EPS * state.v), state.v)
    minus = joint_snapshot(model, model.integrate(state.q, -EPS * state.v), state.v)
    for i in model.tree:
        fd = (plus.v[i].vector - minus.v[i].vector) / (2 * EPS)
        assert fd == pytest.approx(data.a[i].vector, abs=1e-6)


def test_acceleration_matches_velocity_derivative(rng):
    # only 1D joints: q(t) = q + v t + a t^2 / 2 is a valid trajectory
    model = sample_models.random_manipulator(5, rng)
    q, v, a = (rng.uniform(-1.0, 1.0, model.nv) for _ in range(3))
    data = Data(model)
    forward_kinematics(model, data, q, v, a)
    plus = joint_snapshot(model, q + EPS * v + EPS**2 / 2 * a, v + EPS * a)
    minus = joint_snapshot(model, q - EPS * v + EPS**2 / 2 * a, v - EPS * a)
    for i in model.tree:
        fd = (plus.v[i].vector - minus.v[i].vector) / (2 * EPS)
        assert fd == pytest.approx(data.a[i].vector, abs=1e-6)


def test_placements_only_mode_uses_the_last_configuration(tests_setup):
    model, state = tests_setup
    data = joint_snapshot(model, state.q, state.v)
    expected = [M for M in data.oMi]
    data.oMi[1] = data.oMi[1] @ data.oMi[1]
    forward_kinematics(model, data)
    for i in model.tree:
        assert data.oMi[i].is_approx(expected[i])
    # the velocities of the same configuration are still valid
    assert data.kinematic_level == 1


def test_placements_only_mode_on_fresh_data(humanoid):
    data = Data(humanoid)
    forward_kinematics(humanoid, data)
    assert data.kinematic_level == 0
    for i in humanoid.tree:
        assert data.oMi[i].is_approx(data.oMi[humanoid.parents[i]] @ data.liMi[i])


def test_forward_kinematics_errors(tests_setup):
    model, state = tests_setup
    data = Data(model)
    with pytest.raises(ValueError):
        forward_kinematics(model, data, None, state.v)
    with pytest.raises(ValueError):
        forward_kinematics(model, data, state.q, None, state.a)
    with pytest.raises(ValueError):
        forward_kinematics(model, data, state.q[:-1])
    with pytest.raises(ValueError):
        forward_kinematics(model, data, state.q, np.zeros(model.nv + 2))
    assert data.kinematic_level == -1
    assert data.q == pytest.approx(model.neutral())
