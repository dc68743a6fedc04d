import logging

import numpy as np
import pytest

import arbodyn
from arbodyn import KinDynComputations, ReferenceFrame
from arbodyn.model import Data

FRAMES = ["head", "left_hand", "right_foot", "tail"]


@pytest.fixture(scope="module")
def setup(humanoid):
    rng = np.random.default_rng(11)
    q = humanoid.random_configuration(rng)
    v = rng.uniform(-1.0, 1.0, humanoid.nv)
    return humanoid, q, v


@pytest.mark.parametrize("frame", FRAMES)
def test_forward_kinematics(setup, frame):
    model, q, _ = setup
    kin_dyn = KinDynComputations(model)
    data = Data(model)
    arbodyn.frames_forward_kinematics(model, data, q)
    expected = data.oMf[model.get_frame_id(frame)].homogeneous
    assert kin_dyn.forward_kinematics(frame, q) == pytest.approx(expected)


@pytest.mark.parametrize("representation", [ReferenceFrame.LOCAL, ReferenceFrame.WORLD])
@pytest.mark.parametrize("frame", FRAMES)
def test_jacobians_and_velocity(setup, frame, representation):
    model, q, v = setup
    kin_dyn = KinDynComputations(model, representation)
    frame_id = model.get_frame_id(frame)
    data = Data(model)
    arbodyn.compute_joint_jacobians_time_variation(model, data, q, v)
    J = arbodyn.get_frame_jacobian(model, data, frame_id, representation)
    dJ = arbodyn.get_frame_jacobian_time_variation(model, data, frame_id, representation)

    assert kin_dyn.jacobian(frame, q) == pytest.approx(J)
    assert kin_dyn.jacobian_dot(frame, q, v) == pytest.approx(dJ)
    assert kin_dyn.frame_velocity(frame, q, v) == pytest.approx(J @ v, abs=1e-10)


def test_representation_switch(setup):
    model, q, v = setup
    kin_dyn = KinDynComputations(model)
    assert kin_dyn.frame_velocity_representation == ReferenceFrame.WORLD
    world = kin_dyn.frame_velocity("left_hand", q, v)
    kin_dyn.set_frame_velocity_representation(ReferenceFrame.LOCAL)
    local = kin_dyn.frame_velocity("left_hand", q, v)
    R = kin_dyn.forward_kinematics("left_hand", q)[:3, :3]
    assert world[:3] == pytest.approx(R @ local[:3])
    assert world[3:] == pytest.approx(R @ local[3:])
    with pytest.raises(ValueError):
        kin_dyn.set_frame_velocity_representation(3)


def test_dynamics_terms(setup):
    model, q, v = setup
    kin_dyn = KinDynComputations(model)
    assert kin_dyn.NDoF == model.nv
    h = kin_dyn.bias_force(q, v)
    C = kin_dyn.coriolis_term(q, v)
    G = kin_dyn.gravity_term(q)
    assert h == pytest.approx(C + G, abs=1e-10)
    assert h == pytest.approx(arbodyn.non_linear_effects(model, Data(model), q, v))
    assert G == pytest.approx(arbodyn.compute_generalized_gravity(model, Data(model), q))

    M = kin_dyn.mass_matrix(q)
    assert M == pytest.approx(arbodyn.compute_mass_matrix(model, Data(model), q))
    a = np.linspace(-1.0, 1.0, model.nv)
    tau = kin_dyn.rnea(q, v, a)
    assert M @ a + h == pytest.approx(tau, abs=1e-9)
    assert kin_dyn.forward_dynamics(q, v, tau) == pytest.approx(a, abs=1e-8)


def test_total_mass(setup):
    model, _, _ = setup
    kin_dyn = KinDynComputations(model)
    expected = sum(model.inertias[i].mass for i in range(model.njoints))
    assert kin_dyn.get_total_mass() == pytest.approx(expected)


def test_unknown_frame(setup):
    model, q, v = setup
    kin_dyn = KinDynComputations(model)
    with pytest.raises(ValueError):
        kin_dyn.jacobian("antenna", q)
    with pytest.raises(ValueError):
        kin_dyn.frame_velocity("antenna", q, v)


def test_construction_is_logged(setup, caplog):
    model, _, _ = setup
    with caplog.at_level(logging.DEBUG):
        KinDynComputations(model, ReferenceFrame.LOCAL)
    assert f"KinDynComputations for {model.name}" in caplog.text
    assert "LOCAL" in caplog.text
