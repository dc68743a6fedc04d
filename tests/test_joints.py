import numpy as np
import pytest

from arbodyn.core.spatial import log6
from arbodyn.model.joint import (
    CompositeJoint,
    FreeFlyerJoint,
    PlanarJoint,
    PrismaticJoint,
    RevoluteJoint,
    SphericalJoint,
)

EPS = 1e-6


def make_joints():
    return {
        "revolute": RevoluteJoint((1.0, 2.0, 3.0)),
        "prismatic": PrismaticJoint((0.0, -1.0, 1.0)),
        "planar": PlanarJoint(),
        "spherical": SphericalJoint(),
        "free_flyer": FreeFlyerJoint(),
        "composite": CompositeJoint(
            [
                RevoluteJoint((0.0, 0.0, 1.0)),
                PrismaticJoint((1.0, 0.0, 0.0)),
                SphericalJoint(),
                RevoluteJoint((0.0, 1.0, 0.0)),
            ]
        ),
    }


JOINTS = list(make_joints())


def random_state(joint, rng):
    q = joint.integrate(joint.neutral(), rng.uniform(-1.0, 1.0, joint.nv))
    v = rng.uniform(-1.0, 1.0, joint.nv)
    return q, v


def placement_velocity(joint, q, v):
    """Central difference of the placement along q(t) = integrate(q, t v)"""
    M = joint.placement(q)
    plus = M.inverse() @ joint.placement(joint.integrate(q, EPS * v))
    minus = M.inverse() @ joint.placement(joint.integrate(q, -EPS * v))
    return (log6(plus).vector - log6(minus).vector) / (2 * EPS)


@pytest.mark.parametrize("name", JOINTS)
def test_neutral_is_identity(name):
    joint = make_joints()[name]
    q = joint.neutral()
    assert q.shape == (joint.nq,)
    assert joint.placement(q).homogeneous == pytest.approx(np.eye(4))


@pytest.mark.parametrize("name", JOINTS)
def test_subspace_matches_placement_derivative(name, rng):
    joint = make_joints()[name]
    q, v = random_state(joint, rng)
    S = joint.subspace(q)
    assert S.shape == (6, joint.nv)
    assert placement_velocity(joint, q, v) == pytest.approx(S @ v, abs=1e-6)


@pytest.mark.parametrize("name", JOINTS)
def test_subspace_dot_matches_subspace_derivative(name, rng):
    joint = make_joints()[name]
    q, v = random_state(joint, rng)
    S_plus = joint.subspace(joint.integrate(q, EPS * v))
    S_minus = joint.subspace(joint.integrate(q, -EPS * v))
    S_dot = joint.subspace_dot(q, v)
    assert S_dot.shape == (6, joint.nv)
    assert (S_plus - S_minus) / (2 * EPS) == pytest.approx(S_dot, abs=1e-6)
    assert joint.bias(q, v).vector == pytest.approx(S_dot @ v, abs=1e-12)


@pytest.mark.parametrize("name", JOINTS)
def test_integrate_stays_on_manifold(name, rng):
    joint = make_joints()[name]
    q, _ = random_state(joint, rng)
    R = joint.placement(q).rotation
    assert R @ R.T == pytest.approx(np.eye(3), abs=1e-12)
    assert np.linalg.det(R) == pytest.approx(1.0)
    assert joint.integrate(q, np.zeros(joint.nv)) == pytest.approx(q)


def test_revolute_placement():
    joint = RevoluteJoint((0.0, 0.0, 2.0))
    M = joint.placement(np.array([np.pi / 2]))
    assert M.act_point([1.0, 0.0, 0.0]) == pytest.approx([0.0, 1.0, 0.0], abs=1e-12)
    assert joint.axis == pytest.approx([0.0, 0.0, 1.0])


def test_prismatic_placement():
    joint = PrismaticJoint((0.0, 3.0, 4.0))
    M = joint.placement(np.array([5.0]))
    assert M.translation == pytest.approx([0.0, 3.0, 4.0])
    assert M.rotation == pytest.approx(np.eye(3))


def test_planar_integrate_keeps_unit_angle():
    joint = PlanarJoint()
    q = joint.integrate(joint.neutral(), np.array([0.5, -0.2, np.pi / 3]))
    assert q[2:] == pytest.approx([np.cos(np.pi / 3), np.sin(np.pi / 3)])


def test_free_flyer_integrate_translation():
    joint = FreeFlyerJoint()
    q = joint.integrate(joint.neutral(), np.array([1.0, 2.0, 3.0, 0.0, 0.0, 0.0]))
    assert q == pytest.approx([1.0, 2.0, 3.0, 0.0, 0.0, 0.0, 1.0])


def test_composite_sizes():
    joint = make_joints()["composite"]
    assert (joint.nq, joint.nv) == (7, 6)
    assert joint.neutral() == pytest.approx([0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0])


def test_invalid_joints():
    with pytest.raises(ValueError):
        RevoluteJoint((0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        PrismaticJoint((1.0, 0.0))
    with pytest.raises(ValueError):
        CompositeJoint([])
