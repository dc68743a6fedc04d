import logging

import numpy as np
import pytest

from arbodyn.core.constants import FrameType
from arbodyn.core.spatial import SE3, Inertia
from arbodyn.model import ModelBuilder, RevoluteJoint, Tree, sample_models


@pytest.fixture
def tree() -> Tree:
    #     0
    #     |
    #     1
    #    / \
    #   2   3
    #       |
    #       4
    return Tree((0, 0, 1, 1, 3))


def test_traversal_orders(tree):
    assert list(tree.forward()) == [1, 2, 3, 4]
    assert list(tree.backward()) == [4, 3, 2, 1]
    assert list(tree) == list(tree.forward())
    assert list(reversed(tree)) == list(tree.backward())
    assert len(tree) == 5


def test_parents_before_children(tree):
    seen = {0}
    for i in tree.forward():
        assert tree.parents[i] in seen
        seen.add(i)
    seen = set()
    for i in tree.backward():
        assert all(child in seen for child in tree.children(i))
        seen.add(i)


def test_supports_children_subtree(tree):
    assert tree.supports(4) == [0, 1, 3, 4]
    assert tree.supports(0) == [0]
    assert tree.children(1) == [2, 3]
    assert tree.children(2) == []
    assert tree.subtree(3) == [3, 4]
    assert tree.subtree(0) == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("parents", [(0, 2, 1), (0, 1), (1, 0), ()])
def test_invalid_parents(parents):
    with pytest.raises(ValueError):
        Tree(parents)


def test_builder_sizes_and_names():
    builder = ModelBuilder("two_links")
    j1 = builder.add_joint(0, RevoluteJoint(), name="shoulder")
    j2 = builder.add_joint(j1, RevoluteJoint(), name="elbow")
    builder.add_frame("hand", j2, SE3(np.eye(3), np.array([1.0, 0.0, 0.0])))
    model = builder.build()
    assert (model.nq, model.nv, model.njoints) == (2, 2, 3)
    assert model.get_joint_id("elbow") == 2
    # universe, one frame per joint, then hand
    assert model.nframes == 4
    assert model.get_frame_id("hand") == 3
    assert model.exist_frame("shoulder")
    assert not model.exist_frame("foot")
    assert model.supports(j2) == [0, 1, 2]
    with pytest.raises(ValueError):
        model.get_frame_id("foot")
    with pytest.raises(ValueError):
        model.get_joint_id("wrist")


def test_builder_errors():
    builder = ModelBuilder()
    j1 = builder.add_joint(0, RevoluteJoint(), name="a")
    with pytest.raises(ValueError):
        builder.add_joint(5, RevoluteJoint())
    with pytest.raises(ValueError):
        builder.add_joint(j1, RevoluteJoint(), name="a")
    with pytest.raises(ValueError):
        builder.add_joint(j1, "revolute")
    with pytest.raises(ValueError):
        builder.append_body(0, Inertia.from_sphere(1.0, 0.1))
    with pytest.raises(ValueError):
        builder.add_frame("a", j1)
    builder.add_frame("wrist", j1)
    with pytest.raises(ValueError):
        builder.add_joint(j1, RevoluteJoint(), name="wrist")
    builder.add_frame("joint_2", j1)
    with pytest.raises(ValueError):
        builder.add_joint(j1, RevoluteJoint())
    with pytest.raises(ValueError):
        ModelBuilder(gravity=(0.0, -9.81))


def test_append_body_merges_inertias(rng):
    builder = ModelBuilder()
    joint = builder.add_joint(0, RevoluteJoint())
    I1, I2 = Inertia.random(rng), Inertia.random(rng)
    placement = SE3.random(rng)
    builder.append_body(joint, I1)
    builder.append_body(joint, I2, placement)
    model = builder.build()
    expected = I1.matrix + placement.act(I2).matrix
    assert model.inertias[joint].matrix == pytest.approx(expected)
    assert model.total_mass() == pytest.approx(I1.mass + I2.mass)


def test_model_slices(humanoid):
    assert sum(humanoid.nqs) == humanoid.nq
    assert sum(humanoid.nvs) == humanoid.nv
    end_q = [humanoid.q_slice(i).stop for i in range(humanoid.njoints)]
    end_v = [humanoid.v_slice(i).stop for i in range(humanoid.njoints)]
    assert max(end_q) == humanoid.nq
    assert max(end_v) == humanoid.nv
    assert humanoid.neutral().shape == (humanoid.nq,)


def test_model_integrate(humanoid, rng):
    q = humanoid.random_configuration(rng)
    assert humanoid.integrate(q, np.zeros(humanoid.nv)) == pytest.approx(q)
    with pytest.raises(ValueError):
        humanoid.integrate(q, np.zeros(humanoid.nv + 1))


def test_build_logs_tables(caplog):
    with caplog.at_level(logging.DEBUG):
        model = sample_models.planar_chain()
    assert "Joints of planar_chain" in caplog.text
    assert "Frames of planar_chain" in caplog.text
    assert "joint_2" in str(model.table())


def test_model_does_not_share_caller_arrays():
    translation = np.array([1.0, 0.0, 0.0])
    lever = np.array([0.0, 0.2, 0.0])
    gravity = np.array([0.0, 0.0, -9.81])
    builder = ModelBuilder(gravity=gravity)
    joint = builder.add_joint(0, RevoluteJoint(), SE3(np.eye(3), translation))
    builder.append_body(joint, Inertia(1.0, lever, np.eye(3)))
    builder.add_frame("tool", joint, SE3(np.eye(3), translation))
    model = builder.build()

    translation[0] = 42.0
    lever[1] = 42.0
    gravity[2] = 42.0
    assert model.joint_placements[joint].translation == pytest.approx([1.0, 0.0, 0.0])
    assert model.frames[model.get_frame_id("tool")].placement.translation[0] == 1.0
    assert model.inertias[joint].lever == pytest.approx([0.0, 0.2, 0.0])
    assert model.gravity.linear[2] == pytest.approx(-9.81)
    with pytest.raises(ValueError):
        model.joint_placements[joint].rotation[0, 0] = 2.0


def test_frame_types(humanoid):
    assert list(FrameType) == [FrameType.OP_FRAME, FrameType.JOINT]
    for i in humanoid.tree:
        frame = humanoid.frames[humanoid.get_frame_id(humanoid.names[i])]
        assert frame.type == FrameType.JOINT
        assert frame.parent == i
    assert humanoid.frames[humanoid.get_frame_id("head")].type == FrameType.OP_FRAME
