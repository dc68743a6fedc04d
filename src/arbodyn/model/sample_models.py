"""Ready made models, used by the tests and handy for quick experiments"""

from typing import Sequence

import numpy as np

from arbodyn.core.spatial import SE3, Inertia
from arbodyn.core.spatial_math import SpatialMath
from arbodyn.model.builder import ModelBuilder
from arbodyn.model.joint import (
    CompositeJoint,
    FreeFlyerJoint,
    PlanarJoint,
    PrismaticJoint,
    RevoluteJoint,
    SphericalJoint,
)
from arbodyn.model.model import Model


def pendulum(
    mass: float = 1.0,
    length: float = 1.0,
    gravity: Sequence[float] = (0.0, 0.0, -9.81),
) -> Model:
    """Point mass hanging at distance length below a revolute joint around x.

    At q = 0 the mass lies on the downward vertical.
    """
    builder = ModelBuilder("pendulum", gravity=gravity)
    joint = builder.add_joint(0, RevoluteJoint((1.0, 0.0, 0.0)), name="hinge")
    builder.append_body(joint, Inertia.from_point_mass(mass, (0.0, 0.0, -length)))
    builder.add_frame("bob", joint, SE3(np.eye(3), np.array([0.0, 0.0, -length])))
    return builder.build()


def planar_chain(
    lengths: Sequence[float] = (1.0, 1.0),
    masses: Sequence[float] = (1.0, 1.0),
    gravity: Sequence[float] = (0.0, 0.0, -9.81),
) -> Model:
    """Serial chain of revolute joints around y, fully extended along x at q = 0.

    Each link carries a point mass at its tip. The frame "tip" is at the end of the
    last link.
    """
    if len(lengths) != len(masses) or len(lengths) == 0:
        raise ValueError("lengths and masses must be non empty and of the same size")
    builder = ModelBuilder("planar_chain", gravity=gravity)
    parent, offset = 0, 0.0
    for k, (length, mass) in enumerate(zip(lengths, masses)):
        placement = SE3(np.eye(3), np.array([offset, 0.0, 0.0]))
        parent = builder.add_joint(
            parent, RevoluteJoint((0.0, 1.0, 0.0)), placement, name=f"joint_{k + 1}"
        )
        builder.append_body(parent, Inertia.from_point_mass(mass, (length, 0.0, 0.0)))
        offset = length
    builder.add_frame("tip", parent, SE3(np.eye(3), np.array([offset, 0.0, 0.0])))
    return builder.build()


def random_manipulator(
    n_joints: int = 6,
    rng: np.random.Generator = None,
    math: SpatialMath = None,
) -> Model:
    """Serial chain of revolute and prismatic joints with random axes, placements and
    bodies. The frame "end_effector" is attached to the last joint.
    """
    rng = np.random.default_rng() if rng is None else rng
    builder = ModelBuilder("random_manipulator", math=math)
    parent = 0
    for k in range(n_joints):
        axis = rng.uniform(-1.0, 1.0, 3)
        joint = PrismaticJoint(axis) if k % 3 == 2 else RevoluteJoint(axis)
        parent = builder.add_joint(parent, joint, SE3.random(rng))
        builder.append_body(parent, Inertia.random(rng), SE3.random(rng))
    builder.add_frame("end_effector", parent, SE3.random(rng))
    return builder.build()


def random_humanoid(rng: np.random.Generator = None) -> Model:
    """Branched tree with a free flyer root and every joint kind.

    Frames "head", "left_hand", "right_hand", "left_foot", "right_foot" and "tail"
    are attached to the leaves.
    """
    rng = np.random.default_rng() if rng is None else rng
    builder = ModelBuilder("random_humanoid")

    def limb(parent, joints, prefix):
        for k, joint in enumerate(joints):
            parent = builder.add_joint(
                parent, joint, SE3.random(rng), name=f"{prefix}_{k}"
            )
            builder.append_body(parent, Inertia.random(rng), SE3.random(rng))
        return parent

    def axis():
        return rng.uniform(-1.0, 1.0, 3)

    root = builder.add_joint(0, FreeFlyerJoint(), name="root")
    builder.append_body(root, Inertia.random(rng))
    neck = CompositeJoint([RevoluteJoint(axis()), RevoluteJoint(axis())])
    head = limb(root, [neck], "neck")
    builder.add_frame("head", head, SE3.random(rng))
    for side in ("left", "right"):
        arm = [SphericalJoint(), RevoluteJoint(axis()), PrismaticJoint(axis())]
        hand = limb(root, arm, f"{side}_arm")
        builder.add_frame(f"{side}_hand", hand, SE3.random(rng))
        leg = [RevoluteJoint(axis()), RevoluteJoint(axis()), RevoluteJoint(axis())]
        foot = limb(root, leg, f"{side}_leg")
        builder.add_frame(f"{side}_foot", foot, SE3.random(rng))
    wrist = CompositeJoint([PrismaticJoint(axis()), SphericalJoint()])
    tail = limb(root, [PlanarJoint(), wrist], "tail")
    builder.add_frame("tail", tail, SE3.random(rng))
    return builder.build()
