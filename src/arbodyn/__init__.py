# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from arbodyn.core import (
    SE3,
    Force,
    FrameType,
    Inertia,
    Motion,
    ReferenceFrame,
    SpatialMath,
)
from arbodyn.core.frames import (
    frames_forward_kinematics,
    get_frame_acceleration,
    get_frame_jacobian,
    get_frame_jacobian_time_variation,
    get_frame_placement,
    get_frame_velocity,
    update_frame_placement,
)
from arbodyn.core.jacobian import (
    compute_joint_jacobians,
    compute_joint_jacobians_time_variation,
    get_joint_jacobian,
)
from arbodyn.core.kinematics import forward_kinematics
from arbodyn.core.rnea import (
    compute_generalized_gravity,
    compute_mass_matrix,
    forward_dynamics,
    non_linear_effects,
    rnea,
)
from arbodyn.model import (
    CompositeJoint,
    Data,
    Frame,
    FreeFlyerJoint,
    Joint,
    Model,
    ModelBuilder,
    PlanarJoint,
    PrismaticJoint,
    RevoluteJoint,
    SphericalJoint,
    Tree,
)
from arbodyn.computations import KinDynComputations
