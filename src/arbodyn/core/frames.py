# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

"""Kinematics of the frames attached to the joints.

The getters read the joint quantities already stored in Data. They do not run the
algorithms they depend on: forward_kinematics for placements, velocities and
accelerations, compute_joint_jacobians and compute_joint_jacobians_time_variation
for the Jacobians.
"""

from typing import Optional

import numpy as np
import numpy.typing as npt

from arbodyn.core.constants import ReferenceFrame
from arbodyn.core.jacobian import express
from arbodyn.core.kinematics import forward_kinematics
from arbodyn.core.spatial import SE3, Motion
from arbodyn.core.utils import (
    check_index,
    check_jacobian_output,
    check_reference_frame,
)
from arbodyn.model.data import Data
from arbodyn.model.model import Model


def frames_forward_kinematics(
    model: Model, data: Data, q: Optional[npt.ArrayLike] = None
) -> None:
    """Placements of all the frames in the world, stored in data.oMf.

    Args:
        model (Model): the model
        data (Data): the workspace
        q (Optional[npt.ArrayLike]): when given, forward_kinematics runs first.
            Otherwise the joint placements in data are assumed up to date. Defaults to None.
    """
    if q is not None:
        forward_kinematics(model, data, q)
    data.require_level(0, "frames_forward_kinematics")
    for k, frame in enumerate(model.frames):
        data.oMf[k] = data.oMi[frame.parent] @ frame.placement
    data.frames_updated = True


def update_frame_placement(model: Model, data: Data, frame_id: int) -> SE3:
    """
    Args:
        model (Model): the model
        data (Data): the workspace, with up to date joint placements
        frame_id (int): frame index

    Returns:
        SE3: the placement of the frame in the world, also stored in data.oMf
    """
    check_index(frame_id, model.nframes, "frame_id")
    data.require_level(0, "update_frame_placement")
    frame = model.frames[frame_id]
    data.oMf[frame_id] = data.oMi[frame.parent] @ frame.placement
    return data.oMf[frame_id]


def get_frame_placement(model: Model, data: Data, frame_id: int) -> SE3:
    check_index(frame_id, model.nframes, "frame_id")
    data.require(data.frames_updated, "Run frames_forward_kinematics first")
    return data.oMf[frame_id]


def _to_frame(
    model: Model, data: Data, frame_id: int, m: Motion, reference_frame
) -> Motion:
    frame = model.frames[frame_id]
    local = frame.placement.act_inv(m)
    if check_reference_frame(reference_frame) == ReferenceFrame.LOCAL:
        return local
    R = (data.oMi[frame.parent] @ frame.placement).rotation
    return Motion(R @ local.linear, R @ local.angular)


def get_frame_velocity(
    model: Model, data: Data, frame_id: int, reference_frame: ReferenceFrame
) -> Motion:
    """
    Args:
        model (Model): the model
        data (Data): the workspace, with velocities from forward_kinematics
        frame_id (int): frame index
        reference_frame (ReferenceFrame): LOCAL or WORLD

    Returns:
        Motion: the spatial velocity of the frame
    """
    check_index(frame_id, model.nframes, "frame_id")
    data.require_level(1, "get_frame_velocity")
    parent = model.frames[frame_id].parent
    return _to_frame(model, data, frame_id, data.v[parent], reference_frame)


def get_frame_acceleration(
    model: Model, data: Data, frame_id: int, reference_frame: ReferenceFrame
) -> Motion:
    """
    Args:
        model (Model): the model
        data (Data): the workspace, with accelerations from forward_kinematics
        frame_id (int): frame index
        reference_frame (ReferenceFrame): LOCAL or WORLD

    Returns:
        Motion: the spatial acceleration of the frame
    """
    check_index(frame_id, model.nframes, "frame_id")
    data.require_level(2, "get_frame_acceleration")
    parent = model.frames[frame_id].parent
    return _to_frame(model, data, frame_id, data.a[parent], reference_frame)


def get_frame_jacobian(
    model: Model,
    data: Data,
    frame_id: int,
    reference_frame: ReferenceFrame,
    J: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Frame Jacobian, extracted from the whole body Jacobian in data.J.

    Only the columns of the joints supporting the frame are written: a caller
    supplied J must be zero initialized.

    Args:
        model (Model): the model
        data (Data): the workspace, with compute_joint_jacobians already run
        frame_id (int): frame index
        reference_frame (ReferenceFrame): LOCAL or WORLD
        J (Optional[np.ndarray]): 6 x nv output. Defaults to None, a new zero matrix.

    Returns:
        np.ndarray: the Jacobian, J @ v is the frame velocity
    """
    check_index(frame_id, model.nframes, "frame_id")
    reference_frame = check_reference_frame(reference_frame)
    J = check_jacobian_output(J, model.nv, model.math)
    data.require(data.jacobians_computed, "Run compute_joint_jacobians first")
    parent = model.frames[frame_id].parent
    oMf = update_frame_placement(model, data, frame_id)
    X = express(oMf, reference_frame)
    for j in model.supports(parent)[1:]:
        columns = model.v_slice(j)
        J[:, columns] = X @ data.J[:, columns]
    return J


def get_frame_jacobian_time_variation(
    model: Model,
    data: Data,
    frame_id: int,
    reference_frame: ReferenceFrame,
    dJ: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Time derivative of the frame Jacobian, extracted from data.J and data.dJ.

    Args:
        model (Model): the model
        data (Data): the workspace, with compute_joint_jacobians_time_variation already run
        frame_id (int): frame index
        reference_frame (ReferenceFrame): LOCAL or WORLD
        dJ (Optional[np.ndarray]): 6 x nv zero initialized output. Defaults to None.

    Returns:
        np.ndarray: the derivative of get_frame_jacobian along the current motion
    """
    check_index(frame_id, model.nframes, "frame_id")
    reference_frame = check_reference_frame(reference_frame)
    dJ = check_jacobian_output(dJ, model.nv, model.math)
    data.require(
        data.jacobians_time_variation_computed,
        "Run compute_joint_jacobians_time_variation first",
    )
    parent = model.frames[frame_id].parent
    oMf = update_frame_placement(model, data, frame_id)
    ov = data.ov[parent]
    columns = [model.v_slice(j) for j in model.supports(parent)[1:]]

    if reference_frame == ReferenceFrame.LOCAL:
        X = oMf.action_inverse
        v_frame = oMf.act_inv(ov)
        for c in columns:
            dJ[:, c] = X @ data.dJ[:, c] - v_frame.action @ (X @ data.J[:, c])
        return dJ

    math = model.math
    p = oMf.translation
    p_dot = ov.linear + np.cross(ov.angular, p)
    for c in columns:
        J_c, dJ_c = data.J[:, c], data.dJ[:, c]
        dJ[:3, c] = (
            dJ_c[:3] - math.skew(p) @ dJ_c[3:] - math.skew(p_dot) @ J_c[3:]
        )
        dJ[3:, c] = dJ_c[3:]
    return dJ
