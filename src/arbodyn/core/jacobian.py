# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from typing import Optional

import numpy as np
import numpy.typing as npt

from arbodyn.core.constants import ReferenceFrame
from arbodyn.core.kinematics import forward_kinematics
from arbodyn.core.spatial import SE3
from arbodyn.core.utils import (
    check_index,
    check_jacobian_output,
    check_reference_frame,
)
from arbodyn.model.data import Data
from arbodyn.model.model import Model


def compute_joint_jacobians(
    model: Model, data: Data, q: Optional[npt.ArrayLike] = None
) -> np.ndarray:
    """Whole body Jacobian, expressed in the world frame at the world origin.

    The column block of joint j is oMi[j].action @ S_j(q_j). Without q the joint
    placements already stored in data are used.

    Args:
        model (Model): the model
        data (Data): the workspace
        q (Optional[npt.ArrayLike]): the configuration. Defaults to None.

    Returns:
        np.ndarray: a copy of data.J, 6 x nv
    """
    if q is not None:
        forward_kinematics(model, data, q)
    data.require_level(0, "compute_joint_jacobians")
    for i in model.tree:
        S = model.joints[i].subspace(data.q[model.q_slice(i)])
        data.J[:, model.v_slice(i)] = data.oMi[i].action @ S
    data.jacobians_computed = True
    return data.J.copy()


def compute_joint_jacobians_time_variation(
    model: Model, data: Data, q: npt.ArrayLike, v: npt.ArrayLike
) -> np.ndarray:
    """Time derivative of the whole body Jacobian, in the world frame at the world origin.

    The column block of joint j is ov[j] x J_j + oMi[j].action @ dS_j/dt. data.J is
    filled as well.

    Args:
        model (Model): the model
        data (Data): the workspace
        q (npt.ArrayLike): the configuration
        v (npt.ArrayLike): the velocity

    Returns:
        np.ndarray: a copy of data.dJ, 6 x nv
    """
    forward_kinematics(model, data, q, v)
    for i in model.tree:
        joint = model.joints[i]
        q_i = data.q[model.q_slice(i)]
        v_i = data.dq[model.v_slice(i)]
        columns = model.v_slice(i)
        X = data.oMi[i].action
        data.J[:, columns] = X @ joint.subspace(q_i)
        data.dJ[:, columns] = data.ov[i].action @ data.J[:, columns] + X @ (
            joint.subspace_dot(q_i, v_i)
        )
    data.jacobians_computed = True
    data.jacobians_time_variation_computed = True
    return data.dJ.copy()


def express(placement: SE3, reference_frame: ReferenceFrame) -> np.ndarray:
    """
    Args:
        placement (SE3): placement of a frame in the world
        reference_frame (ReferenceFrame): the convention

    Returns:
        np.ndarray: the 6x6 matrix mapping world motions to the convention of the frame
    """
    if reference_frame == ReferenceFrame.LOCAL:
        return placement.action_inverse
    shift = SE3(np.eye(3, dtype=placement.translation.dtype), placement.translation)
    return shift.action_inverse


def get_joint_jacobian(
    model: Model,
    data: Data,
    joint_id: int,
    reference_frame: ReferenceFrame,
    J: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Jacobian of a joint frame, extracted from data.J.

    Only the columns of the joints supporting joint_id are written: a caller
    supplied J must be zero initialized.

    Args:
        model (Model): the model
        data (Data): the workspace, with compute_joint_jacobians already run
        joint_id (int): joint index
        reference_frame (ReferenceFrame): LOCAL or WORLD
        J (Optional[np.ndarray]): 6 x nv output. Defaults to None, a new zero matrix.

    Returns:
        np.ndarray: the Jacobian
    """
    check_index(joint_id, model.njoints, "joint_id")
    reference_frame = check_reference_frame(reference_frame)
    J = check_jacobian_output(J, model.nv, model.math)
    data.require(data.jacobians_computed, "Run compute_joint_jacobians first")
    X = express(data.oMi[joint_id], reference_frame)
    for j in model.supports(joint_id)[1:]:
        columns = model.v_slice(j)
        J[:, columns] = X @ data.J[:, columns]
    return J
