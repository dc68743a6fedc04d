# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from typing import Optional, Tuple

import numpy as np
import numpy.typing as npt

from arbodyn.core.spatial import Motion
from arbodyn.core.utils import convert_to_vector
from arbodyn.model.data import Data
from arbodyn.model.model import Model


def forward_step(
    model: Model,
    data: Data,
    i: int,
    q: np.ndarray,
    v: Optional[np.ndarray] = None,
    a: Optional[np.ndarray] = None,
) -> Tuple[Optional[Motion], Optional[Motion]]:
    """Update the placement, velocity and acceleration of joint i from its parent.

    Args:
        model (Model): the model
        data (Data): the workspace, the parent entries must be up to date
        i (int): joint index
        q (np.ndarray): the configuration
        v (Optional[np.ndarray]): the velocity. Defaults to None.
        a (Optional[np.ndarray]): the acceleration. Defaults to None.

    Returns:
        Tuple[Optional[Motion], Optional[Motion]]: the joint velocity S v_i and the
        acceleration produced inside the joint S a_i + v x S v_i + c_i
    """
    joint = model.joints[i]
    parent = model.parents[i]
    q_i = q[model.q_slice(i)]

    liMi = model.joint_placements[i] @ joint.placement(q_i)
    data.liMi[i] = liMi
    data.oMi[i] = data.oMi[parent] @ liMi
    if v is None:
        return None, None

    v_i = v[model.v_slice(i)]
    S = joint.subspace(q_i)
    vJ = Motion.from_vector(S @ v_i)
    data.v[i] = liMi.act_inv(data.v[parent]) + vJ
    data.ov[i] = data.oMi[i].act(data.v[i])
    if a is None:
        return vJ, None

    aJ = (
        Motion.from_vector(S @ a[model.v_slice(i)])
        + data.v[i].cross(vJ)
        + joint.bias(q_i, v_i)
    )
    data.a[i] = liMi.act_inv(data.a[parent]) + aJ
    return vJ, aJ


def forward_kinematics(
    model: Model,
    data: Data,
    q: Optional[npt.ArrayLike] = None,
    v: Optional[npt.ArrayLike] = None,
    a: Optional[npt.ArrayLike] = None,
) -> None:
    """Propagate the joint placements, and optionally velocities and accelerations,
    from the root to the leaves.

    Called without vectors, the placements are recomputed from data.q, the last
    configuration applied to this workspace. The caller is responsible for it being
    the configuration of interest.

    Args:
        model (Model): the model
        data (Data): the workspace, filled with oMi, liMi (and v, ov, a)
        q (Optional[npt.ArrayLike]): the configuration. Defaults to None.
        v (Optional[npt.ArrayLike]): the velocity. Defaults to None.
        a (Optional[npt.ArrayLike]): the acceleration, requires v. Defaults to None.
    """
    math = model.math
    if q is None:
        if v is not None or a is not None:
            raise ValueError("The velocity and the acceleration require a configuration")
        for i in model.tree:
            forward_step(model, data, i, data.q)
        if data.kinematic_level < 0:
            data.set_kinematic_level(0)
        return

    if a is not None and v is None:
        raise ValueError("The acceleration requires a velocity")
    q = convert_to_vector(q, model.nq, "q", math)
    if v is not None:
        v = convert_to_vector(v, model.nv, "v", math)
    if a is not None:
        a = convert_to_vector(a, model.nv, "a", math)

    data.q = q
    if v is not None:
        data.dq = v
    for i in model.tree:
        forward_step(model, data, i, q, v, a)
    data.set_kinematic_level(0 if v is None else 1 if a is None else 2)
