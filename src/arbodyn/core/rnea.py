# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from typing import Optional, Sequence, Union

import numpy as np
import numpy.typing as npt

from arbodyn.core.kinematics import forward_step
from arbodyn.core.spatial import Force
from arbodyn.core.utils import convert_external_forces, convert_to_vector
from arbodyn.model.data import Data
from arbodyn.model.model import Model

ExternalForces = Optional[Sequence[Union[Force, npt.ArrayLike]]]


def rnea(
    model: Model,
    data: Data,
    q: npt.ArrayLike,
    v: npt.ArrayLike,
    a: npt.ArrayLike,
    fext: ExternalForces = None,
) -> np.ndarray:
    """Recursive Newton-Euler algorithm.

    Computes tau = M(q) a + C(q, v) v + g(q) - sum_i J_i^T fext_i without forming
    any of those terms. The gravity enters as a fictitious acceleration -g of the
    universe, so data.a_gf holds the accelerations biased by gravity while data.a
    holds the actual ones.

    Args:
        model (Model): the model
        data (Data): the workspace
        q (npt.ArrayLike): the configuration
        v (npt.ArrayLike): the velocity
        a (npt.ArrayLike): the acceleration
        fext (ExternalForces, optional): one force per joint, universe included (entry 0 is
            ignored), expressed in the local joint frame. Defaults to None.

    Returns:
        np.ndarray: the generalized forces, also stored in data.tau
    """
    math = model.math
    q = convert_to_vector(q, model.nq, "q", math)
    v = convert_to_vector(v, model.nv, "v", math)
    a = convert_to_vector(a, model.nv, "a", math)
    fext = convert_external_forces(fext, model.njoints, math)

    data.q = q
    data.dq = v
    data.a_gf[0] = -model.gravity
    data.f[0] = Force.zero(math.dtype)
    for i in model.tree:
        _, aJ = forward_step(model, data, i, q, v, a)
        data.a_gf[i] = data.liMi[i].act_inv(data.a_gf[model.parents[i]]) + aJ
        inertia = model.inertias[i]
        data.f[i] = inertia * data.a_gf[i] + data.v[i].cross(inertia * data.v[i])
        if fext is not None:
            data.f[i] = data.f[i] - fext[i]

    for i in model.tree.backward():
        joint = model.joints[i]
        S = joint.subspace(q[model.q_slice(i)])
        data.tau[model.v_slice(i)] = S.T @ data.f[i].vector
        parent = model.parents[i]
        data.f[parent] = data.f[parent] + data.liMi[i].act(data.f[i])

    data.set_kinematic_level(2)
    return data.tau.copy()


def non_linear_effects(
    model: Model, data: Data, q: npt.ArrayLike, v: npt.ArrayLike
) -> np.ndarray:
    """Coriolis, centrifugal and gravity terms, that is rnea with a zero acceleration

    Args:
        model (Model): the model
        data (Data): the workspace
        q (npt.ArrayLike): the configuration
        v (npt.ArrayLike): the velocity

    Returns:
        np.ndarray: C(q, v) v + g(q), also stored in data.nle
    """
    nle = rnea(model, data, q, v, model.math.zeros(model.nv))
    data.nle = nle.copy()
    # the zero acceleration is not a motion of the caller
    data.set_kinematic_level(1)
    return nle


def compute_generalized_gravity(
    model: Model, data: Data, q: npt.ArrayLike
) -> np.ndarray:
    """
    Args:
        model (Model): the model
        data (Data): the workspace
        q (npt.ArrayLike): the configuration

    Returns:
        np.ndarray: the gravity term g(q), also stored in data.g
    """
    zeros = model.math.zeros(model.nv)
    g = rnea(model, data, q, zeros, zeros)
    data.g = g.copy()
    data.set_kinematic_level(0)
    return g


def compute_mass_matrix(model: Model, data: Data, q: npt.ArrayLike) -> np.ndarray:
    """Joint space inertia matrix, assembled one column per RNEA call.

    Column j is rnea(q, 0, e_j) - g(q).

    Args:
        model (Model): the model
        data (Data): the workspace
        q (npt.ArrayLike): the configuration

    Returns:
        np.ndarray: the nv x nv mass matrix, also stored in data.M
    """
    math = model.math
    q = convert_to_vector(q, model.nq, "q", math)
    zeros = math.zeros(model.nv)
    g = compute_generalized_gravity(model, data, q)
    M = math.zeros(model.nv, model.nv)
    for j in range(model.nv):
        e_j = math.zeros(model.nv)
        e_j[j] = 1
        M[:, j] = rnea(model, data, q, zeros, e_j) - g
    data.M = M
    # velocities and accelerations hold the last unit column
    data.set_kinematic_level(0)
    return M.copy()


def forward_dynamics(
    model: Model,
    data: Data,
    q: npt.ArrayLike,
    v: npt.ArrayLike,
    tau: npt.ArrayLike,
    fext: ExternalForces = None,
) -> np.ndarray:
    """Joint accelerations produced by tau, solving M(q) a = tau - rnea(q, v, 0, fext).

    Args:
        model (Model): the model
        data (Data): the workspace
        q (npt.ArrayLike): the configuration
        v (npt.ArrayLike): the velocity
        tau (npt.ArrayLike): the generalized forces
        fext (ExternalForces, optional): external forces as in rnea. Defaults to None.

    Returns:
        np.ndarray: the acceleration, also stored in data.ddq
    """
    math = model.math
    q = convert_to_vector(q, model.nq, "q", math)
    v = convert_to_vector(v, model.nv, "v", math)
    tau = convert_to_vector(tau, model.nv, "tau", math)
    fext = convert_external_forces(fext, model.njoints, math)

    M = compute_mass_matrix(model, data, q)
    bias = rnea(model, data, q, v, math.zeros(model.nv), fext)
    ddq = np.linalg.solve(M, tau - bias)
    # leave data in the state of the computed motion
    rnea(model, data, q, v, ddq, fext)
    data.ddq = ddq
    return ddq.copy()
