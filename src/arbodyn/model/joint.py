# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

import abc
from typing import List, Sequence

import numpy as np
import numpy.typing as npt
from scipy.spatial.transform import Rotation

from arbodyn.core.spatial import SE3, Motion, exp3, exp6
from arbodyn.core.spatial_math import SpatialMath


def _unit_axis(axis: npt.ArrayLike) -> np.ndarray:
    axis = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if axis.shape != (3,) or norm == 0:
        raise ValueError(f"The joint axis must be a non zero 3D vector, got {axis}")
    return axis / norm


class Joint(abc.ABC):
    """Base Joint class.

    A joint maps its configuration slice q (size nq) to the placement of the child
    frame with respect to the joint frame, and its velocity slice (size nv) to a
    spatial velocity through the motion subspace S(q). Velocities are expressed in
    the child frame.
    """

    nq: int
    nv: int

    @abc.abstractmethod
    def placement(self, q: np.ndarray) -> SE3:
        """
        Args:
            q (np.ndarray): joint configuration

        Returns:
            SE3: the transform from the joint frame to the child frame
        """
        pass

    @abc.abstractmethod
    def subspace(self, q: np.ndarray) -> np.ndarray:
        """
        Args:
            q (np.ndarray): joint configuration

        Returns:
            np.ndarray: the 6 x nv motion subspace
        """
        pass

    @abc.abstractmethod
    def integrate(self, q: np.ndarray, dq: np.ndarray) -> np.ndarray:
        """
        Args:
            q (np.ndarray): joint configuration
            dq (np.ndarray): joint velocity integrated over a unit time

        Returns:
            np.ndarray: the configuration reached from q
        """
        pass

    @abc.abstractmethod
    def neutral(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the reference configuration, mapped to the identity placement
        """
        pass

    def bias(self, q: np.ndarray, v: np.ndarray) -> Motion:
        """
        Args:
            q (np.ndarray): joint configuration
            v (np.ndarray): joint velocity

        Returns:
            Motion: the drift acceleration dS/dt v, zero when S is constant in the child frame
        """
        return Motion.zero(SpatialMath.like(q).dtype)

    def subspace_dot(self, q: np.ndarray, v: np.ndarray) -> np.ndarray:
        """
        Args:
            q (np.ndarray): joint configuration
            v (np.ndarray): joint velocity

        Returns:
            np.ndarray: the 6 x nv time derivative of the motion subspace
        """
        return SpatialMath.like(q).zeros(6, self.nv)

    def shortname(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"{self.shortname()}(nq={self.nq}, nv={self.nv})"


class RevoluteJoint(Joint):
    """Rotation about a fixed unit axis"""

    nq = 1
    nv = 1

    def __init__(self, axis: npt.ArrayLike = (0.0, 0.0, 1.0)) -> None:
        self.axis = _unit_axis(axis)

    def placement(self, q: np.ndarray) -> SE3:
        math = SpatialMath.like(q)
        return SE3(math.R_from_axis_angle(self.axis, q[0]), math.zeros(3))

    def subspace(self, q: np.ndarray) -> np.ndarray:
        S = SpatialMath.like(q).zeros(6, 1)
        S[3:, 0] = self.axis
        return S

    def integrate(self, q: np.ndarray, dq: np.ndarray) -> np.ndarray:
        return q + dq

    def neutral(self) -> np.ndarray:
        return np.zeros(1)

    def __repr__(self) -> str:
        return f"RevoluteJoint(axis={self.axis})"


class PrismaticJoint(Joint):
    """Translation along a fixed unit axis"""

    nq = 1
    nv = 1

    def __init__(self, axis: npt.ArrayLike = (0.0, 0.0, 1.0)) -> None:
        self.axis = _unit_axis(axis)

    def placement(self, q: np.ndarray) -> SE3:
        math = SpatialMath.like(q)
        return SE3(math.eye(3), math.asarray(self.axis * q[0]))

    def subspace(self, q: np.ndarray) -> np.ndarray:
        S = SpatialMath.like(q).zeros(6, 1)
        S[:3, 0] = self.axis
        return S

    def integrate(self, q: np.ndarray, dq: np.ndarray) -> np.ndarray:
        return q + dq

    def neutral(self) -> np.ndarray:
        return np.zeros(1)

    def __repr__(self) -> str:
        return f"PrismaticJoint(axis={self.axis})"


class PlanarJoint(Joint):
    """Motion in the xy plane of the joint frame.

    q = [x, y, cos(theta), sin(theta)], v = [vx, vy, omega_z] in the child frame.
    """

    nq = 4
    nv = 3

    def placement(self, q: np.ndarray) -> SE3:
        math = SpatialMath.like(q)
        c, s = q[2], q[3]
        R = math.asarray([[c, -s, 0], [s, c, 0], [0, 0, 1]])
        return SE3(R, math.asarray([q[0], q[1], 0]))

    def subspace(self, q: np.ndarray) -> np.ndarray:
        S = SpatialMath.like(q).zeros(6, 3)
        S[0, 0] = 1
        S[1, 1] = 1
        S[5, 2] = 1
        return S

    def integrate(self, q: np.ndarray, dq: np.ndarray) -> np.ndarray:
        nu = Motion.from_vector(self.subspace(q) @ dq)
        M = self.placement(q) @ exp6(nu)
        return np.array(
            [M.translation[0], M.translation[1], M.rotation[0, 0], M.rotation[1, 0]],
            dtype=q.dtype,
        )

    def neutral(self) -> np.ndarray:
        return np.array([0.0, 0.0, 1.0, 0.0])


class SphericalJoint(Joint):
    """Free rotation. q is a unit quaternion [x, y, z, w], v the angular velocity"""

    nq = 4
    nv = 3

    def placement(self, q: np.ndarray) -> SE3:
        math = SpatialMath.like(q)
        return SE3(math.asarray(Rotation.from_quat(q).as_matrix()), math.zeros(3))

    def subspace(self, q: np.ndarray) -> np.ndarray:
        math = SpatialMath.like(q)
        S = math.zeros(6, 3)
        S[3:, :] = math.eye(3)
        return S

    def integrate(self, q: np.ndarray, dq: np.ndarray) -> np.ndarray:
        R = Rotation.from_quat(q).as_matrix() @ exp3(dq)
        return Rotation.from_matrix(R).as_quat().astype(q.dtype, copy=False)

    def neutral(self) -> np.ndarray:
        return np.array([0.0, 0.0, 0.0, 1.0])


class FreeFlyerJoint(Joint):
    """Unconstrained rigid motion.

    q = [x, y, z, qx, qy, qz, qw], v = [linear, angular] in the child frame.
    """

    nq = 7
    nv = 6

    def placement(self, q: np.ndarray) -> SE3:
        math = SpatialMath.like(q)
        return SE3(math.asarray(Rotation.from_quat(q[3:]).as_matrix()), q[:3].copy())

    def subspace(self, q: np.ndarray) -> np.ndarray:
        return SpatialMath.like(q).eye(6)

    def integrate(self, q: np.ndarray, dq: np.ndarray) -> np.ndarray:
        M = self.placement(q) @ exp6(Motion.from_vector(dq))
        quaternion = Rotation.from_matrix(M.rotation).as_quat()
        return np.concatenate([M.translation, quaternion]).astype(q.dtype, copy=False)

    def neutral(self) -> np.ndarray:
        return np.array([0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0])


class CompositeJoint(Joint):
    """Serial stack of joints without mass in between, seen as a single joint.

    The placement is the product of the sub-joint placements; the columns of the
    motion subspace are the sub-joint subspaces expressed in the last frame.
    """

    def __init__(self, joints: Sequence[Joint]) -> None:
        if len(joints) == 0:
            raise ValueError("A composite joint needs at least one sub-joint")
        self.joints: List[Joint] = list(joints)
        self.nq = sum(joint.nq for joint in self.joints)
        self.nv = sum(joint.nv for joint in self.joints)
        self._idx_q = np.cumsum([0] + [joint.nq for joint in self.joints]).tolist()
        self._idx_v = np.cumsum([0] + [joint.nv for joint in self.joints]).tolist()

    def _q(self, k: int, q: np.ndarray) -> np.ndarray:
        return q[self._idx_q[k] : self._idx_q[k + 1]]

    def _v(self, k: int, v: np.ndarray) -> np.ndarray:
        return v[self._idx_v[k] : self._idx_v[k + 1]]

    def _to_last(self, q: np.ndarray) -> List[SE3]:
        """Placement of the last sub-frame in each sub-joint child frame"""
        transforms = [None] * len(self.joints)
        T = SE3.identity(SpatialMath.like(q).dtype)
        for k in reversed(range(len(self.joints))):
            transforms[k] = T
            T = self.joints[k].placement(self._q(k, q)) @ T
        return transforms

    def placement(self, q: np.ndarray) -> SE3:
        M = SE3.identity(SpatialMath.like(q).dtype)
        for k, joint in enumerate(self.joints):
            M = M @ joint.placement(self._q(k, q))
        return M

    def subspace(self, q: np.ndarray) -> np.ndarray:
        to_last = self._to_last(q)
        return np.concatenate(
            [
                to_last[k].action_inverse @ joint.subspace(self._q(k, q))
                for k, joint in enumerate(self.joints)
            ],
            axis=1,
        )

    def _velocity_terms(self, q: np.ndarray, v: np.ndarray):
        # w[k]: velocity contributed by sub-joint k, V[k]: partial sums up to k
        to_last = self._to_last(q)
        w, V = [], []
        partial = Motion.zero(SpatialMath.like(q).dtype)
        for k, joint in enumerate(self.joints):
            S_k = joint.subspace(self._q(k, q))
            w_k = to_last[k].act_inv(Motion.from_vector(S_k @ self._v(k, v)))
            partial = partial + w_k
            w.append(w_k)
            V.append(partial)
        return to_last, w, V

    def bias(self, q: np.ndarray, v: np.ndarray) -> Motion:
        to_last, w, V = self._velocity_terms(q, v)
        c = Motion.zero(SpatialMath.like(q).dtype)
        for k, joint in enumerate(self.joints):
            c = c + V[k].cross(w[k])
            c = c + to_last[k].act_inv(joint.bias(self._q(k, q), self._v(k, v)))
        return c

    def subspace_dot(self, q: np.ndarray, v: np.ndarray) -> np.ndarray:
        to_last, _, V = self._velocity_terms(q, v)
        v_joint = V[-1]
        blocks = []
        for k, joint in enumerate(self.joints):
            q_k, v_k = self._q(k, q), self._v(k, v)
            X_inv = to_last[k].action_inverse
            relative = v_joint - V[k]
            blocks.append(
                -relative.action @ X_inv @ joint.subspace(q_k)
                + X_inv @ joint.subspace_dot(q_k, v_k)
            )
        return np.concatenate(blocks, axis=1)

    def integrate(self, q: np.ndarray, dq: np.ndarray) -> np.ndarray:
        return np.concatenate(
            [
                joint.integrate(self._q(k, q), self._v(k, dq))
                for k, joint in enumerate(self.joints)
            ]
        )

    def neutral(self) -> np.ndarray:
        return np.concatenate([joint.neutral() for joint in self.joints])

    def __repr__(self) -> str:
        return f"CompositeJoint({self.joints})"
