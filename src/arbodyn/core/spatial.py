# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

"""Spatial algebra: rigid transforms, motions, forces and spatial inertias.

Six dimensional quantities are ordered linear part first, angular part second.
"""

import dataclasses
from typing import Union

import numpy as np
import numpy.typing as npt
from scipy.spatial.transform import Rotation

from arbodyn.core.spatial_math import SpatialMath


@dataclasses.dataclass(frozen=True, slots=True, eq=False)
class Motion:
    """Spatial velocity or acceleration"""

    linear: np.ndarray
    angular: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "linear", np.asarray(self.linear))
        object.__setattr__(self, "angular", np.asarray(self.angular))

    @staticmethod
    def zero(dtype: npt.DTypeLike = np.float64) -> "Motion":
        return Motion(np.zeros(3, dtype=dtype), np.zeros(3, dtype=dtype))

    @staticmethod
    def from_vector(v: npt.ArrayLike) -> "Motion":
        v = np.asarray(v)
        if v.shape != (6,):
            raise ValueError(f"A motion vector has 6 elements, got shape {v.shape}")
        return Motion(v[:3].copy(), v[3:].copy())

    @staticmethod
    def random(rng: np.random.Generator = None) -> "Motion":
        rng = np.random.default_rng() if rng is None else rng
        return Motion.from_vector(rng.uniform(-1.0, 1.0, 6))

    @property
    def vector(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the 6D vector [linear, angular]
        """
        return np.concatenate([self.linear, self.angular])

    @property
    def action(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: 6x6 matrix of the motion cross product self x
        """
        return SpatialMath.like(self.linear).spatial_skew(self.vector)

    @property
    def dual_action(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: 6x6 matrix of the force cross product self x*
        """
        return SpatialMath.like(self.linear).spatial_skew_star(self.vector)

    def __add__(self, other: "Motion") -> "Motion":
        return Motion(self.linear + other.linear, self.angular + other.angular)

    def __sub__(self, other: "Motion") -> "Motion":
        return Motion(self.linear - other.linear, self.angular - other.angular)

    def __neg__(self) -> "Motion":
        return Motion(-self.linear, -self.angular)

    def __mul__(self, scalar: float) -> "Motion":
        return Motion(self.linear * scalar, self.angular * scalar)

    __rmul__ = __mul__

    def cross(self, other: Union["Motion", "Force"]) -> Union["Motion", "Force"]:
        """Spatial cross product.

        Against a Motion it is the Lie bracket (self x other), against a Force it is
        the dual product (self x* other).

        Args:
            other (Union[Motion, Force]): the right operand

        Returns:
            Union[Motion, Force]: a quantity of the same type as other
        """
        if isinstance(other, Motion):
            return Motion(
                np.cross(self.angular, other.linear)
                + np.cross(self.linear, other.angular),
                np.cross(self.angular, other.angular),
            )
        if isinstance(other, Force):
            return Force(
                np.cross(self.angular, other.linear),
                np.cross(self.angular, other.angular)
                + np.cross(self.linear, other.linear),
            )
        raise TypeError(f"Cannot cross a Motion with {type(other).__name__}")

    def dot(self, force: "Force") -> float:
        """Power developed by force along this motion"""
        return force.linear @ self.linear + force.angular @ self.angular

    def is_approx(self, other: "Motion", prec: float = 1e-12) -> bool:
        return np.allclose(self.vector, other.vector, rtol=0.0, atol=prec)

    def __repr__(self) -> str:
        return f"Motion(linear={self.linear}, angular={self.angular})"


@dataclasses.dataclass(frozen=True, slots=True, eq=False)
class Force:
    """Spatial force (wrench)"""

    linear: np.ndarray
    angular: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "linear", np.asarray(self.linear))
        object.__setattr__(self, "angular", np.asarray(self.angular))

    @staticmethod
    def zero(dtype: npt.DTypeLike = np.float64) -> "Force":
        return Force(np.zeros(3, dtype=dtype), np.zeros(3, dtype=dtype))

    @staticmethod
    def from_vector(f: npt.ArrayLike) -> "Force":
        f = np.asarray(f)
        if f.shape != (6,):
            raise ValueError(f"A force vector has 6 elements, got shape {f.shape}")
        return Force(f[:3].copy(), f[3:].copy())

    @staticmethod
    def random(rng: np.random.Generator = None) -> "Force":
        rng = np.random.default_rng() if rng is None else rng
        return Force.from_vector(rng.uniform(-1.0, 1.0, 6))

    @property
    def vector(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the 6D vector [linear, angular]
        """
        return np.concatenate([self.linear, self.angular])

    def __add__(self, other: "Force") -> "Force":
        return Force(self.linear + other.linear, self.angular + other.angular)

    def __sub__(self, other: "Force") -> "Force":
        return Force(self.linear - other.linear, self.angular - other.angular)

    def __neg__(self) -> "Force":
        return Force(-self.linear, -self.angular)

    def __mul__(self, scalar: float) -> "Force":
        return Force(self.linear * scalar, self.angular * scalar)

    __rmul__ = __mul__

    def dot(self, motion: Motion) -> float:
        return motion.dot(self)

    def is_approx(self, other: "Force", prec: float = 1e-12) -> bool:
        return np.allclose(self.vector, other.vector, rtol=0.0, atol=prec)

    def __repr__(self) -> str:
        return f"Force(linear={self.linear}, angular={self.angular})"


@dataclasses.dataclass(frozen=True, slots=True, eq=False)
class SE3:
    """Rigid transform. Applied to a point p it returns rotation @ p + translation"""

    rotation: np.ndarray
    translation: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "rotation", np.asarray(self.rotation))
        object.__setattr__(self, "translation", np.asarray(self.translation))

    @staticmethod
    def identity(dtype: npt.DTypeLike = np.float64) -> "SE3":
        return SE3(np.eye(3, dtype=dtype), np.zeros(3, dtype=dtype))

    @staticmethod
    def random(rng: np.random.Generator = None) -> "SE3":
        rng = np.random.default_rng() if rng is None else rng
        rotation = Rotation.random(None, rng).as_matrix()
        return SE3(rotation, rng.uniform(-1.0, 1.0, 3))

    @staticmethod
    def from_homogeneous(H: npt.ArrayLike) -> "SE3":
        H = np.asarray(H)
        return SE3(H[:3, :3].copy(), H[:3, 3].copy())

    @property
    def homogeneous(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the 4x4 homogeneous matrix
        """
        return SpatialMath.like(self.rotation).homogeneous(
            self.rotation, self.translation
        )

    @property
    def action(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: 6x6 matrix acting on motion vectors
        """
        return SpatialMath.like(self.rotation).spatial_transform(
            self.rotation, self.translation
        )

    @property
    def action_inverse(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: 6x6 matrix acting on motion vectors with the inverse transform
        """
        R_T = self.rotation.T
        return SpatialMath.like(self.rotation).spatial_transform(
            R_T, -R_T @ self.translation
        )

    @property
    def dual_action(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: 6x6 matrix acting on force vectors, the inverse transpose of action
        """
        return self.action_inverse.T

    def __matmul__(self, other: "SE3") -> "SE3":
        if not isinstance(other, SE3):
            return NotImplemented
        return SE3(
            self.rotation @ other.rotation,
            self.rotation @ other.translation + self.translation,
        )

    def inverse(self) -> "SE3":
        R_T = self.rotation.T
        return SE3(R_T, -R_T @ self.translation)

    def act_point(self, p: npt.ArrayLike) -> np.ndarray:
        return self.rotation @ np.asarray(p) + self.translation

    def act_inv_point(self, p: npt.ArrayLike) -> np.ndarray:
        return self.rotation.T @ (np.asarray(p) - self.translation)

    def act(self, x):
        """Express x, given in the source frame of the transform, in its target frame.

        Args:
            x (Union[SE3, Motion, Force, Inertia]): the transformed quantity

        Returns:
            the transformed quantity, same type as x
        """
        R, p = self.rotation, self.translation
        if isinstance(x, Motion):
            angular = R @ x.angular
            return Motion(R @ x.linear + np.cross(p, angular), angular)
        if isinstance(x, Force):
            linear = R @ x.linear
            return Force(linear, R @ x.angular + np.cross(p, linear))
        if isinstance(x, SE3):
            return self @ x
        if isinstance(x, Inertia):
            return Inertia(x.mass, R @ x.lever + p, R @ x.rotational @ R.T)
        raise TypeError(f"SE3 cannot act on {type(x).__name__}")

    def act_inv(self, x):
        """Inverse of act, without forming the inverse transform"""
        R_T, p = self.rotation.T, self.translation
        if isinstance(x, Motion):
            return Motion(R_T @ (x.linear - np.cross(p, x.angular)), R_T @ x.angular)
        if isinstance(x, Force):
            return Force(R_T @ x.linear, R_T @ (x.angular - np.cross(p, x.linear)))
        if isinstance(x, SE3):
            return SE3(R_T @ x.rotation, R_T @ (x.translation - p))
        if isinstance(x, Inertia):
            return Inertia(x.mass, R_T @ (x.lever - p), R_T @ x.rotational @ R_T.T)
        raise TypeError(f"SE3 cannot act on {type(x).__name__}")

    def is_approx(self, other: "SE3", prec: float = 1e-12) -> bool:
        return np.allclose(
            self.rotation, other.rotation, rtol=0.0, atol=prec
        ) and np.allclose(self.translation, other.translation, rtol=0.0, atol=prec)

    def __repr__(self) -> str:
        return f"SE3(rotation={self.rotation.tolist()}, translation={self.translation})"


@dataclasses.dataclass(frozen=True, slots=True, eq=False)
class Inertia:
    """Spatial inertia of a rigid body.

    Attributes:
        mass (float): the body mass
        lever (np.ndarray): center of mass position in the body frame
        rotational (np.ndarray): 3x3 rotational inertia about the center of mass, body axes
    """

    mass: float
    lever: np.ndarray
    rotational: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "lever", np.asarray(self.lever))
        object.__setattr__(self, "rotational", np.asarray(self.rotational))

    @staticmethod
    def zero(dtype: npt.DTypeLike = np.float64) -> "Inertia":
        return Inertia(0.0, np.zeros(3, dtype=dtype), np.zeros((3, 3), dtype=dtype))

    @staticmethod
    def from_point_mass(
        mass: float, lever: npt.ArrayLike = (0.0, 0.0, 0.0)
    ) -> "Inertia":
        return Inertia(mass, np.asarray(lever, dtype=np.float64), np.zeros((3, 3)))

    @staticmethod
    def from_sphere(mass: float, radius: float) -> "Inertia":
        return Inertia(mass, np.zeros(3), np.eye(3) * 2.0 / 5.0 * mass * radius**2)

    @staticmethod
    def from_box(mass: float, x: float, y: float, z: float) -> "Inertia":
        a, b, c = x * x, y * y, z * z
        return Inertia(mass, np.zeros(3), np.diag([b + c, a + c, a + b]) * mass / 12.0)

    @staticmethod
    def from_cylinder(mass: float, radius: float, length: float) -> "Inertia":
        """Cylinder aligned with the z axis"""
        side = mass * (3.0 * radius**2 + length**2) / 12.0
        return Inertia(mass, np.zeros(3), np.diag([side, side, mass * radius**2 / 2.0]))

    @staticmethod
    def random(rng: np.random.Generator = None) -> "Inertia":
        rng = np.random.default_rng() if rng is None else rng
        A = rng.uniform(-1.0, 1.0, (3, 3))
        return Inertia(
            rng.uniform(0.5, 2.0),
            rng.uniform(-0.5, 0.5, 3),
            A @ A.T + 0.1 * np.eye(3),
        )

    @property
    def matrix(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the 6x6 inertia matrix expressed at the body frame origin
        """
        math = SpatialMath.like(self.rotational)
        return math.spatial_inertia(
            self.rotational, self.mass, self.lever, math.zeros(3)
        )

    def __mul__(self, v: Motion) -> Force:
        if not isinstance(v, Motion):
            return NotImplemented
        linear = self.mass * (v.linear - np.cross(self.lever, v.angular))
        return Force(
            linear, self.rotational @ v.angular + np.cross(self.lever, linear)
        )

    def __add__(self, other: "Inertia") -> "Inertia":
        """Inertia of the rigid union of two bodies expressed in the same frame"""
        mass = self.mass + other.mass
        if mass == 0:
            return Inertia(
                0.0, np.zeros_like(self.lever), self.rotational + other.rotational
            )
        lever = (self.mass * self.lever + other.mass * other.lever) / mass
        d = SpatialMath.like(self.lever).skew(self.lever - other.lever)
        rotational = (
            self.rotational
            + other.rotational
            - (self.mass * other.mass / mass) * (d @ d)
        )
        return Inertia(mass, lever, rotational)

    def is_approx(self, other: "Inertia", prec: float = 1e-12) -> bool:
        return np.allclose(self.matrix, other.matrix, rtol=0.0, atol=prec)

    def __repr__(self) -> str:
        return (
            f"Inertia(mass={self.mass}, lever={self.lever}, "
            f"rotational={self.rotational.tolist()})"
        )


def exp3(w: npt.ArrayLike) -> np.ndarray:
    """
    Args:
        w (npt.ArrayLike): rotation vector

    Returns:
        np.ndarray: the rotation matrix exp([w])
    """
    w = np.asarray(w)
    return Rotation.from_rotvec(w).as_matrix().astype(w.dtype, copy=False)


def log3(R: npt.ArrayLike) -> np.ndarray:
    """
    Args:
        R (npt.ArrayLike): rotation matrix

    Returns:
        np.ndarray: the rotation vector w such that exp3(w) == R
    """
    R = np.asarray(R)
    return Rotation.from_matrix(R).as_rotvec().astype(R.dtype, copy=False)


def _left_jacobian_coefficients(theta: float):
    if theta < 1e-2:
        t2 = theta**2
        return (
            0.5 - t2 / 24.0 + t2**2 / 720.0,
            1.0 / 6.0 - t2 / 120.0 + t2**2 / 5040.0,
        )
    # 1 - cos(theta) = 2 sin^2(theta / 2)
    half_sin = np.sin(theta / 2.0)
    return (
        2.0 * half_sin**2 / theta**2,
        (theta - np.sin(theta)) / theta**3,
    )


def exp6(nu: Motion) -> SE3:
    """
    Args:
        nu (Motion): twist expressed in the body frame

    Returns:
        SE3: the transform reached after following nu for a unit time
    """
    w = nu.angular
    K = SpatialMath.like(w).skew(w)
    alpha, beta = _left_jacobian_coefficients(np.linalg.norm(w))
    V = np.eye(3, dtype=w.dtype) + alpha * K + beta * (K @ K)
    return SE3(exp3(w), V @ nu.linear)


def log6(M: SE3) -> Motion:
    """
    Args:
        M (SE3): rigid transform

    Returns:
        Motion: the twist nu such that exp6(nu) == M
    """
    w = log3(M.rotation)
    theta = np.linalg.norm(w)
    K = SpatialMath.like(w).skew(w)
    if theta < 1e-2:
        t2 = theta**2
        gamma = 1.0 / 12.0 + t2 / 720.0 + t2**2 / 30240.0
    else:
        half = theta / 2.0
        gamma = (1.0 - half * np.cos(half) / np.sin(half)) / theta**2
    V_inv = np.eye(3, dtype=w.dtype) - 0.5 * K + gamma * (K @ K)
    return Motion(V_inv @ M.translation, w)
