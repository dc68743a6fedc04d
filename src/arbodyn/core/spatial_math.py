# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

import numpy as np
import numpy.typing as npt


class SpatialMath:
    """Class implementing the main geometric functions used for computing rigid-body algorithms

    The instance is bound to a floating point dtype: every array it creates has that dtype.
    This is the only knob the algorithms expose on the scalar type.

    Args:
        dtype (npt.DTypeLike): scalar type of the created arrays. Defaults to np.float64
    """

    def __init__(self, dtype: npt.DTypeLike = np.float64):
        self._dtype = np.dtype(dtype)

    @classmethod
    def like(cls, x: np.ndarray) -> "SpatialMath":
        """
        Args:
            x (np.ndarray): reference array

        Returns:
            SpatialMath: a math instance creating arrays with the floating dtype of x
        """
        x = np.asarray(x)
        return cls(x.dtype if np.issubdtype(x.dtype, np.floating) else np.float64)

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def zeros(self, *x: int) -> np.ndarray:
        """
        Args:
            x (int): dimension

        Returns:
            np.ndarray: zero matrix of dimension x
        """
        return np.zeros(x, dtype=self._dtype)

    def eye(self, x: int) -> np.ndarray:
        """
        Args:
            x (int): dimension

        Returns:
            np.ndarray: identity matrix of dimension x
        """
        return np.eye(x, dtype=self._dtype)

    def asarray(self, x: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            x (npt.ArrayLike): array

        Returns:
            np.ndarray: array with the dtype of the math instance
        """
        return np.asarray(x, dtype=self._dtype)

    @staticmethod
    def skew(x: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            x (npt.ArrayLike): 3D vector

        Returns:
            np.ndarray: the skew symmetric matrix [x] such that [x] @ y = x cross y
        """
        x = np.asarray(x)
        z = np.zeros_like(x[0])
        return np.array(
            [
                [z, -x[2], x[1]],
                [x[2], z, -x[0]],
                [-x[1], x[0], z],
            ]
        )

    def Rx(self, q: float) -> np.ndarray:
        """
        Args:
            q (float): angle value

        Returns:
            np.ndarray: rotation matrix around x axis
        """
        c, s = np.cos(q), np.sin(q)
        return self.asarray([[1, 0, 0], [0, c, -s], [0, s, c]])

    def Ry(self, q: float) -> np.ndarray:
        """
        Args:
            q (float): angle value

        Returns:
            np.ndarray: rotation matrix around y axis
        """
        c, s = np.cos(q), np.sin(q)
        return self.asarray([[c, 0, s], [0, 1, 0], [-s, 0, c]])

    def Rz(self, q: float) -> np.ndarray:
        """
        Args:
            q (float): angle value

        Returns:
            np.ndarray: rotation matrix around z axis
        """
        c, s = np.cos(q), np.sin(q)
        return self.asarray([[c, -s, 0], [s, c, 0], [0, 0, 1]])

    def R_from_RPY(self, rpy: npt.ArrayLike) -> np.ndarray:
        """
        Args:
           rpy (npt.ArrayLike): rotation as rpy angles

        Returns:
            np.ndarray: Rotation matrix
        """
        return self.Rz(rpy[2]) @ self.Ry(rpy[1]) @ self.Rx(rpy[0])

    def R_from_axis_angle(self, axis: npt.ArrayLike, q: float) -> np.ndarray:
        """Rodrigues formula

        Args:
            axis (npt.ArrayLike): unit rotation axis
            q (float): rotation angle

        Returns:
            np.ndarray: rotation matrix
        """
        K = self.skew(self.asarray(axis))
        return self.eye(3) + np.sin(q) * K + (1 - np.cos(q)) * (K @ K)

    def homogeneous(self, R: npt.ArrayLike, p: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            R (npt.ArrayLike): rotation matrix
            p (npt.ArrayLike): translation vector

        Returns:
            np.ndarray: 4x4 homogeneous transform
        """
        H = self.eye(4)
        H[:3, :3] = R
        H[:3, 3] = p
        return H

    def H_from_Pos_RPY(self, xyz: npt.ArrayLike, rpy: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            xyz (npt.ArrayLike): translation vector
            rpy (npt.ArrayLike): rotation as rpy angles

        Returns:
            np.ndarray: Homegeneous transform
        """
        return self.homogeneous(self.R_from_RPY(rpy), xyz)

    def homogeneous_inverse(self, H: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            H (npt.ArrayLike): Homogeneous transform

        Returns:
            np.ndarray: inverse of the homogeneous transform
        """
        R_T = H[:3, :3].T
        return self.homogeneous(R_T, -R_T @ H[:3, 3])

    def spatial_transform(self, R: npt.ArrayLike, p: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            R (npt.ArrayLike): Rotation matrix
            p (npt.ArrayLike): translation vector

        Returns:
            np.ndarray: 6x6 spatial transform acting on [linear, angular] motion vectors
        """
        X = self.zeros(6, 6)
        X[:3, :3] = R
        X[3:, 3:] = R
        X[:3, 3:] = self.skew(p) @ R
        return X

    def adjoint(self, H: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            H (npt.ArrayLike): Homogeneous transform

        Returns:
            np.ndarray: adjoint matrix
        """
        return self.spatial_transform(H[:3, :3], H[:3, 3])

    def adjoint_inverse(self, H: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            H (npt.ArrayLike): Homogeneous transform

        Returns:
            np.ndarray: adjoint matrix of the inverse transform
        """
        R_T = H[:3, :3].T
        return self.spatial_transform(R_T, -R_T @ H[:3, 3])

    def adjoint_mixed(self, H: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            H (npt.ArrayLike): Homogeneous transform

        Returns:
            np.ndarray: block diagonal rotation, the translation is discarded
        """
        return self.spatial_transform(H[:3, :3], self.zeros(3))

    def adjoint_mixed_inverse(self, H: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            H (npt.ArrayLike): Homogeneous transform

        Returns:
            np.ndarray: block diagonal transposed rotation
        """
        return self.spatial_transform(H[:3, :3].T, self.zeros(3))

    def spatial_skew(self, v: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            v (npt.ArrayLike): 6D vector [linear, angular]

        Returns:
            np.ndarray: spatial skew matrix, the motion cross product v x
        """
        X = self.zeros(6, 6)
        X[:3, :3] = self.skew(v[3:])
        X[:3, 3:] = self.skew(v[:3])
        X[3:, 3:] = self.skew(v[3:])
        return X

    def spatial_skew_star(self, v: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            v (npt.ArrayLike): 6D vector

        Returns:
            np.ndarray: negative spatial skew matrix traspose, the force cross product v x*
        """
        return -self.spatial_skew(v).T

    def spatial_inertia(
        self,
        inertia_matrix: npt.ArrayLike,
        mass: float,
        c: npt.ArrayLike,
        rpy: npt.ArrayLike,
    ) -> np.ndarray:
        """
        Args:
            inertia_matrix (npt.ArrayLike): rotational inertia at the center of mass
            mass (float): mass value
            c (npt.ArrayLike): center of mass position
            rpy (npt.ArrayLike): orientation of the inertia axes

        Returns:
            np.ndarray: the 6x6 inertia matrix expressed at the origin of the link (with rotation)
        """
        IO = self.zeros(6, 6)
        Sc = self.skew(self.asarray(c))
        R = self.R_from_RPY(rpy)
        IO[:3, :3] = self.eye(3) * mass
        IO[:3, 3:] = mass * Sc.T
        IO[3:, :3] = mass * Sc
        IO[3:, 3:] = R @ inertia_matrix @ R.T + mass * Sc @ Sc.T
        return IO
