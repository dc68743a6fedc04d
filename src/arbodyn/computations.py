# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

import logging

import numpy as np

from arbodyn.core import rnea as rnea_algorithms
from arbodyn.core.constants import ReferenceFrame
from arbodyn.core.frames import (
    frames_forward_kinematics,
    get_frame_jacobian,
    get_frame_jacobian_time_variation,
    get_frame_placement,
    get_frame_velocity,
)
from arbodyn.core.jacobian import (
    compute_joint_jacobians,
    compute_joint_jacobians_time_variation,
)
from arbodyn.core.kinematics import forward_kinematics
from arbodyn.core.utils import check_reference_frame
from arbodyn.model.data import Data
from arbodyn.model.model import Model


class KinDynComputations:
    """This is a small class that retrieves robot quantities for a model, frame by name.

    It owns one Data workspace, so an instance must not be shared between threads.
    """

    def __init__(
        self,
        model: Model,
        frame_velocity_representation: ReferenceFrame = ReferenceFrame.WORLD,
    ) -> None:
        """
        Args:
            model (Model): the model
            frame_velocity_representation (ReferenceFrame, optional): convention of the
                frame velocities and Jacobians. Defaults to ReferenceFrame.WORLD.
        """
        self.model = model
        self.data = Data(model)
        self.NDoF = model.nv
        self.set_frame_velocity_representation(frame_velocity_representation)
        logging.debug(
            f"KinDynComputations for {model.name}: nq={model.nq}, nv={model.nv}, "
            f"{model.njoints - 1} joints, {model.nframes} frames"
        )

    def set_frame_velocity_representation(self, representation: ReferenceFrame) -> None:
        """Sets the representation of the velocity of the frames

        Args:
            representation (ReferenceFrame): The representation of the velocity
        """
        self.frame_velocity_representation = check_reference_frame(representation)
        logging.debug(
            f"Frame velocity representation: {self.frame_velocity_representation.name}"
        )

    def forward_kinematics(self, frame: str, q: np.ndarray) -> np.ndarray:
        """Computes the forward kinematics relative to the specified frame

        Args:
            frame (str): The frame to which the fk will be computed
            q (np.ndarray): The configuration

        Returns:
            H (np.ndarray): The fk represented as Homogenous transformation matrix
        """
        frame_id = self.model.get_frame_id(frame)
        frames_forward_kinematics(self.model, self.data, q)
        return get_frame_placement(self.model, self.data, frame_id).homogeneous

    def jacobian(self, frame: str, q: np.ndarray) -> np.ndarray:
        """Returns the Jacobian relative to the specified frame

        Args:
            frame (str): The frame to which the jacobian will be computed
            q (np.ndarray): The configuration

        Returns:
            J (np.ndarray): The 6 x nv Jacobian relative to the frame
        """
        frame_id = self.model.get_frame_id(frame)
        compute_joint_jacobians(self.model, self.data, q)
        return get_frame_jacobian(
            self.model, self.data, frame_id, self.frame_velocity_representation
        )

    def jacobian_dot(self, frame: str, q: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Returns the Jacobian derivative relative to the specified frame

        Args:
            frame (str): The frame to which the jacobian will be computed
            q (np.ndarray): The configuration
            v (np.ndarray): The velocity

        Returns:
            Jdot (np.ndarray): The Jacobian derivative relative to the frame
        """
        frame_id = self.model.get_frame_id(frame)
        compute_joint_jacobians_time_variation(self.model, self.data, q, v)
        return get_frame_jacobian_time_variation(
            self.model, self.data, frame_id, self.frame_velocity_representation
        )

    def frame_velocity(self, frame: str, q: np.ndarray, v: np.ndarray) -> np.ndarray:
        """
        Args:
            frame (str): The frame
            q (np.ndarray): The configuration
            v (np.ndarray): The velocity

        Returns:
            np.ndarray: the 6D velocity [linear, angular] of the frame
        """
        frame_id = self.model.get_frame_id(frame)
        forward_kinematics(self.model, self.data, q, v)
        return get_frame_velocity(
            self.model, self.data, frame_id, self.frame_velocity_representation
        ).vector

    def rnea(
        self, q: np.ndarray, v: np.ndarray, a: np.ndarray, fext: list = None
    ) -> np.ndarray:
        """Returns the generalized forces computed with the Recursive Newton-Euler algorithm

        Args:
            q (np.ndarray): The configuration
            v (np.ndarray): The velocity
            a (np.ndarray): The acceleration
            fext (list, optional): one force per joint, in the local joint frames. Defaults to None.

        Returns:
            tau (np.ndarray): the generalized forces
        """
        return rnea_algorithms.rnea(self.model, self.data, q, v, a, fext)

    def bias_force(self, q: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Returns the bias force of the dynamics equation, using RNEA with zero acceleration

        Args:
            q (np.ndarray): The configuration
            v (np.ndarray): The velocity

        Returns:
            h (np.ndarray): the bias force
        """
        return rnea_algorithms.non_linear_effects(self.model, self.data, q, v)

    def coriolis_term(self, q: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Returns the coriolis term of the dynamics equation

        Args:
            q (np.ndarray): The configuration
            v (np.ndarray): The velocity

        Returns:
            C (np.ndarray): the Coriolis term
        """
        # the bias force without the gravity term
        g = self.gravity_term(q)
        return self.bias_force(q, v) - g

    def gravity_term(self, q: np.ndarray) -> np.ndarray:
        """Returns the gravity term of the dynamics equation

        Args:
            q (np.ndarray): The configuration

        Returns:
            G (np.ndarray): the gravity term
        """
        return rnea_algorithms.compute_generalized_gravity(self.model, self.data, q)

    def mass_matrix(self, q: np.ndarray) -> np.ndarray:
        """Returns the Mass Matrix, assembled from RNEA columns

        Args:
            q (np.ndarray): The configuration

        Returns:
            M (np.ndarray): Mass Matrix
        """
        return rnea_algorithms.compute_mass_matrix(self.model, self.data, q)

    def forward_dynamics(
        self, q: np.ndarray, v: np.ndarray, tau: np.ndarray, fext: list = None
    ) -> np.ndarray:
        """
        Args:
            q (np.ndarray): The configuration
            v (np.ndarray): The velocity
            tau (np.ndarray): The generalized forces
            fext (list, optional): external forces as in rnea. Defaults to None.

        Returns:
            ddq (np.ndarray): the acceleration
        """
        return rnea_algorithms.forward_dynamics(
            self.model, self.data, q, v, tau, fext
        )

    def get_total_mass(self) -> float:
        """Returns the total mass of the robot

        Returns:
            mass: The total mass
        """
        return self.model.total_mass()
