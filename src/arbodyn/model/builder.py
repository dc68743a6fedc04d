import logging
from typing import List

import numpy as np
import numpy.typing as npt

from arbodyn.core.constants import FrameType
from arbodyn.core.spatial import SE3, Inertia, Motion
from arbodyn.core.spatial_math import SpatialMath
from arbodyn.model.joint import Joint
from arbodyn.model.model import Frame, Model


class ModelBuilder:
    """Builds a Model joint by joint.

    Joints must be added parents first, so that the index order is a topological
    order of the tree. Index 0 is the universe.
    """

    def __init__(
        self,
        name: str = "model",
        gravity: npt.ArrayLike = (0.0, 0.0, -9.81),
        math: SpatialMath = None,
    ) -> None:
        """
        Args:
            name (str, optional): model name. Defaults to "model".
            gravity (npt.ArrayLike, optional): linear gravity acceleration in the world frame. Defaults to (0, 0, -9.81).
            math (SpatialMath, optional): the math instance fixing the scalar type. Defaults to float64.
        """
        self.name = name
        self.math = SpatialMath() if math is None else math
        gravity = self._freeze(gravity)
        if gravity.shape != (3,):
            raise ValueError(f"The gravity must be a 3D vector, got {gravity.shape}")
        self.gravity = Motion(gravity, self._freeze(self.math.zeros(3)))
        self.names: List[str] = ["universe"]
        self.joints: List[Joint] = [None]
        self.parents: List[int] = [0]
        self.joint_placements: List[SE3] = [self._cast(SE3.identity())]
        self.inertias: List[Inertia] = [self._cast_inertia(Inertia.zero())]
        self.frames: List[Frame] = [
            Frame("universe", 0, self._cast(SE3.identity()), FrameType.OP_FRAME)
        ]

    def add_joint(
        self,
        parent: int,
        joint: Joint,
        placement: SE3 = None,
        name: str = None,
    ) -> int:
        """
        Args:
            parent (int): index of the parent joint, 0 for the universe
            joint (Joint): the joint kind
            placement (SE3, optional): placement of the joint frame in the parent joint frame. Defaults to identity.
            name (str, optional): joint name. Defaults to "joint_<index>".

        Returns:
            int: the index of the new joint
        """
        index = len(self.joints)
        name = f"joint_{index}" if name is None else name
        if not 0 <= parent < index:
            raise ValueError(
                f"The parent of {name} must be an existing joint index in [0, {index}), got {parent}"
            )
        if name in self.names:
            raise ValueError(f"A joint named {name} is already in the model")
        if any(frame.name == name for frame in self.frames):
            raise ValueError(f"A frame named {name} is already in the model")
        if not isinstance(joint, Joint):
            raise ValueError(f"{joint} is not a Joint")
        placement = SE3.identity(self.math.dtype) if placement is None else placement
        self.names.append(name)
        self.joints.append(joint)
        self.parents.append(parent)
        self.joint_placements.append(self._cast(placement))
        self.inertias.append(self._cast_inertia(Inertia.zero()))
        self.frames.append(
            Frame(name, index, self._cast(SE3.identity()), FrameType.JOINT)
        )
        return index

    def append_body(
        self, joint_id: int, inertia: Inertia, placement: SE3 = None
    ) -> None:
        """Attach a rigid body to a joint, merging it with the bodies already attached.

        Args:
            joint_id (int): the supporting joint
            inertia (Inertia): inertia of the body in its own frame
            placement (SE3, optional): placement of the body frame in the joint frame. Defaults to identity.
        """
        if not 0 < joint_id < len(self.joints):
            raise ValueError(f"Cannot attach a body to joint {joint_id}")
        if inertia.mass < 0:
            raise ValueError(f"The body mass must be non negative, got {inertia.mass}")
        if placement is not None:
            inertia = placement.act(inertia)
        self.inertias[joint_id] = self._cast_inertia(self.inertias[joint_id] + inertia)

    def add_frame(
        self,
        name: str,
        parent: int,
        placement: SE3 = None,
        frame_type: FrameType = FrameType.OP_FRAME,
    ) -> int:
        """
        Args:
            name (str): frame name
            parent (int): the joint the frame is attached to
            placement (SE3, optional): placement in the joint frame. Defaults to identity.
            frame_type (FrameType, optional): Defaults to FrameType.OP_FRAME.

        Returns:
            int: the index of the new frame
        """
        if not 0 <= parent < len(self.joints):
            raise ValueError(f"Cannot attach frame {name} to joint {parent}")
        if any(frame.name == name for frame in self.frames):
            raise ValueError(f"A frame named {name} is already in the model")
        placement = SE3.identity(self.math.dtype) if placement is None else placement
        self.frames.append(Frame(name, parent, self._cast(placement), frame_type))
        return len(self.frames) - 1

    def build(self) -> Model:
        """
        Returns:
            Model: the immutable model
        """
        model = Model(
            name=self.name,
            names=tuple(self.names),
            joints=tuple(self.joints),
            parents=tuple(self.parents),
            joint_placements=tuple(self.joint_placements),
            inertias=tuple(self.inertias),
            frames=tuple(self.frames),
            gravity=self.gravity,
            math=self.math,
        )
        logging.debug(model.table())
        logging.debug(model.frames_table())
        return model

    def _freeze(self, x: npt.ArrayLike) -> np.ndarray:
        """Private read only copy in the model dtype, detached from the caller arrays"""
        x = np.array(x, dtype=self.math.dtype)
        x.setflags(write=False)
        return x

    def _cast(self, placement: SE3) -> SE3:
        return SE3(
            self._freeze(placement.rotation), self._freeze(placement.translation)
        )

    def _cast_inertia(self, inertia: Inertia) -> Inertia:
        return Inertia(
            float(inertia.mass),
            self._freeze(inertia.lever),
            self._freeze(inertia.rotational),
        )
