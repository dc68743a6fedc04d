import dataclasses
from typing import List, Tuple

import numpy as np
import numpy.typing as npt
from prettytable import PrettyTable

from arbodyn.core.constants import FrameType
from arbodyn.core.spatial import SE3, Inertia, Motion
from arbodyn.core.spatial_math import SpatialMath
from arbodyn.core.utils import convert_to_vector
from arbodyn.model.joint import Joint
from arbodyn.model.tree import Tree


@dataclasses.dataclass(frozen=True)
class Frame:
    """A named placement rigidly attached to a joint. It is not a node of the tree"""

    name: str
    parent: int
    placement: SE3
    type: FrameType = FrameType.OP_FRAME


@dataclasses.dataclass(frozen=True)
class Model:
    """
    Model class. It describes the kinematic tree with its joints, the bodies attached
    to them and the frames. Index 0 is the universe: joints[0] is None and
    inertias[0] is a zero inertia.

    The model is immutable and can be shared between threads, each one owning its Data.
    """

    name: str
    names: Tuple[str, ...]
    joints: Tuple[Joint, ...]
    parents: Tuple[int, ...]
    joint_placements: Tuple[SE3, ...]
    inertias: Tuple[Inertia, ...]
    frames: Tuple[Frame, ...]
    gravity: Motion
    math: SpatialMath
    tree: Tree = dataclasses.field(init=False)
    idx_qs: Tuple[int, ...] = dataclasses.field(init=False)
    idx_vs: Tuple[int, ...] = dataclasses.field(init=False)
    nqs: Tuple[int, ...] = dataclasses.field(init=False)
    nvs: Tuple[int, ...] = dataclasses.field(init=False)

    def __post_init__(self):
        sizes = {
            len(self.names),
            len(self.joints),
            len(self.parents),
            len(self.joint_placements),
            len(self.inertias),
        }
        if len(sizes) != 1:
            raise ValueError("The per joint fields of the model have different lengths")
        object.__setattr__(self, "tree", Tree(self.parents))
        nqs = (0,) + tuple(joint.nq for joint in self.joints[1:])
        nvs = (0,) + tuple(joint.nv for joint in self.joints[1:])
        object.__setattr__(self, "nqs", nqs)
        object.__setattr__(self, "nvs", nvs)
        object.__setattr__(self, "idx_qs", tuple(np.cumsum((0,) + nqs[:-1]).tolist()))
        object.__setattr__(self, "idx_vs", tuple(np.cumsum((0,) + nvs[:-1]).tolist()))

    @property
    def njoints(self) -> int:
        """
        Returns:
            int: the number of joints, universe included
        """
        return len(self.joints)

    @property
    def nframes(self) -> int:
        return len(self.frames)

    @property
    def nq(self) -> int:
        return sum(self.nqs)

    @property
    def nv(self) -> int:
        return sum(self.nvs)

    def q_slice(self, i: int) -> slice:
        return slice(self.idx_qs[i], self.idx_qs[i] + self.nqs[i])

    def v_slice(self, i: int) -> slice:
        return slice(self.idx_vs[i], self.idx_vs[i] + self.nvs[i])

    def get_joint_id(self, name: str) -> int:
        """
        Args:
            name (str): joint name

        Returns:
            int: the joint index
        """
        if name not in self.names:
            raise ValueError(f"{name} is not a joint of the model {self.name}")
        return self.names.index(name)

    def exist_frame(self, name: str) -> bool:
        return any(frame.name == name for frame in self.frames)

    def get_frame_id(self, name: str) -> int:
        """
        Args:
            name (str): frame name

        Returns:
            int: the index of the first frame with that name
        """
        for i, frame in enumerate(self.frames):
            if frame.name == name:
                return i
        raise ValueError(f"{name} is not a frame of the model {self.name}")

    def supports(self, i: int) -> List[int]:
        return self.tree.supports(i)

    def neutral(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the configuration where every joint placement is the identity
        """
        q = self.math.zeros(self.nq)
        for i in self.tree:
            q[self.q_slice(i)] = self.joints[i].neutral()
        return q

    def integrate(self, q: npt.ArrayLike, v: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            q (npt.ArrayLike): configuration
            v (npt.ArrayLike): velocity integrated over a unit time

        Returns:
            np.ndarray: the configuration reached from q, on the joint manifolds
        """
        q = convert_to_vector(q, self.nq, "q", self.math)
        v = convert_to_vector(v, self.nv, "v", self.math)
        result = q.copy()
        for i in self.tree:
            q_i = self.q_slice(i)
            result[q_i] = self.joints[i].integrate(q[q_i], v[self.v_slice(i)])
        return result

    def random_configuration(self, rng: np.random.Generator = None) -> np.ndarray:
        """
        Args:
            rng (np.random.Generator, optional): random generator. Defaults to None.

        Returns:
            np.ndarray: a valid configuration, with unit quaternions where needed
        """
        rng = np.random.default_rng() if rng is None else rng
        return self.integrate(self.neutral(), rng.uniform(-1.0, 1.0, self.nv))

    def total_mass(self) -> float:
        """total mass of the bodies attached to the joints

        Returns:
            float: the total mass of the model
        """
        return float(sum(inertia.mass for inertia in self.inertias))

    def table(self) -> PrettyTable:
        """
        Returns:
            PrettyTable: the joints with their parents, kinds and dimensions
        """
        table = PrettyTable(["Idx", "Joint name", "Type", "Parent", "nq", "nv", "Mass"])
        table.title = f"Joints of {self.name}"
        for i in range(self.njoints):
            joint = self.joints[i]
            table.add_row(
                [
                    i,
                    self.names[i],
                    "universe" if joint is None else joint.shortname(),
                    self.names[self.parents[i]],
                    self.nqs[i],
                    self.nvs[i],
                    self.inertias[i].mass,
                ]
            )
        return table

    def frames_table(self) -> PrettyTable:
        table = PrettyTable(["Idx", "Frame name", "Type", "Parent"])
        table.title = f"Frames of {self.name}"
        for i, frame in enumerate(self.frames):
            table.add_row([i, frame.name, frame.type.name, self.names[frame.parent]])
        return table
