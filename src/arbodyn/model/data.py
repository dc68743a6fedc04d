from typing import List

from arbodyn.core.spatial import SE3, Force, Motion
from arbodyn.model.model import Model


class Data:
    """Workspace of the algorithms for a given model.

    The containers are allocated once, with sizes taken from the model, and their
    entries are overwritten by each algorithm call. A Data instance must not be used
    by two computations at the same time: allocate one per thread.

    Results stay stale until the next compatible call overwrites them. The stage
    bookkeeping below records which algorithms ran since the last configuration was
    applied; with check_stale=True the frame and Jacobian getters raise a
    RuntimeError when their prerequisite is missing.
    """

    def __init__(self, model: Model, check_stale: bool = False) -> None:
        """
        Args:
            model (Model): the model the workspace is sized for
            check_stale (bool, optional): raise on stale reads. Defaults to False.
        """
        dtype = model.math.dtype
        n = model.njoints
        self.nq = model.nq
        self.nv = model.nv
        self.check_stale = check_stale

        self.liMi: List[SE3] = [SE3.identity(dtype) for _ in range(n)]
        self.oMi: List[SE3] = [SE3.identity(dtype) for _ in range(n)]
        self.v: List[Motion] = [Motion.zero(dtype) for _ in range(n)]
        self.a: List[Motion] = [Motion.zero(dtype) for _ in range(n)]
        self.a_gf: List[Motion] = [Motion.zero(dtype) for _ in range(n)]
        self.ov: List[Motion] = [Motion.zero(dtype) for _ in range(n)]
        self.f: List[Force] = [Force.zero(dtype) for _ in range(n)]
        self.oMf: List[SE3] = [SE3.identity(dtype) for _ in range(model.nframes)]

        self.q = model.neutral()
        self.dq = model.math.zeros(self.nv)
        self.ddq = model.math.zeros(self.nv)
        self.tau = model.math.zeros(self.nv)
        self.nle = model.math.zeros(self.nv)
        self.g = model.math.zeros(self.nv)
        self.J = model.math.zeros(6, self.nv)
        self.dJ = model.math.zeros(6, self.nv)
        self.M = model.math.zeros(self.nv, self.nv)

        # -1 nothing, 0 placements, 1 velocities, 2 accelerations
        self.kinematic_level = -1
        self.frames_updated = False
        self.jacobians_computed = False
        self.jacobians_time_variation_computed = False

    def set_kinematic_level(self, level: int) -> None:
        """Record that a configuration (and velocity, acceleration) was just applied"""
        self.kinematic_level = level
        self.frames_updated = False
        self.jacobians_computed = False
        self.jacobians_time_variation_computed = False

    def require(self, condition: bool, message: str) -> None:
        if self.check_stale and not condition:
            raise RuntimeError(message)

    def require_level(self, level: int, operation: str) -> None:
        names = ["placements", "velocities", "accelerations"]
        self.require(
            self.kinematic_level >= level,
            f"{operation} needs the joint {names[level]}: run forward_kinematics first",
        )

    def __repr__(self) -> str:
        return (
            f"Data(nq={self.nq}, nv={self.nv}, kinematic_level={self.kinematic_level}, "
            f"frames_updated={self.frames_updated})"
        )

