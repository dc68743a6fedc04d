# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from enum import IntEnum


class ReferenceFrame(IntEnum):
    """Convention used to express frame velocities, accelerations and Jacobians.

    LOCAL: axes rigidly attached to the frame, rotating with it.
    WORLD: axes aligned with the world frame, origin translated to the frame origin.
    """

    LOCAL = 0
    WORLD = 1


class FrameType(IntEnum):
    """Origin of a frame stored in the model"""

    OP_FRAME = 0
    JOINT = 1
