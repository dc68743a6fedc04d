# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from .constants import FrameType, ReferenceFrame
from .spatial import SE3, Force, Inertia, Motion, exp3, exp6, log3, log6
from .spatial_math import SpatialMath
