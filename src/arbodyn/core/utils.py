# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from typing import List, Optional, Sequence, Union

import numpy as np
import numpy.typing as npt

from arbodyn.core.constants import ReferenceFrame
from arbodyn.core.spatial import Force
from arbodyn.core.spatial_math import SpatialMath


def convert_to_vector(
    x: npt.ArrayLike, size: int, name: str, math: SpatialMath
) -> np.ndarray:
    """Convert an input to a 1D array of the model dtype and check its size.

    Args:
        x (npt.ArrayLike): the input
        size (int): the expected number of elements
        name (str): argument name, used in the error message
        math (SpatialMath): the math instance of the model

    Returns:
        np.ndarray: a copy of x, so that the caller can keep modifying its input
    """
    x = np.array(x, dtype=math.dtype)
    if x.shape != (size,):
        raise ValueError(f"{name} must have shape ({size},), got {x.shape}")
    return x


def convert_external_forces(
    fext: Optional[Sequence[Union[Force, npt.ArrayLike]]],
    njoints: int,
    math: SpatialMath,
) -> Optional[List[Force]]:
    """
    Args:
        fext (Optional[Sequence[Union[Force, npt.ArrayLike]]]): one force per joint,
            universe included, expressed in the local joint frame
        njoints (int): number of joints of the model, universe included
        math (SpatialMath): the math instance of the model

    Returns:
        Optional[List[Force]]: the forces as Force objects, None if fext is None
    """
    if fext is None:
        return None
    if len(fext) != njoints:
        raise ValueError(
            f"fext must have one entry per joint ({njoints}, universe included), got {len(fext)}"
        )
    forces = []
    for i, f in enumerate(fext):
        if isinstance(f, Force):
            forces.append(Force(math.asarray(f.linear), math.asarray(f.angular)))
            continue
        f = math.asarray(f)
        if f.shape != (6,):
            raise ValueError(f"fext[{i}] must be a Force or a 6D vector, got {f.shape}")
        forces.append(Force.from_vector(f))
    return forces


def check_jacobian_output(J: Optional[np.ndarray], nv: int, math: SpatialMath):
    """
    Args:
        J (Optional[np.ndarray]): caller supplied output matrix, or None
        nv (int): model velocity dimension
        math (SpatialMath): the math instance of the model

    Returns:
        np.ndarray: J itself, or a new 6 x nv zero matrix when J is None
    """
    if J is None:
        return math.zeros(6, nv)
    if not isinstance(J, np.ndarray) or J.shape != (6, nv):
        raise ValueError(f"The Jacobian output must be a (6, {nv}) array")
    return J


def check_reference_frame(reference_frame) -> ReferenceFrame:
    try:
        return ReferenceFrame(reference_frame)
    except ValueError:
        raise ValueError(
            f"Unknown reference frame {reference_frame}. Use ReferenceFrame.LOCAL or ReferenceFrame.WORLD"
        ) from None


def check_index(index: int, size: int, name: str) -> int:
    if not 0 <= index < size:
        raise ValueError(f"{name} {index} is out of range [0, {size})")
    return index
