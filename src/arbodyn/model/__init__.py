from .builder import ModelBuilder
from .data import Data
from .joint import (
    CompositeJoint,
    FreeFlyerJoint,
    Joint,
    PlanarJoint,
    PrismaticJoint,
    RevoluteJoint,
    SphericalJoint,
)
from .model import Frame, Model
from .tree import Tree
