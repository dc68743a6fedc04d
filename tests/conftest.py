import dataclasses
import logging

import numpy as np
import pytest

from arbodyn.core.spatial import Motion
from arbodyn.model import Model, sample_models


@dataclasses.dataclass
class State:
    q: np.ndarray
    v: np.ndarray
    a: np.ndarray


MODELS = [
    "random_manipulator",
    "random_humanoid",
]


def build_model(name: str, rng: np.random.Generator) -> Model:
    if name == "random_manipulator":
        return sample_models.random_manipulator(6, rng)
    if name == "random_humanoid":
        return sample_models.random_humanoid(rng)
    raise ValueError(f"Unknown model: {name}")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture(scope="module", params=MODELS, ids=str)
def tests_setup(request) -> tuple[Model, State]:
    rng = np.random.default_rng(42)

    logging.basicConfig(level=logging.DEBUG)
    logging.debug("Showing the model tree.")

    model = build_model(request.param, rng)
    state = State(
        q=model.random_configuration(rng),
        v=rng.uniform(-1.0, 1.0, model.nv),
        a=rng.uniform(-1.0, 1.0, model.nv),
    )
    yield model, state


@pytest.fixture(scope="module", params=MODELS, ids=str)
def zero_gravity_setup(request) -> tuple[Model, State]:
    rng = np.random.default_rng(7)
    model = build_model(request.param, rng)
    model = dataclasses.replace(model, gravity=Motion.zero())
    state = State(
        q=model.random_configuration(rng),
        v=rng.uniform(-1.0, 1.0, model.nv),
        a=rng.uniform(-1.0, 1.0, model.nv),
    )
    yield model, state


@pytest.fixture(scope="module")
def humanoid() -> Model:
    return sample_models.random_humanoid(np.random.default_rng(3))
