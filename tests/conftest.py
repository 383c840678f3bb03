"""Pytest configuration and shared fixtures."""
import numpy as np
import pytest
from fixtures.fake_session import FakeInferenceSession

from ipnis.domain.entities.shape import ImageDimensions, Shape, TensorType
from ipnis.domain.entities.tensor import Tensor
from ipnis.domain.entities.tensor_data import DynamicTensorData


@pytest.fixture
def fake_session():
    """
    Provide an open FakeInferenceSession, closed after the test.

    Returns:
        FakeInferenceSession: A new session accepting every element kind.
    """
    session = FakeInferenceSession()
    yield session
    session.close()


@pytest.fixture
def image_array():
    """
    Provide a float32 image batch.

    Returns:
        np.ndarray: Array of shape (1, 3, 224, 224) laid out as (batch, channels, width, height).
    """
    return np.random.rand(1, 3, 224, 224).astype(np.float32)


@pytest.fixture
def image_tensor(image_array):
    """
    Provide a Tensor named "input" wrapping `image_array` as dynamic data.

    Returns:
        Tensor: Tensor of element kind F32 and dimensions (3, 224, 224).
    """
    return Tensor(name="input", data=DynamicTensorData(image_array))


@pytest.fixture
def wildcard_shape():
    """
    Provide a declared RGB input shape with unconstrained width and height.

    Returns:
        Shape: Shape named "input", element kind F32, 3 channels.
    """
    return Shape(
        name="input",
        ty=TensorType.F32,
        dimensions=ImageDimensions(channels=3, width=None, height=None),
    )
