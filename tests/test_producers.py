"""Tests for ArrayProducer."""
import numpy as np
import pytest

from ipnis.domain.entities.errors import ShapeMismatchError, UnsupportedElementTypeError
from ipnis.domain.entities.shape import ImageDimensions, Shape, TensorType
from ipnis.domain.entities.tensor_data import DynamicTensorData, ImageTensorData
from ipnis.domain.interfaces.to_tensor import ToTensor
from ipnis.infrastructure.producers import ArrayProducer, to_numpy


class TestArrayProducer:
    """Tests for the raw array producer."""

    def test_is_a_producer(self, image_array):
        assert isinstance(ArrayProducer(image_array), ToTensor)

    def test_names_tensor_after_shape(self, image_array, wildcard_shape):
        tensor = ArrayProducer(image_array).to_tensor(wildcard_shape)
        assert tensor.name == "input"
        assert isinstance(tensor.data, DynamicTensorData)
        np.testing.assert_array_equal(tensor.data.array, image_array)

    def test_family_selection(self):
        producer = ArrayProducer(np.zeros((1, 3, 4, 4), dtype=np.uint8), family=ImageTensorData)
        shape = Shape("pixels", TensorType.U8, ImageDimensions(channels=3, width=4, height=4))
        assert isinstance(producer.to_tensor(shape).data, ImageTensorData)

    def test_mismatch(self, image_array):
        shape = Shape("input", TensorType.F32, ImageDimensions(channels=1))
        with pytest.raises(ShapeMismatchError):
            ArrayProducer(image_array).to_tensor(shape)

    def test_unsupported_dtype(self):
        with pytest.raises(UnsupportedElementTypeError):
            ArrayProducer(np.zeros((1, 3, 4, 4), dtype=np.float64))

    def test_unknown_family(self, image_array):
        with pytest.raises(TypeError):
            ArrayProducer(image_array, family=dict)


class TestToNumpy:
    """Tests for framework conversions."""

    def test_numpy_passthrough(self, image_array):
        assert to_numpy(image_array) is image_array

    def test_nested_sequence(self):
        assert to_numpy([[1, 2], [3, 4]]).shape == (2, 2)

    def test_torch_tensor(self):
        torch = pytest.importorskip("torch")
        tensor = torch.ones((1, 3, 2, 2), requires_grad=True)
        array = to_numpy(tensor)
        assert isinstance(array, np.ndarray)
        assert array.dtype == np.float32

    def test_tensorflow_tensor(self):
        tf = pytest.importorskip("tensorflow")
        array = to_numpy(tf.ones((1, 3, 2, 2), dtype=tf.uint8))
        assert isinstance(array, np.ndarray)
        assert array.dtype == np.uint8
