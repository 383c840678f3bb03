"""Tests for TorchInferenceSession."""
import numpy as np
import pytest

torch = pytest.importorskip("torch")

from ipnis.domain.entities.errors import ConversionError, ExpiredHandleError  # noqa: E402
from ipnis.domain.entities.shape import TensorType  # noqa: E402
from ipnis.domain.entities.tensor import Tensor  # noqa: E402
from ipnis.domain.entities.tensor_data import (  # noqa: E402
    ClassTensorData,
    DynamicTensorData,
    StringTensorData,
)
from ipnis.infrastructure.configuration import ClientConfiguration  # noqa: E402
from ipnis.infrastructure.torch.session import TorchInferenceSession  # noqa: E402


@pytest.fixture
def session():
    """
    Provide a CPU TorchInferenceSession, closed after the test.

    Returns:
        TorchInferenceSession: Session using the default configuration.
    """
    session = TorchInferenceSession()
    yield session
    session.close()


class TestTorchInferenceSession:
    """Tests for the PyTorch engine adapter."""

    @pytest.mark.parametrize(
        "data, dtype",
        [
            (DynamicTensorData.u8(np.zeros((1, 3, 4, 4), dtype=np.uint8)), torch.uint8),
            (DynamicTensorData.f32(np.zeros((1, 3, 4, 4), dtype=np.float32)), torch.float32),
            (StringTensorData.i64(np.zeros((1, 5, 10, 10), dtype=np.int64)), torch.int64),
            (ClassTensorData.f32(np.zeros((2, 10), dtype=np.float32)), torch.float32),
        ],
    )
    def test_dtype_and_shape(self, session, data, dtype):
        handle = data.to_native_handle(session)
        assert isinstance(handle.value, torch.Tensor)
        assert handle.value.dtype == dtype
        assert tuple(handle.value.shape) == data.array.shape

    def test_cpu_tensor_aliases_buffer(self, session, image_tensor):
        """On CPU the native tensor shares memory with the variant's array."""
        handle = image_tensor.to_native_handle(session)
        assert handle.value.data_ptr() == image_tensor.data.array.__array_interface__["data"][0]

    def test_values_are_preserved(self, session):
        array = np.arange(16, dtype=np.float32).reshape(1, 1, 4, 4)
        with session.bind(Tensor("x", DynamicTensorData(array))) as handle:
            np.testing.assert_array_equal(handle.value.numpy(), array)

    def test_handle_expires_with_session(self, image_tensor):
        session = TorchInferenceSession()
        handle = image_tensor.to_native_handle(session)
        session.close()
        with pytest.raises(ExpiredHandleError):
            handle.value

    def test_applies_thread_count(self):
        previous = torch.get_num_threads()
        try:
            TorchInferenceSession(ClientConfiguration(number_threads=2)).close()
            assert torch.get_num_threads() == 2
        finally:
            torch.set_num_threads(previous)

    def test_mismatched_type_is_conversion_error(self, session):
        array = np.zeros((1, 1, 1, 1), dtype=np.float32)
        array.flags.writeable = False
        with pytest.raises(ConversionError):
            session.create_tensor(array, TensorType.I64, array.shape)

    def test_unknown_device_is_rejected(self):
        with pytest.raises(RuntimeError):
            TorchInferenceSession(device="not-a-device")
