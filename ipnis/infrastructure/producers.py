from typing import Any

import numpy as np

from ipnis.domain.entities.shape import Shape
from ipnis.domain.entities.tensor import Tensor
from ipnis.domain.entities.tensor_data import (
    TENSOR_DATA_TYPES,
    DynamicTensorData,
    TensorData,
)
from ipnis.domain.interfaces.to_tensor import ToTensor


def to_numpy(array: Any) -> np.ndarray:
    """
    Convert a PyTorch tensor, TensorFlow tensor or array-like to a numpy array.

    Framework tensors are detected by their attributes so neither framework
    has to be imported here.
    """
    # PyTorch: drop autograd history and move off the GPU before converting
    if hasattr(array, "detach"):
        array = array.detach()
    if hasattr(array, "cpu") and hasattr(array, "numpy"):
        return array.cpu().numpy()
    # TensorFlow eager tensors
    if hasattr(array, "numpy"):
        return array.numpy()
    return np.asarray(array)


class ArrayProducer(ToTensor):
    """
    Producer wrapping raw array data that has not been named yet.

    The data is placed in the requested encoding family at construction time;
    validation names the tensor after the shape it is checked against.

    Parameters
    ----------
    array : Any
        numpy array, PyTorch tensor, TensorFlow tensor or nested sequence.
    family : type
        One of the tensor data variant classes. Defaults to DynamicTensorData.

    Raises
    ------
    UnsupportedElementTypeError
        If the array's element type is not a representation of `family`.
    """

    def __init__(self, array: Any, family: type = DynamicTensorData) -> None:
        if family not in TENSOR_DATA_TYPES:
            raise TypeError(f"Unknown tensor data family: {family!r}")
        self.data: TensorData = family(to_numpy(array))

    def to_tensor(self, shape: Shape) -> Tensor:
        return Tensor(name=shape.name, data=self.data).to_tensor(shape)
