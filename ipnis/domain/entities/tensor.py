"""Tensor entity - a named tensor data variant."""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ipnis.domain.entities.errors import ShapeMismatchError
from ipnis.domain.entities.shape import Dimensions, Shape, TensorType
from ipnis.domain.entities.tensor_data import TensorData, as_tensor_data
from ipnis.domain.interfaces.to_tensor import ToTensor

if TYPE_CHECKING:
    from ipnis.domain.entities.native_tensor import NativeTensor
    from ipnis.domain.interfaces.inference_session import InferenceSession


@dataclass(frozen=True)
class Tensor(ToTensor):
    """
    A named, typed and shaped array.

    Attributes
    ----------
    name : str
        Input or output name the tensor is meant for.
    data : TensorData
        The variant holding the elements.
    """

    name: str
    data: TensorData

    def __post_init__(self):
        as_tensor_data(self.data)

    def ty(self) -> TensorType:
        return self.data.ty()

    def dimensions(self) -> Dimensions:
        return self.data.dimensions()

    def shape(self) -> Shape:
        """
        Describe this tensor.

        Computed on every call from the immutable data.

        Raises
        ------
        RankViolationError
            If the data's rank is too low to derive its dimensions.
        """
        return Shape(name=self.name, ty=self.data.ty(), dimensions=self.data.dimensions())

    def to_tensor(self, shape: Shape) -> "Tensor":
        """
        Validate this tensor against a declared shape.

        Parameters
        ----------
        shape : Shape
            Shape declared by the model.

        Returns
        -------
        Tensor
            A clone of this tensor, sharing its buffer.

        Raises
        ------
        ShapeMismatchError
            If `shape` does not contain this tensor's shape.
        """
        given = self.shape()
        if not shape.contains(given):
            raise ShapeMismatchError(expected=shape, given=given)
        return self.clone()

    def clone(self) -> "Tensor":
        return copy.copy(self)

    def to_native_handle(self, session: "InferenceSession") -> "NativeTensor":
        return self.data.to_native_handle(session)
