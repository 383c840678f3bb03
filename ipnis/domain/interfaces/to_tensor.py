from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ipnis.domain.entities.shape import Shape
    from ipnis.domain.entities.tensor import Tensor


class ToTensor(ABC):
    """Abstract interface for anything that can become a validated Tensor."""

    @abstractmethod
    def to_tensor(self, shape: "Shape") -> "Tensor":
        """
        Validate against a declared shape and produce a Tensor.

        Parameters
        ----------
        shape : Shape
            Shape declared by the model for this input.

        Returns
        -------
        Tensor
            A tensor whose shape is contained in `shape`.

        Raises
        ------
        ShapeMismatchError
            If the produced data does not fit `shape`.
        """
        pass
