"""
Shape model.

Element kinds, axis descriptions and the named shapes a model declares for
its inputs and outputs. Declared shapes may leave axes unconstrained (``None``);
shapes derived from concrete data never do.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import numpy as np

from ipnis.domain.entities.errors import UnsupportedElementTypeError


class TensorType(Enum):
    """Element kind of a tensor."""

    U8 = "uint8"
    F32 = "float32"
    I64 = "int64"

    @property
    def dtype(self) -> np.dtype:
        """The numpy dtype backing this element kind."""
        return np.dtype(self.value)

    @classmethod
    def from_dtype(cls, dtype: Any) -> "TensorType":
        """
        Map a numpy dtype (or anything ``np.dtype`` accepts) to its element kind.

        Raises
        ------
        UnsupportedElementTypeError
            If the dtype has no corresponding element kind.
        """
        try:
            dtype = np.dtype(dtype)
        except TypeError as exc:
            raise UnsupportedElementTypeError(dtype, tuple(cls)) from exc
        for ty in cls:
            if ty.dtype == dtype:
                return ty
        raise UnsupportedElementTypeError(dtype, tuple(cls))


def _axis_contains(parent: int | None, child: int | None) -> bool:
    return parent is None or parent == child


@dataclass(frozen=True)
class ImageDimensions:
    """
    Axes of an image-like tensor laid out as (batch, channels, width, height, ...).

    Attributes
    ----------
    channels : int
        Number of channels. Always concrete.
    width : int | None
        Width in elements, or None when unconstrained.
    height : int | None
        Height in elements, or None when unconstrained.
    """

    channels: int
    width: int | None = None
    height: int | None = None

    def __post_init__(self):
        if self.channels < 0:
            raise ValueError(f"channels must be non-negative, got {self.channels}")

    def is_concrete(self) -> bool:
        return self.width is not None and self.height is not None

    def contains(self, child: "Dimensions") -> bool:
        if not isinstance(child, ImageDimensions):
            return False
        return (
            self.channels == child.channels
            and _axis_contains(self.width, child.width)
            and _axis_contains(self.height, child.height)
        )


@dataclass(frozen=True)
class ClassDimensions:
    """
    Axes of a class tensor laid out as (batch, num_classes, ...).

    Attributes
    ----------
    num_classes : int | None
        Number of classes, or None when unconstrained.
    """

    num_classes: int | None = None

    def is_concrete(self) -> bool:
        return self.num_classes is not None

    def contains(self, child: "Dimensions") -> bool:
        if not isinstance(child, ClassDimensions):
            return False
        return _axis_contains(self.num_classes, child.num_classes)


Dimensions = Union[ImageDimensions, ClassDimensions]


@dataclass(frozen=True)
class Shape:
    """
    Named, typed description of a tensor.

    Attributes
    ----------
    name : str
        Input or output name as declared by the model.
    ty : TensorType
        Element kind.
    dimensions : Dimensions
        Axis description; may contain unconstrained axes when declared by a model.
    """

    name: str
    ty: TensorType
    dimensions: Dimensions

    def contains(self, child: "Shape") -> bool:
        """
        Check whether `child` is acceptable where this shape is declared.

        The relation is not symmetric: an unconstrained axis accepts any
        concrete value, a concrete axis only accepts the same value.

        Parameters
        ----------
        child : Shape
            Shape derived from concrete data.

        Returns
        -------
        bool
            True if names, element kinds and every constrained axis agree.
        """
        return contains(self, child)


def contains(parent: Shape, child: Shape) -> bool:
    """Return True if the declared `parent` shape accepts the `child` shape."""
    return (
        parent.name == child.name
        and parent.ty == child.ty
        and parent.dimensions.contains(child.dimensions)
    )
