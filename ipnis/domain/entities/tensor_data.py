"""
Tensor data variants.

Every variant belongs to one encoding family (Dynamic, Class, Image, String)
and wraps a read-only numpy array. The element representation of a variant is
the dtype of that array, so it is never stored separately: ``ty()`` is always
derived from the data.

Cloning a variant never copies element data; clones share the same buffer.
"""
from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Union

import numpy as np

from ipnis.domain.entities.errors import RankViolationError, UnsupportedElementTypeError
from ipnis.domain.entities.shape import (
    ClassDimensions,
    Dimensions,
    ImageDimensions,
    TensorType,
)

if TYPE_CHECKING:
    from ipnis.domain.entities.native_tensor import NativeTensor
    from ipnis.domain.interfaces.inference_session import InferenceSession


IMAGE_MIN_RANK = 4
CLASS_MIN_RANK = 2


def _image_dimensions(shape: tuple[int, ...]) -> ImageDimensions:
    # axis order: (batch, channels, width, height, ...)
    if len(shape) < IMAGE_MIN_RANK:
        raise RankViolationError(len(shape), IMAGE_MIN_RANK)
    return ImageDimensions(
        channels=int(shape[1]),
        width=int(shape[2]),
        height=int(shape[3]),
    )


def _class_dimensions(shape: tuple[int, ...]) -> ClassDimensions:
    # axis order: (batch, num_classes, ...)
    if len(shape) < CLASS_MIN_RANK:
        raise RankViolationError(len(shape), CLASS_MIN_RANK)
    return ClassDimensions(num_classes=int(shape[1]))


def _is_frozen(array: np.ndarray) -> bool:
    """True if no array on the `.base` chain can be written to."""
    while isinstance(array, np.ndarray):
        if array.flags.writeable:
            return False
        if array.base is None:
            return True
        array = array.base
    # foreign buffer (bytes, mmap, ...): mutability unknown
    return False


def _freeze(array: Any) -> np.ndarray:
    """Return a read-only array, copying unless the whole buffer chain is already read-only."""
    array = np.asarray(array)
    if not _is_frozen(array):
        array = array.copy()
        array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False, repr=False)
class _ArrayTensorData(ABC):
    """Behaviour shared by every encoding family."""

    array: np.ndarray

    ELEMENT_TYPES: ClassVar[tuple[TensorType, ...]] = ()

    def __post_init__(self):
        array = np.asarray(self.array)
        if not any(ty.dtype == array.dtype for ty in self.ELEMENT_TYPES):
            raise UnsupportedElementTypeError(array.dtype, self.ELEMENT_TYPES)
        object.__setattr__(self, "array", _freeze(array))

    @classmethod
    def of(cls, ty: TensorType, array: Any):
        """
        Build a variant with an explicit element representation.

        Parameters
        ----------
        ty : TensorType
            Requested element representation.
        array : array-like
            Backing data. Its dtype must already be `ty`; nothing is cast.

        Raises
        ------
        UnsupportedElementTypeError
            If `ty` is not a representation of this family, or the array's
            dtype differs from `ty`.
        """
        if ty not in cls.ELEMENT_TYPES:
            raise UnsupportedElementTypeError(ty.dtype, cls.ELEMENT_TYPES)
        array = np.asarray(array)
        if array.dtype != ty.dtype:
            raise UnsupportedElementTypeError(array.dtype, (ty,))
        return cls(array)

    def ty(self) -> TensorType:
        return TensorType.from_dtype(self.array.dtype)

    @abstractmethod
    def dimensions(self) -> Dimensions:
        """
        Describe the axes of the backing array.

        Raises
        ------
        RankViolationError
            If the array's rank is below the family's minimum.
        """
        pass

    def clone(self):
        """Return a variant sharing this one's buffer."""
        return copy.copy(self)

    def to_native_handle(self, session: "InferenceSession") -> "NativeTensor":
        """
        Convert into the engine's tensor representation.

        The returned handle is only valid while `session` is open and the
        handle has not been released.
        """
        return session.create_tensor(self.array, self.ty(), tuple(self.array.shape))

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return (
            self.array.dtype == other.array.dtype
            and np.array_equal(self.array, other.array)
        )

    def __hash__(self):
        # consistent with __eq__: equal variants share family, dtype and shape
        return hash((type(self), self.array.dtype, tuple(self.array.shape)))

    def __repr__(self):
        return f"{type(self).__name__}({self.ty().name}, shape={tuple(self.array.shape)})"


class DynamicTensorData(_ArrayTensorData):
    """Arbitrary image-like data of any rank >= 4."""

    ELEMENT_TYPES = (TensorType.U8, TensorType.F32)

    @classmethod
    def u8(cls, array: Any) -> "DynamicTensorData":
        return cls.of(TensorType.U8, array)

    @classmethod
    def f32(cls, array: Any) -> "DynamicTensorData":
        return cls.of(TensorType.F32, array)

    def dimensions(self) -> ImageDimensions:
        return _image_dimensions(self.array.shape)


class ClassTensorData(_ArrayTensorData):
    """Class indices or scores laid out as (batch, num_classes, ...)."""

    ELEMENT_TYPES = (TensorType.I64, TensorType.F32)

    @classmethod
    def i64(cls, array: Any) -> "ClassTensorData":
        return cls.of(TensorType.I64, array)

    @classmethod
    def f32(cls, array: Any) -> "ClassTensorData":
        return cls.of(TensorType.F32, array)

    def dimensions(self) -> ClassDimensions:
        return _class_dimensions(self.array.shape)


class ImageTensorData(_ArrayTensorData):
    """Pixel data laid out as (batch, channels, width, height)."""

    ELEMENT_TYPES = (TensorType.U8, TensorType.F32)

    @classmethod
    def u8(cls, array: Any) -> "ImageTensorData":
        return cls.of(TensorType.U8, array)

    @classmethod
    def f32(cls, array: Any) -> "ImageTensorData":
        return cls.of(TensorType.F32, array)

    def dimensions(self) -> ImageDimensions:
        return _image_dimensions(self.array.shape)


class StringTensorData(_ArrayTensorData):
    """
    Numeric encodings of text (token ids or embeddings).

    Arrays of any rank are accepted; deriving dimensions needs rank >= 4.
    """

    ELEMENT_TYPES = (TensorType.I64, TensorType.F32)

    @classmethod
    def i64(cls, array: Any) -> "StringTensorData":
        return cls.of(TensorType.I64, array)

    @classmethod
    def f32(cls, array: Any) -> "StringTensorData":
        return cls.of(TensorType.F32, array)

    def dimensions(self) -> ImageDimensions:
        return _image_dimensions(self.array.shape)


TensorData = Union[DynamicTensorData, ClassTensorData, ImageTensorData, StringTensorData]

TENSOR_DATA_TYPES = (DynamicTensorData, ClassTensorData, ImageTensorData, StringTensorData)


def as_tensor_data(value: Any) -> TensorData:
    """Return `value` if it is one of the tensor data variants, else raise TypeError."""
    if not isinstance(value, TENSOR_DATA_TYPES):
        raise TypeError(
            f"Expected one of {', '.join(t.__name__ for t in TENSOR_DATA_TYPES)}, "
            f"got {type(value).__name__}"
        )
    return value
