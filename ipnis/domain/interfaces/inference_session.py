"""
Inference Session Interface.

This module defines the boundary between the tensor data model and an
inference engine. A session is the engine's execution context; it builds
native tensors from read-only arrays and scopes their validity.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

import numpy as np

from ipnis.domain.entities.errors import ConversionError, ExpiredHandleError
from ipnis.domain.entities.native_tensor import NativeTensor
from ipnis.domain.entities.shape import TensorType

if TYPE_CHECKING:
    from ipnis.domain.entities.tensor_data import TensorData


class InferenceSession(ABC):
    """
    Abstract interface for an inference engine's session context.

    Implementations only provide `_create_native`; validity tracking and
    error wrapping live here so every engine enforces the same lifetime rules:

    1. Handles can only be created while the session is open.
    2. Closing the session invalidates every handle it produced.
    3. Engine failures surface as ``ConversionError``.
    """

    def __init__(self) -> None:
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    def create_tensor(
        self,
        array: np.ndarray,
        ty: TensorType,
        shape: tuple[int, ...],
    ) -> NativeTensor:
        """
        Build a native tensor from an array view.

        Parameters
        ----------
        array : np.ndarray
            Read-only source array. Implementations must not write to it.
        ty : TensorType
            Element kind of `array`.
        shape : tuple[int, ...]
            Shape of `array`.

        Returns
        -------
        NativeTensor
            Handle valid until released or until this session closes.

        Raises
        ------
        ExpiredHandleError
            If the session is already closed.
        ConversionError
            If the engine rejects the element kind or shape.
        """
        if self._closed:
            raise ExpiredHandleError("Cannot create tensors on a closed session")
        try:
            value = self._create_native(array, ty)
        except Exception as exc:
            raise ConversionError(ty, shape, exc) from exc
        return NativeTensor(value, self, ty, shape)

    @abstractmethod
    def _create_native(self, array: np.ndarray, ty: TensorType) -> Any:
        """
        Ask the engine for its own tensor object.

        Parameters
        ----------
        array : np.ndarray
            Read-only source array.
        ty : TensorType
            Element kind of `array`.

        Returns
        -------
        Any
            The engine's tensor object.
        """
        pass

    @contextmanager
    def bind(self, data: "TensorData") -> Iterator[NativeTensor]:
        """
        Convert `data` and release the handle when the block exits.

        Parameters
        ----------
        data : TensorData
            Variant (or Tensor) to convert.

        Yields
        ------
        NativeTensor
            Handle valid for the duration of the block.
        """
        handle = data.to_native_handle(self)
        try:
            yield handle
        finally:
            handle.release()

    def close(self) -> None:
        """Close the session; every handle it produced becomes invalid."""
        self._closed = True

    def __enter__(self) -> "InferenceSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
