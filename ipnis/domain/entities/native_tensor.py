"""Native tensor handle - an engine-owned tensor scoped to a session."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ipnis.domain.entities.errors import ExpiredHandleError
from ipnis.domain.entities.shape import TensorType

if TYPE_CHECKING:
    from ipnis.domain.interfaces.inference_session import InferenceSession


class NativeTensor:
    """
    Handle on a tensor built by an inference engine.

    The wrapped engine value may alias the source array's buffer or be a copy
    owned by the engine. Either way it is only valid while the producing session
    is open and the handle has not been released; accessing ``value`` outside
    that window raises ``ExpiredHandleError``.

    Attributes
    ----------
    ty : TensorType
        Element kind of the source data.
    shape : tuple[int, ...]
        Shape of the source array.
    """

    def __init__(
        self,
        value: Any,
        session: "InferenceSession",
        ty: TensorType,
        shape: tuple[int, ...],
    ) -> None:
        self._value = value
        self._session = session
        self._released = False
        self.ty = ty
        self.shape = shape

    @property
    def session(self) -> "InferenceSession":
        return self._session

    @property
    def is_valid(self) -> bool:
        return not self._released and self._session.is_open

    @property
    def value(self) -> Any:
        """
        The engine's tensor object.

        Raises
        ------
        ExpiredHandleError
            If the handle was released or its session has been closed.
        """
        if self._released:
            raise ExpiredHandleError("Native tensor used after release")
        if not self._session.is_open:
            raise ExpiredHandleError("Native tensor used after its session was closed")
        return self._value

    def release(self) -> None:
        """Drop the reference to the engine value. Safe to call more than once."""
        self._released = True
        self._value = None

    def __enter__(self) -> "NativeTensor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self):
        state = "valid" if self.is_valid else "expired"
        return f"NativeTensor({self.ty.name}, shape={self.shape}, {state})"
