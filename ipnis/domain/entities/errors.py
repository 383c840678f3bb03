"""Error kinds raised by the tensor data model."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ipnis.domain.entities.shape import Shape, TensorType


class ShapeMismatchError(ValueError):
    """
    Raised when a tensor does not fit the shape declared by a model.

    Attributes
    ----------
    expected : Shape
        The declared (parent) shape.
    given : Shape
        The shape derived from the offered data.
    """

    def __init__(self, expected: "Shape", given: "Shape") -> None:
        self.expected = expected
        self.given = given
        super().__init__(
            f"Shape mismatched: Expected {expected!r}, but Given {given!r}"
        )


class RankViolationError(ValueError):
    """Raised when dimensions are derived from an array of insufficient rank."""

    def __init__(self, rank: int, required: int) -> None:
        self.rank = rank
        self.required = required
        super().__init__(
            f"Array of rank {rank} cannot describe its dimensions; "
            f"at least rank {required} is required"
        )


class ConversionError(RuntimeError):
    """
    Raised when an inference engine refuses to build a native tensor.

    The engine's own exception is chained as ``__cause__``.
    """

    def __init__(self, ty: "TensorType", shape: tuple[int, ...], reason: Any) -> None:
        self.ty = ty
        self.shape = shape
        super().__init__(
            f"Failed to convert {ty.name} tensor of shape {shape}: {reason}"
        )


class UnsupportedElementTypeError(TypeError):
    """Raised when an array's element type has no matching tensor variant."""

    def __init__(self, dtype: Any, supported: tuple = ()) -> None:
        self.dtype = dtype
        self.supported = supported
        message = f"Unsupported element type: {dtype}"
        if supported:
            names = ", ".join(ty.name for ty in supported)
            message += f" (expected one of: {names})"
        super().__init__(message)


class ExpiredHandleError(RuntimeError):
    """Raised when a native tensor is used after its scope has ended."""
