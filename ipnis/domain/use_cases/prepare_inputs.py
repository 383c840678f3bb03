"""
Prepare Inputs Use-Case.

This module provides the path tensors take from their producers into an
inference session:
1. Validate every producer against the shape the model declares for it
2. Convert the validated tensors into native handles for a session
3. Release the handles once the caller is done with them
"""
from __future__ import annotations

from contextlib import ExitStack, contextmanager
from typing import Iterable, Iterator, Mapping, Sequence

from ipnis.domain.entities.native_tensor import NativeTensor
from ipnis.domain.entities.shape import Shape
from ipnis.domain.entities.tensor import Tensor
from ipnis.domain.interfaces.inference_session import InferenceSession
from ipnis.domain.interfaces.to_tensor import ToTensor


class PrepareInputs:
    """
    Use-case for validating and binding a model's inputs.

    Attributes
    ----------
    input_shapes : tuple[Shape, ...]
        Shapes declared by the model, in declaration order.
    """

    def __init__(self, input_shapes: Sequence[Shape]) -> None:
        """
        Initialize the PrepareInputs use-case.

        Parameters
        ----------
        input_shapes : Sequence[Shape]
            Shapes declared by the model. Names must be unique.

        Raises
        ------
        ValueError
            If two declared shapes share a name.
        """
        names = [shape.name for shape in input_shapes]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate input names: {duplicates}")
        self.input_shapes = tuple(input_shapes)

    def validate(self, producers: Mapping[str, ToTensor]) -> list[Tensor]:
        """
        Validate each producer against its declared shape.

        Parameters
        ----------
        producers : Mapping[str, ToTensor]
            One producer per declared input, keyed by input name.

        Returns
        -------
        list[Tensor]
            Validated tensors in declaration order.

        Raises
        ------
        KeyError
            If a declared input has no producer, or a producer matches no input.
        ShapeMismatchError
            If a producer's data does not fit its declared shape.
        """
        declared = {shape.name for shape in self.input_shapes}
        unknown = sorted(set(producers) - declared)
        if unknown:
            raise KeyError(f"Unknown inputs: {unknown}")

        tensors = []
        for shape in self.input_shapes:
            if shape.name not in producers:
                raise KeyError(f"Missing input: {shape.name!r}")
            tensors.append(producers[shape.name].to_tensor(shape))
        return tensors

    @staticmethod
    @contextmanager
    def bind(
        tensors: Iterable[Tensor],
        session: InferenceSession,
    ) -> Iterator[dict[str, NativeTensor]]:
        """
        Convert validated tensors for `session` for the duration of a block.

        Every handle is released when the block exits, including when a later
        conversion fails.

        Parameters
        ----------
        tensors : Iterable[Tensor]
            Tensors returned by `validate`.
        session : InferenceSession
            Open session to bind the tensors to.

        Yields
        ------
        dict[str, NativeTensor]
            Handles keyed by tensor name.
        """
        with ExitStack() as stack:
            yield {
                tensor.name: stack.enter_context(session.bind(tensor))
                for tensor in tensors
            }
