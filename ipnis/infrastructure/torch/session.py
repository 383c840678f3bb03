"""
PyTorch Inference Session Implementation.

This module provides a PyTorch implementation of the InferenceSession
interface. On CPU the native tensors alias the source buffers (no copy);
on other devices they are copies owned by PyTorch.
"""
import logging
import warnings

import numpy as np
import torch

from ipnis.domain.entities.shape import TensorType
from ipnis.domain.interfaces.inference_session import InferenceSession
from ipnis.infrastructure.configuration import ClientConfiguration

logger = logging.getLogger(__name__)

TORCH_DTYPES = {
    TensorType.U8: torch.uint8,
    TensorType.F32: torch.float32,
    TensorType.I64: torch.int64,
}


class TorchInferenceSession(InferenceSession):
    """
    PyTorch implementation of the InferenceSession interface.

    Parameters
    ----------
    config : ClientConfiguration | None
        Client configuration; its thread count is applied to PyTorch.
    device : str
        Device the native tensors are placed on (e.g. "cpu", "cuda:0").
    """

    def __init__(self, config: ClientConfiguration | None = None, device: str = "cpu") -> None:
        super().__init__()
        self.config = config if config is not None else ClientConfiguration.default()
        self.device = torch.device(device)
        torch.set_num_threads(self.config.number_threads)
        logger.debug(
            f"Opened PyTorch session on {self.device} "
            f"with {self.config.number_threads} thread(s)"
        )

    def _create_native(self, array: np.ndarray, ty: TensorType) -> torch.Tensor:
        """
        Wrap `array` as a torch.Tensor.

        The resulting tensor shares memory with `array` on CPU. PyTorch warns
        about read-only buffers; the warning is silenced because native tensors
        are never written to by this package.
        """
        dtype = TORCH_DTYPES[ty]
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", message=".*not writable.*")
            tensor = torch.from_numpy(array)
        if tensor.dtype != dtype:
            raise TypeError(f"Array dtype {array.dtype} does not match {ty.name}")
        tensor = tensor.to(self.device)
        logger.debug(f"Created {ty.name} tensor of shape {tuple(tensor.shape)} on {self.device}")
        return tensor

    def close(self) -> None:
        super().close()
        logger.debug(f"Closed PyTorch session on {self.device}")
