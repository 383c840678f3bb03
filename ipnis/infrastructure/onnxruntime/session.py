"""
ONNX Runtime Inference Session Implementation.

This module provides an ONNX Runtime implementation of the InferenceSession
interface. Every client configuration field is translated into
`onnxruntime.SessionOptions`, which callers hand to
`onnxruntime.InferenceSession` when they load a model. Native tensors are
`OrtValue`s that alias contiguous CPU buffers.
"""
import logging

import numpy as np
import onnxruntime as ort

from ipnis.domain.entities.shape import TensorType
from ipnis.domain.interfaces.inference_session import InferenceSession
from ipnis.infrastructure.configuration import (
    ClientConfiguration,
    GraphOptimizationLevel,
    LoggingLevel,
)

logger = logging.getLogger(__name__)

ONNX_ELEMENT_TYPES = {
    TensorType.U8: "tensor(uint8)",
    TensorType.F32: "tensor(float)",
    TensorType.I64: "tensor(int64)",
}

# log_severity_level: 0=VERBOSE, 1=INFO, 2=WARNING, 3=ERROR, 4=FATAL
_LOG_SEVERITY_LEVELS = {
    LoggingLevel.OFF: 4,
    LoggingLevel.ERROR: 3,
    LoggingLevel.WARNING: 2,
    LoggingLevel.INFO: 1,
    LoggingLevel.VERBOSE: 0,
}

_GRAPH_OPTIMIZATION_LEVELS = {
    GraphOptimizationLevel.DISABLED: ort.GraphOptimizationLevel.ORT_DISABLE_ALL,
    GraphOptimizationLevel.BASIC: ort.GraphOptimizationLevel.ORT_ENABLE_BASIC,
    GraphOptimizationLevel.EXTENDED: ort.GraphOptimizationLevel.ORT_ENABLE_EXTENDED,
    GraphOptimizationLevel.ALL: ort.GraphOptimizationLevel.ORT_ENABLE_ALL,
}


def build_session_options(config: ClientConfiguration) -> ort.SessionOptions:
    """
    Translate a client configuration into ONNX Runtime session options.

    Parameters
    ----------
    config : ClientConfiguration
        Client configuration to translate.

    Returns
    -------
    ort.SessionOptions
        Options with log severity, graph optimization level and intra-op
        thread count set from `config`.
    """
    options = ort.SessionOptions()
    options.log_severity_level = _LOG_SEVERITY_LEVELS[config.log_level]
    options.graph_optimization_level = _GRAPH_OPTIMIZATION_LEVELS[config.optimization_level]
    options.intra_op_num_threads = config.number_threads
    return options


class OnnxRuntimeInferenceSession(InferenceSession):
    """
    ONNX Runtime implementation of the InferenceSession interface.

    Parameters
    ----------
    config : ClientConfiguration | None
        Client configuration, applied through `session_options`.
    device_type : str
        OrtValue device type (e.g. "cpu", "cuda").
    device_id : int
        Index of the device.

    Attributes
    ----------
    session_options : ort.SessionOptions
        Options to pass as `sess_options` when loading a model.
    """

    def __init__(
        self,
        config: ClientConfiguration | None = None,
        device_type: str = "cpu",
        device_id: int = 0,
    ) -> None:
        super().__init__()
        self.config = config if config is not None else ClientConfiguration.default()
        self.device_type = device_type
        self.device_id = device_id
        self.session_options = build_session_options(self.config)
        logger.debug(
            f"Opened ONNX Runtime session on {self.device_type}:{self.device_id} "
            f"with {self.config.optimization_level.name} optimization "
            f"and {self.config.number_threads} thread(s)"
        )

    def _create_native(self, array: np.ndarray, ty: TensorType) -> ort.OrtValue:
        """Wrap `array` as an OrtValue; contiguous CPU arrays are not copied."""
        value = ort.OrtValue.ortvalue_from_numpy(
            np.ascontiguousarray(array), self.device_type, self.device_id
        )
        if value.data_type() != ONNX_ELEMENT_TYPES[ty]:
            raise TypeError(f"OrtValue of {value.data_type()} does not match {ty.name}")
        logger.debug(f"Created {ty.name} OrtValue of shape {tuple(value.shape())}")
        return value

    def close(self) -> None:
        super().close()
        logger.debug(f"Closed ONNX Runtime session on {self.device_type}:{self.device_id}")
