"""
TensorFlow Inference Session Implementation.

This module provides a TensorFlow implementation of the InferenceSession
interface. Native tensors are copies owned by TensorFlow and placed on the
session's device.
"""
import logging
import os

import numpy as np
import tensorflow as tf

from ipnis.domain.entities.shape import TensorType
from ipnis.domain.interfaces.inference_session import InferenceSession
from ipnis.infrastructure.configuration import ClientConfiguration, LoggingLevel

logger = logging.getLogger(__name__)

TENSORFLOW_DTYPES = {
    TensorType.U8: tf.uint8,
    TensorType.F32: tf.float32,
    TensorType.I64: tf.int64,
}

# TF_CPP_MIN_LOG_LEVEL: 0=ALL, 1=WARNING+, 2=ERROR+, 3=FATAL
_CPP_MIN_LOG_LEVELS = {
    LoggingLevel.OFF: "3",
    LoggingLevel.ERROR: "2",
    LoggingLevel.WARNING: "1",
    LoggingLevel.INFO: "0",
    LoggingLevel.VERBOSE: "0",
}


def configure_tensorflow_logging(log_level: LoggingLevel) -> None:
    """
    Align TensorFlow's own logging with the client's log level.

    This sets TF_CPP_MIN_LOG_LEVEL for the native runtime and the level of the
    "tensorflow" and "absl" Python loggers. The environment variable only takes
    effect for runtime components initialized afterwards.

    Parameters
    ----------
    log_level : LoggingLevel
        Client log level to mirror.
    """
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = _CPP_MIN_LOG_LEVELS[log_level]

    level = log_level.logging_level
    logging.getLogger("tensorflow").setLevel(level)
    logging.getLogger("absl").setLevel(level)
    tf.get_logger().setLevel(level)


class TensorFlowInferenceSession(InferenceSession):
    """
    TensorFlow implementation of the InferenceSession interface.

    Parameters
    ----------
    config : ClientConfiguration | None
        Client configuration; its log level is applied to TensorFlow's loggers.
    device : str
        Device the native tensors are placed on (e.g. "/CPU:0", "/GPU:0").
    """

    def __init__(self, config: ClientConfiguration | None = None, device: str = "/CPU:0") -> None:
        super().__init__()
        self.config = config if config is not None else ClientConfiguration.default()
        self.device = device
        configure_tensorflow_logging(self.config.log_level)
        logger.debug(f"Opened TensorFlow session on {self.device}")

    def _create_native(self, array: np.ndarray, ty: TensorType) -> tf.Tensor:
        """Copy `array` into a TensorFlow tensor on the session's device."""
        with tf.device(self.device):
            tensor = tf.convert_to_tensor(array, dtype=TENSORFLOW_DTYPES[ty])
        logger.debug(f"Created {ty.name} tensor of shape {tuple(tensor.shape)} on {self.device}")
        return tensor

    def close(self) -> None:
        super().close()
        logger.debug(f"Closed TensorFlow session on {self.device}")
