import logging
import os
import tomllib
from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class LoggingLevel(Enum):
    """Verbosity of the inference client."""

    OFF = "off"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"

    @property
    def logging_level(self) -> int:
        """Equivalent level for Python's `logging` module."""
        return {
            LoggingLevel.OFF: logging.CRITICAL + 10,
            LoggingLevel.ERROR: logging.ERROR,
            LoggingLevel.WARNING: logging.WARNING,
            LoggingLevel.INFO: logging.INFO,
            LoggingLevel.VERBOSE: logging.DEBUG,
        }[self]


class GraphOptimizationLevel(Enum):
    """How aggressively the engine may rewrite the model graph."""

    DISABLED = "disabled"
    BASIC = "basic"
    EXTENDED = "extended"
    ALL = "all"


def _parse_enum(enum_cls, value):
    """Accept an enum member or its name in any case."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        if key in enum_cls.__members__:
            return enum_cls[key]
    choices = ", ".join(member.name for member in enum_cls)
    raise ValueError(f"Invalid {enum_cls.__name__}: {value!r} (expected one of: {choices})")


@dataclass
class ClientConfiguration:
    """Configuration for the inference client."""

    log_level: LoggingLevel = LoggingLevel.WARNING
    optimization_level: GraphOptimizationLevel = GraphOptimizationLevel.BASIC
    number_threads: int = 1

    def __post_init__(self):
        """Normalize enum fields given by name and check the thread count.

        Raises
        ------
        ValueError
            If an enum name is unknown or `number_threads` is not a positive integer.
        """
        self.log_level = _parse_enum(LoggingLevel, self.log_level)
        self.optimization_level = _parse_enum(GraphOptimizationLevel, self.optimization_level)
        if (
            isinstance(self.number_threads, bool)
            or not isinstance(self.number_threads, int)
            or self.number_threads < 1
        ):
            raise ValueError(
                f"number_threads must be a positive integer. Got: {self.number_threads!r}"
            )

    @classmethod
    def default(cls) -> "ClientConfiguration":
        """Return the compiled-in default: WARNING logs, BASIC optimization, 1 thread."""
        return cls()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfiguration":
        """
        Resolve the configuration from the environment.

        Environment overrides are not read yet: this always returns
        ``ClientConfiguration.default()``. `environ` (defaulting to
        ``os.environ``) is the mapping future overrides will be read from.

        Parameters
        ----------
        environ : Mapping[str, str] | None
            Environment to read from.

        Returns
        -------
        ClientConfiguration
            The default configuration.
        """
        # TODO: read IPNIS_LOG_LEVEL, IPNIS_OPTIMIZATION_LEVEL and IPNIS_NUMBER_THREADS from `environ`
        return cls.default()

    @classmethod
    def load(cls, config_path: str) -> "ClientConfiguration":
        """
        Load client configuration from a TOML file.

        Parameters
        ----------
        config_path : str
            Filesystem path to a TOML file containing a "client" table.

        Returns
        -------
        ClientConfiguration
            Instance populated from the "client" table; missing fields use defaults.

        Raises
        ------
        FileNotFoundError
            If no file exists at `config_path`.
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found at {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        client_data = data.get("client", {})
        return cls(**client_data)
