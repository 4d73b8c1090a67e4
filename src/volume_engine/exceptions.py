"""Custom exception hierarchy for the volume engine.

The public core operations never raise these; they are used by the strict
helpers underneath (decoding, environment configuration) and by hosts that
want to distinguish failures.
"""

from __future__ import annotations


class VolumeEngineError(Exception):
    """Base exception for all volume_engine errors."""


class StateDecodeError(VolumeEngineError):
    """A persisted bandit state blob could not be decoded."""


class ConfigError(VolumeEngineError):
    """An environment setting could not be parsed."""

    def __init__(self, variable: str, value: str, reason: str) -> None:
        super().__init__(f"{variable}={value!r}: {reason}")
        self.variable = variable
        self.value = value
