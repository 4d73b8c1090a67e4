"""Serialization module: persist bandit state as an opaque string."""

from volume_engine.serialization.state_json import (
    deserialize,
    serialize,
    state_from_dict,
    state_to_dict,
)

__all__ = ["deserialize", "serialize", "state_from_dict", "state_to_dict"]
