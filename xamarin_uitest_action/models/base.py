"""Base model configuration for all data structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model rejecting unknown fields (e.g. misspelled step inputs)."""

    model_config = ConfigDict(frozen=True, extra="forbid")
