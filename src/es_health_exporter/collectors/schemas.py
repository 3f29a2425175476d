"""Pydantic schemas for Elasticsearch API responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

STATUS_COLORS = ("green", "yellow", "red")
UNKNOWN_STATUS = "unknown"


def _shard_count(description: str):
    return Field(0, ge=0, strict=True, description=description)


class ClusterHealthResponse(BaseModel):
    """Body of ``GET /_cluster/health``.

    Every field has a zero value, so ``ClusterHealthResponse()`` is the
    record reported when the fetch fails. Unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    cluster_name: str = Field("", strict=True, description="Name of the cluster")
    status: str = Field(
        UNKNOWN_STATUS, description="Cluster status (green, yellow, red)"
    )
    timed_out: bool = Field(
        False, strict=True, description="Whether the health request timed out"
    )

    active_primary_shards: int = _shard_count("Number of active primary shards")
    active_shards: int = _shard_count("Number of active shards, replicas included")
    delayed_unassigned_shards: int = _shard_count(
        "Number of shards whose allocation has been delayed"
    )
    initializing_shards: int = _shard_count("Number of shards being initialized")
    number_of_data_nodes: int = _shard_count("Number of data nodes")
    number_of_in_flight_fetch: int = _shard_count(
        "Number of unfinished shard info fetches"
    )
    number_of_nodes: int = _shard_count("Number of nodes")
    number_of_pending_tasks: int = _shard_count(
        "Number of cluster-level changes not yet executed"
    )
    relocating_shards: int = _shard_count("Number of shards being relocated")
    unassigned_shards: int = _shard_count("Number of unassigned shards")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat explicit nulls as missing fields."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        """Map unrecognized status strings to ``unknown``."""
        if not isinstance(v, str):
            raise ValueError("status must be a string")
        return v if v in STATUS_COLORS else UNKNOWN_STATUS
