"""Metadata service records.

These Pydantic models mirror the subset of the metadata service's network
and host objects that the driver consumes. Unknown fields are ignored so
newer metadata versions keep parsing.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CNI_CONFIG_KEY = "cniConfig"


class Host(BaseModel):
    """The host this driver runs on."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    uuid: str = ""
    name: str = ""
    hostname: str = ""
    agent_ip: str = ""
    environment_uuid: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    # Extra named values exposed to config templates, e.g. CNI_SUBNET
    properties: dict[str, str] = Field(default_factory=dict)

    @field_validator("labels", "properties", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        # Go encodes nil maps as null
        return {} if v is None else v

    def keywords(self) -> dict[str, str]:
        """Return the values placeholder tokens resolve to, keyed by token name."""
        values = {
            "HOST_UUID": self.uuid,
            "HOST_NAME": self.name,
            "HOSTNAME": self.hostname,
            "HOST_IP": self.agent_ip,
            "ENVIRONMENT_UUID": self.environment_uuid,
        }
        for key, value in self.properties.items():
            values[key.upper()] = str(value)
        return values


class Network(BaseModel):
    """A cluster network definition."""
    model_config = ConfigDict(extra="ignore")

    name: str
    uuid: str = ""
    environment_uuid: str = ""
    default: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return {} if v is None else v

    @property
    def cni_config(self) -> dict[str, Any] | None:
        """The network's CNI config set, or None if it is not a CNI network."""
        conf = self.metadata.get(CNI_CONFIG_KEY)
        if isinstance(conf, dict):
            return conf
        return None

    @property
    def config_dir_name(self) -> str:
        return f"{self.name}.d"
