"""Domain models for parameter loading."""
from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass
class Parameter:
    """One entry of a GetParametersByPath page."""
    name: Optional[str]
    value: Optional[str]

    @classmethod
    def from_api(cls, entry: Mapping[str, Any]) -> "Parameter":
        return cls(name=entry.get("Name"), value=entry.get("Value"))


@dataclass
class AWSSettings:
    """Connection settings read from the config file."""
    profile: Optional[str] = None
    region: Optional[str] = None
    connect_timeout: Optional[float] = None
    read_timeout: Optional[float] = None
