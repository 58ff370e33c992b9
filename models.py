"""Data models and dataclasses."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class EndpointDescriptor:
    """A device exposed to the voice-assistant skill."""
    id: str
    type: str
    name: str
    description: str
    manufacturer: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class CommandRequest:
    """Command received over HTTP."""
    method: str
    endpoint_id: str
    resource: str
    body: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RokuApp:
    """One entry of the Roku installed-app list."""
    id: str
    type: str
    name: str


TV = EndpointDescriptor(
    id="tv",
    type="television",
    name="TV",
    description="Sharp AQUOS N6000U",
    manufacturer="Sharp",
)
TELEVISION = EndpointDescriptor(
    id="television",
    type="television",
    name="Television",
    description=TV.description,
    manufacturer=TV.manufacturer,
)
ROKU = EndpointDescriptor(
    id="roku",
    type="roku",
    name="Roku",
    description="Roku Streaming Stick 3600",
    manufacturer="Roku",
)

STATIC_ENDPOINTS = (TV, TELEVISION, ROKU)
TELEVISION_IDS = frozenset({TV.id, TELEVISION.id})
