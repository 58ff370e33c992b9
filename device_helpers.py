"""Helper functions for reshaping backend device records."""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, List, Optional

from constants import HASS_DOMAINS, ROKU_APP_TYPE, ZWAY_DEVICE_TYPES
from models import EndpointDescriptor, RokuApp

logger = logging.getLogger(__name__)


def parse_roku_apps(xml_text: str) -> List[RokuApp]:
    """
    Parse the /query/apps document:
      <apps><app id="12" type="appl" version="4.1">Netflix</app>...</apps>
    Every <app> is returned, in document order.
    """
    root = ET.fromstring(xml_text)
    apps: List[RokuApp] = []
    for node in root.iter("app"):
        app_id = node.get("id")
        if not app_id:
            continue
        apps.append(
            RokuApp(
                id=app_id,
                type=node.get("type", ""),
                name=(node.text or "").strip(),
            )
        )
    return apps


def channel_apps(apps: Iterable[RokuApp]) -> List[RokuApp]:
    """Only installed channels, not screensavers or tuners."""
    return [a for a in apps if a.type == ROKU_APP_TYPE]


def endpoint_from_hass_state(state: Dict[str, Any]) -> Optional[EndpointDescriptor]:
    """Map a Home Assistant state record to an endpoint if it is a switch or light."""
    entity_id = state.get("entity_id")
    if not isinstance(entity_id, str) or "." not in entity_id:
        return None
    domain = entity_id.split(".", 1)[0]
    if domain not in HASS_DOMAINS:
        return None
    attributes = state.get("attributes") or {}
    name = attributes.get("friendly_name")
    if not name:
        return None
    return EndpointDescriptor(
        id=entity_id,
        type=domain,
        name=name,
        description=name,
        manufacturer="Home Assistant",
    )


def endpoint_from_zway_device(device: Dict[str, Any]) -> Optional[EndpointDescriptor]:
    """Map a Z-Way device record to an endpoint if it is a switch or dimmer."""
    device_id = device.get("id")
    endpoint_type = ZWAY_DEVICE_TYPES.get(device.get("deviceType"))
    if not device_id or endpoint_type is None:
        return None
    if device.get("permanently_hidden"):
        return None
    metrics = device.get("metrics") or {}
    name = metrics.get("title") or device_id
    return EndpointDescriptor(
        id=str(device_id),
        type=endpoint_type,
        name=name,
        description=name,
        manufacturer="Z-Wave",
    )


def merge_endpoints(*groups: Iterable[EndpointDescriptor]) -> List[EndpointDescriptor]:
    """Concatenate groups, dropping any endpoint whose id was already seen."""
    seen = set()
    merged: List[EndpointDescriptor] = []
    for group in groups:
        for ep in group:
            if ep.id in seen:
                logger.debug(f"Dropping duplicate endpoint id {ep.id}")
                continue
            seen.add(ep.id)
            merged.append(ep)
    return merged
