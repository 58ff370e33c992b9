"""Response envelopes for the HTTP API."""

from datetime import datetime, timezone
from typing import Any, Dict


def now_iso() -> str:
    """UTC timestamp in the form the smart-home skill expects."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def state_envelope(state: Any) -> Dict[str, Any]:
    """Success body reporting the state the endpoint was asked to reach."""
    return {"state": state, "isoTimestamp": now_iso(), "uncertaintyMs": 0}


def unsupported_error(endpoint_id: str, resource: str) -> Dict[str, str]:
    return {"error": f"Endpoint {endpoint_id} does not support {resource}"}
