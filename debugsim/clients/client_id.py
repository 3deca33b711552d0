# debugsim/clients/client_id.py
"""Client identity: query tuple and the id derived from it."""

from dataclasses import dataclass
from urllib.parse import quote, unquote

from debugsim.logging_system import get_logger

logger = get_logger(__name__)

CLIENT_ID_SEPARATOR = "#"


@dataclass(frozen=True)
class ClientQuery:
    """Describes which app process a client is.

    Attributes:
        app: App name
        os: Operating system tag
        device: Device title
        device_id: Device serial
        sdk_version: Client SDK / protocol version
    """

    app: str
    os: str
    device: str
    device_id: str
    sdk_version: int | None = None


def build_client_id(app: str, os: str, device: str, device_id: str) -> str:
    """Derive the client id from the identity fields of a query.

    The app name is escaped so it cannot contain the separator.
    """
    for key, value in (("app", app), ("os", os), ("device", device), ("device_id", device_id)):
        if not value:
            logger.error(f"Attempted to build client id with invalid {key}: {value!r}")

    escaped_app = quote(str(app), safe="@*_+-./")
    return CLIENT_ID_SEPARATOR.join([escaped_app, str(os), str(device), str(device_id)])


def client_id_for_query(query: ClientQuery) -> str:
    return build_client_id(query.app, query.os, query.device, query.device_id)


def deconstruct_client_id(client_id: str) -> ClientQuery:
    """Split a client id back into its identity fields.

    Raises:
        ValueError: If the id has fewer than four parts
    """
    parts = client_id.split(CLIENT_ID_SEPARATOR)
    if len(parts) < 4:
        raise ValueError(f"Malformed client id: {client_id!r}")

    # Device titles may themselves contain the separator
    app, os, *device_parts, device_id = parts
    return ClientQuery(
        app=unquote(app),
        os=os,
        device=CLIENT_ID_SEPARATOR.join(device_parts),
        device_id=device_id,
    )
