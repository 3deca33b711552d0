"""Simulated client processes and their identity."""

from debugsim.clients.client import Client
from debugsim.clients.client_id import (
    ClientQuery,
    build_client_id,
    client_id_for_query,
    deconstruct_client_id,
)
from debugsim.clients.connection import ClientConnection, ConnectionStatus

__all__ = [
    "Client",
    "ClientConnection",
    "ClientQuery",
    "ConnectionStatus",
    "build_client_id",
    "client_id_for_query",
    "deconstruct_client_id",
]
