"""Transport stand-ins for simulated clients."""

from debugsim.network.protocol_emulator import (
    OutboundCall,
    OutboundCallLog,
    ProtocolEmulator,
)
from debugsim.network.stub_connection import StubConnection, create_stub_connection

__all__ = [
    "OutboundCall",
    "OutboundCallLog",
    "ProtocolEmulator",
    "StubConnection",
    "create_stub_connection",
]
