"""
Transport package

A transport is the duplex byte stream the session talks to: the inbound
printer reads from it while the prompt writes to it.
"""

from .base import BaseTransport, ConnectionFailed
from .tcp import TCPTransport

__all__ = [
    'BaseTransport',
    'ConnectionFailed',
    'TCPTransport',
]
