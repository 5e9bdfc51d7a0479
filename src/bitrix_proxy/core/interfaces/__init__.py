"""
Core Protocol Interfaces

Protocols for the two seams of the proxy: the per-domain request builders
consumed by the dispatcher, and the transport that executes a built request.

Available Protocols:
    - RequestBuilderProtocol: tool name + arguments to Bitrix24 request
    - TransportProtocol: Bitrix24 method + payload to unwrapped result
"""

from bitrix_proxy.core.interfaces.builders import RequestBuilderProtocol
from bitrix_proxy.core.interfaces.transport import TransportProtocol

__all__ = ["RequestBuilderProtocol", "TransportProtocol"]
