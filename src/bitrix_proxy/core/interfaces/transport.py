"""
Transport Protocol

The transport executes a built ``BitrixRequest`` against the configured
Bitrix24 webhook, applying rate limiting, retries and error normalization.
"""

from typing import Any, Protocol


class TransportProtocol(Protocol):
    """
    Protocol defining the contract for the Bitrix24 transport.

    Result Format:
        send() returns the ``result`` field of the upstream JSON body when
        present, otherwise the whole decoded body.

    Error Handling:
        - ConfigError when the webhook URL is not configured
        - UpstreamError after the retry policy is exhausted, or immediately
          for non-retryable statuses
    """

    async def send(self, method: str, payload: dict[str, Any]) -> Any:
        """
        Post ``payload`` to ``{webhook}/{method}.json``.

        Args:
            method: Bitrix24 REST method name, e.g. "crm.deal.get"
            payload: JSON body

        Returns:
            Unwrapped upstream result
        """
        ...

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        ...
