"""Custom exceptions for chain interactions."""


class UpstreamError(Exception):
    """
    Base exception for external data fetch failures.

    Any UpstreamError is fatal to the current distribution run.
    """

    pass


class UpstreamConnectionError(UpstreamError):
    """
    Raised when an API node cannot be reached.

    This can happen when:
    - Node is down or unreachable
    - Request timed out
    - Network connectivity issues
    """

    pass


class UpstreamResponseError(UpstreamError):
    """
    Raised when an API node answers with an unusable response.

    This can happen when:
    - HTTP error status
    - Invalid JSON body
    - JSON-RPC error object
    - Missing or malformed fields (e.g. zero total vesting shares)
    """

    pass
