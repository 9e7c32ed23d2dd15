"""Gateway and analysis domain exceptions."""


class GatewayError(Exception):
    """Base exception for gateway operations."""

    pass


class GatewayInputError(GatewayError):
    """Request data is missing or malformed (client error)."""

    pass


class MissingMenuSourceError(GatewayInputError):
    """No menu text, image or URL was supplied."""

    def __init__(self) -> None:
        super().__init__("No menu content provided for analysis.")


class InvalidImagePayloadError(GatewayInputError):
    """Inlined image payload is not usable."""

    pass


class UnknownOperationError(GatewayInputError):
    """Envelope `type` is not one of the supported operations."""

    def __init__(self, operation: object):
        self.operation = operation
        super().__init__(f"Unknown API request type: {operation}")


class InvalidChatHistoryError(GatewayInputError):
    """Chat history is empty or not a list of turns."""

    def __init__(self, reason: str = "Chat history is empty or invalid."):
        super().__init__(reason)


class ChatHistoryMismatchError(GatewayInputError):
    """Standalone message does not match the last history turn."""

    def __init__(self) -> None:
        super().__init__("Chat message does not match the last turn of the history.")


class MissingCoordinatesError(GatewayInputError):
    """Places lookup without a usable location."""

    def __init__(self) -> None:
        super().__init__("Latitude and longitude are required.")


class PlacesConfigurationError(GatewayError):
    """Places API key is not configured on the server."""

    def __init__(self) -> None:
        super().__init__("Server is not configured with a Google Maps API key.")


class PlacesAPIError(GatewayError):
    """Places nearby search returned an error status."""

    def __init__(self, status: str, message: str = ""):
        self.status = status
        super().__init__(f"Google Places API Error: {status}. {message}".strip())
