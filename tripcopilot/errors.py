"""
Service exceptions

InvalidInputError and UnauthorizedTripError are raised before any side
effect. UpstreamError subclasses wrap failures of external collaborators.
"""


class CopilotError(Exception):
    """Base class for all copilot errors"""

    message = "copilot error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class InvalidInputError(CopilotError):
    message = "invalid input"


class UnauthorizedTripError(CopilotError):
    message = "unauthorized trip access"


class UpstreamError(CopilotError):
    message = "upstream error"


class ModelProviderError(UpstreamError):
    """The language model call failed; aborts the chat"""

    message = "openai responses error"


class BridgeError(UpstreamError):
    """A web app bridge call failed; absorbed into degraded mode"""

    message = "next bridge error"
