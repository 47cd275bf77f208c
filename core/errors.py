# ABOUTME: Error taxonomy for step generation; each class carries its HTTP status and client-safe message.
# ABOUTME: api.main turns any GenerationError into {"error": public_message} with status_code.


class GenerationError(RuntimeError):
    """Base error for step generation. str(exc) is diagnostic; public_message is safe for clients."""

    status_code = 500
    public_message = "An unexpected error occurred while generating steps."


class InvalidInputError(GenerationError):
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.public_message = message


class ConfigurationError(GenerationError):
    public_message = "AI service not configured"


class UpstreamRateLimitError(GenerationError):
    status_code = 429
    public_message = "Rate limit exceeded. Please try again in a moment."


class UpstreamBillingError(GenerationError):
    status_code = 402
    public_message = "AI service credits depleted. Please add credits to continue."


class UpstreamServiceError(GenerationError):
    """Gateway answered with a non-2xx status other than 429/402."""

    def __init__(self, message: str, upstream_status: int) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.public_message = f"AI service error: {upstream_status}"


class MalformedResponseError(GenerationError):
    public_message = "AI service returned an invalid response."


class TransportError(GenerationError):
    public_message = "Could not reach the AI service."
