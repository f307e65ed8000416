"""Exception types for the trip planning pipeline."""


class TripPlannerError(Exception):
    """Base class for all trip planner failures."""

    pass


class ConfigurationError(TripPlannerError):
    """Required configuration (credentials, model) is missing."""

    pass


class GenerationError(TripPlannerError):
    """Generative model call failed."""

    pass


class EmptyResponseError(GenerationError):
    """Generative model returned no text."""

    pass


class MalformedResponseError(GenerationError):
    """Generative model returned text that is not valid JSON."""

    pass


class GenerationTimeoutError(GenerationError):
    """Generative model call exceeded the configured timeout."""

    pass


class InvalidResponseShapeError(TripPlannerError):
    """Parsed JSON is missing a required key or has the wrong structure."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"Invalid response format: {message}")
        self.stage = stage


class GatewayError(TripPlannerError):
    """Planner backend rejected or failed a request made by a client session."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
