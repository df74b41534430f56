from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} with id '{resource_id}' not found",
        )


class CandidateNotFoundError(NotFoundError):
    def __init__(self, candidate_id: str) -> None:
        super().__init__("Candidate", candidate_id)


class BadRequestError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class LocationRequiredError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(
            "Candidate profile needs a location or coordinates before jobs can be matched"
        )


class ConflictError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )


class ServiceUnavailableError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
        )


class GeocodeError(Exception):
    """Base class for geocoding failures. Never fatal to matching."""


class GeocodeNotFound(GeocodeError):
    """The geocoding provider returned no result."""


class GeocodeUnavailable(GeocodeError):
    """The geocoding provider could not be reached or answered badly."""


class AggregatorUnavailable(Exception):
    """Raised when an external job source cannot be fetched."""


class BadGatewayError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
        )
