"""Translation of domain errors into HTTP errors."""

from fastapi import HTTPException

from src.exceptions import (
    FetchError,
    InvalidCursorError,
    InvalidFilterError,
    InvalidStatusTransition,
    ListingNotFoundError,
    MarketplaceError,
)

STATUS_CODES = {
    InvalidFilterError: 422,
    InvalidCursorError: 400,
    ListingNotFoundError: 404,
    InvalidStatusTransition: 409,
    FetchError: 503,
}


def http_error(error: MarketplaceError) -> HTTPException:
    """Map a domain error to the HTTPException the router raises."""
    for error_cls, status_code in STATUS_CODES.items():
        if isinstance(error, error_cls):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def filter_params(request_params, reserved: tuple[str, ...]) -> dict[str, str]:
    """
    Collect filter query parameters, joining repeated keys with commas.

    Args:
        request_params: Starlette QueryParams.
        reserved: Parameter names handled by the endpoint itself.

    Returns:
        Flat parameter dictionary for ``from_query_params``.
    """
    params: dict[str, str] = {}
    for key, value in request_params.multi_items():
        if key in reserved:
            continue
        params[key] = f"{params[key]},{value}" if key in params else value
    return params
