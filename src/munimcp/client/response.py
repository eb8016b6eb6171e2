"""Response decoding -- maps :class:`httpx.Response` bodies to munimcp models.

This module sits between the HTTP layer and the models.  After a request
completes, :func:`check_status` enforces the HTTP 200 contract and
:func:`decode_body` decodes the JSON body into one of the upstream shapes.
:func:`flatten_predictions` reduces the nested prediction envelopes to the
flat :class:`~munimcp.models.Prediction` view.

Both the async and the blocking transit client use these helpers, so the two
behave identically apart from how they wait on the network.
"""

from __future__ import annotations

from typing import Optional, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from munimcp.exceptions import DecodeError, UnexpectedStatusError
from munimcp.models import Prediction, PredictionResponse, RouteDetails, RouteInfo

ROUTE_LIST: TypeAdapter[list[RouteInfo]] = TypeAdapter(list[RouteInfo])
ROUTE_DETAILS: TypeAdapter[RouteDetails] = TypeAdapter(RouteDetails)
# A ``null`` body decodes to no envelopes at all.
PREDICTION_ENVELOPES: TypeAdapter[Optional[list[PredictionResponse]]] = TypeAdapter(
    Optional[list[PredictionResponse]]
)

M = TypeVar("M")


def check_status(response: httpx.Response) -> None:
    """Raise :class:`UnexpectedStatusError` unless the status is exactly 200."""
    if response.status_code != httpx.codes.OK:
        raise UnexpectedStatusError(response.status_code)


def decode_body(response: httpx.Response, adapter: TypeAdapter[M]) -> M:
    """Decode the JSON body of *response* with *adapter*.

    Args:
        response: A response that already passed :func:`check_status`.
        adapter: The target shape, e.g. :data:`ROUTE_LIST`.

    Returns:
        The decoded value.

    Raises:
        DecodeError: The body is not JSON or does not fit the shape.
    """
    try:
        return adapter.validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(
            f"malformed response body: {exc.error_count()} decode error(s), "
            f"first: {exc.errors()[0]['msg']}"
        ) from exc


def flatten_predictions(envelopes: Optional[list[PredictionResponse]]) -> list[Prediction]:
    """Flatten the first envelope's values into :class:`Prediction` records.

    Only the first envelope is considered.  No envelopes, or a first envelope
    without values, yields an empty list rather than an error.

    Raises:
        DecodeError: A prediction timestamp cannot be represented as a date.
    """
    if not envelopes or not envelopes[0].values:
        return []
    try:
        return [Prediction.from_value(value) for value in envelopes[0].values]
    except (ValueError, OverflowError, OSError) as exc:
        raise DecodeError(f"malformed prediction timestamp: {exc}") from exc
