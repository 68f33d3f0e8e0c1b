"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, make_response, request

from authgate.core.errors import ServiceUnavailable, SessionExpired, Unauthorized
from authgate.core.logger import ensure_request_id
from authgate.infra import providers
from authgate.services._shared.base import ServiceContext
from authgate.services.renewal import RenewalDecision, RenewalError, TokenPair
from authgate.services.tokens.issuer import DeviceInfo

F = TypeVar("F", bound=Callable[..., Any])

_REJECTION_MESSAGES = {
    RenewalError.INVALID_TOKEN: "Invalid or missing token",
    RenewalError.REFRESH_EXPIRED: "Session expired, please sign in again",
    RenewalError.DEVICE_NOT_REGISTERED: "Device is not registered, please sign in again",
}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ---------------------------- Token exchange ------------------------------ #


def presented_tokens() -> TokenPair:
    """Read the access/refresh pair from the configured request headers."""

    config = current_app.config
    return TokenPair.from_headers(
        request.headers.get(config["ACCESS_TOKEN_HEADER"]),
        request.headers.get(config["REFRESH_TOKEN_HEADER"]),
    )


def device_from_headers() -> DeviceInfo:
    """Read the device identity headers; a missing name defaults downstream."""

    config = current_app.config
    return DeviceInfo(
        name=(request.headers.get(config["DEVICE_NAME_HEADER"]) or "").strip(),
        signature=(request.headers.get(config["DEVICE_SIGNATURE_HEADER"]) or "").strip(),
    )


def attach_tokens(response: Response, pair: TokenPair) -> Response:
    """Copy the non-empty tokens of ``pair`` into the response headers."""

    config = current_app.config
    if pair.access_token:
        response.headers[config["ACCESS_TOKEN_HEADER"]] = pair.access_token
    if pair.refresh_token:
        response.headers[config["REFRESH_TOKEN_HEADER"]] = pair.refresh_token
    return response


def rejection_error(decision: RenewalDecision) -> Exception:
    """Map a rejected decision to the API error raised for it."""

    error = decision.error or RenewalError.INVALID_TOKEN
    if error is RenewalError.ENTROPY_UNAVAILABLE:
        return ServiceUnavailable("Token issuance is temporarily unavailable")
    return SessionExpired(
        _REJECTION_MESSAGES[error],
        code=error.value,
        relogin_header=current_app.config["REFRESH_EXPIRED_HEADER"],
        force_relogin=error.forces_relogin,
    )


def evaluate_presented_tokens() -> RenewalDecision:
    """Run the renewal orchestrator over the request's token headers."""

    ctx = ServiceContext(request_id=ensure_request_id())
    return providers.renewal_service(ctx).evaluate(presented_tokens())


def authorize_device(*, echo_tokens: bool = True) -> Callable[[F], F]:
    """Authorize the request through the renewal orchestrator.

    On success the access claims are available as ``g.token_claims`` and the
    bound device as ``g.device_id``. A request that ends without an access
    token (for example refresh token only) is refused.

    Parameters
    ----------
    echo_tokens: bool
        Write the (possibly rotated) pair to the response headers. Handlers
        that delete the device pass ``False``.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            decision = evaluate_presented_tokens()
            if not decision.accepted:
                raise rejection_error(decision)
            if not decision.claims:
                raise Unauthorized("Access token required", code="invalid_token")
            g.token_claims = decision.claims
            g.device_id = decision.device_id
            response = make_response(func(*args, **kwargs))
            if not echo_tokens:
                return response
            return attach_tokens(response, decision.pair)

        return wrapper  # type: ignore[return-value]

    return decorator


require_device_access = authorize_device()
