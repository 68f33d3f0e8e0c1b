# authgate/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from authgate.core import errors as api_errors
from authgate.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    EntropyUnavailableError,
    InactiveAccountError,
    InvalidSecurityCodeError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    TooManyRequestsError,
    ValidationFailedError,
)
from authgate.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated user identifier.
    :param device_id: Device the current request was authenticated for.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    device_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services never touch the global session; they go through a Unit of Work
    or through a port whose adapter owns one.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work (flushes are refused).

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        # Order matters: InactiveAccountError is an AuthenticationError
        if isinstance(exc, InactiveAccountError):
            return api_errors.Forbidden(str(exc), code="inactive_account")

        if isinstance(exc, AuthenticationError):
            return api_errors.Unauthorized(str(exc), code="invalid_credentials")

        if isinstance(exc, InvalidTokenError):
            return api_errors.Unauthorized(str(exc), code="invalid_token")

        if isinstance(exc, EntropyUnavailableError):
            return api_errors.ServiceUnavailable(str(exc))

        if isinstance(exc, InvalidSecurityCodeError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="invalid_security_code",
            )

        if isinstance(exc, TooManyRequestsError):
            return api_errors.APIError(
                message=str(exc),
                status_code=429,
                code="too_many_requests",
            )

        if isinstance(exc, ValidationFailedError):
            return api_errors.APIError(
                message=str(exc),
                status_code=422,
                code="validation_error",
            )

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
