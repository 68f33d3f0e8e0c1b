"""Password reset endpoints for local accounts."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from authgate.api.deps import json_response, timing
from authgate.core.extensions import limiter
from authgate.core.logger import ensure_request_id
from authgate.infra import providers
from authgate.schemas import (
    CodeIssuedSchema,
    EmailSchema,
    PasswordResetSchema,
    SecurityCodeSchema,
)
from authgate.services._shared.base import ServiceContext
from authgate.services.auth.dto import PasswordResetIn, SecurityCodeIn

bp = Blueprint("password", __name__, url_prefix="/password")

email_schema = EmailSchema()
code_schema = SecurityCodeSchema()
reset_schema = PasswordResetSchema()
issued_schema = CodeIssuedSchema()


def _reset_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


def _ctx() -> ServiceContext:
    return ServiceContext(request_id=ensure_request_id())


@bp.post("/reset-request")
@limiter.limit(_reset_rate_limit)
@timing
def reset_request():
    """Issue a reset code for an active local account."""

    data = email_schema.load(request.get_json(silent=True) or {})
    ticket = providers.auth_service(_ctx()).request_password_reset(data["email"])
    return json_response({"data": issued_schema.dump(ticket)}, status=202)


@bp.post("/reset-check")
@limiter.limit(_reset_rate_limit)
@timing
def reset_check():
    """Tell whether a reset code is still usable, without consuming it."""

    data = code_schema.load(request.get_json(silent=True) or {})
    valid = providers.auth_service(_ctx()).check_reset_code(SecurityCodeIn(**data))
    return json_response({"data": {"valid": valid}})


@bp.post("/reset")
@limiter.limit(_reset_rate_limit)
@timing
def reset():
    """Set a new password and consume the reset code."""

    data = reset_schema.load(request.get_json(silent=True) or {})
    providers.auth_service(_ctx()).reset_password(PasswordResetIn(**data))
    return "", 204
