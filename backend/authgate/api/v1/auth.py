"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, g, request

from authgate.api.deps import (
    attach_tokens,
    authorize_device,
    device_from_headers,
    json_response,
    require_device_access,
    timing,
)
from authgate.core.extensions import limiter
from authgate.core.logger import ensure_request_id
from authgate.infra import providers
from authgate.schemas import (
    CodeIssuedSchema,
    EmailSchema,
    LoginSchema,
    RegisterSchema,
    SecurityCodeSchema,
    TokenPairSchema,
    UserSchema,
    WhoAmISchema,
)
from authgate.services._shared.base import ServiceContext
from authgate.services.auth.dto import LoginIn, RegisterIn, SecurityCodeIn
from authgate.services.renewal import TokenPair

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
user_schema = UserSchema()
whoami_schema = WhoAmISchema()
token_schema = TokenPairSchema()
email_schema = EmailSchema()
code_schema = SecurityCodeSchema()
issued_schema = CodeIssuedSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


def _ctx(*, actor_id: int | None = None, device_id: int | None = None) -> ServiceContext:
    return ServiceContext(actor_id=actor_id, device_id=device_id, request_id=ensure_request_id())


@bp.post("/register")
@timing
def register():
    """Register a local account and return its public representation."""

    data = register_schema.load(request.get_json(silent=True) or {})
    service = providers.auth_service(_ctx())
    user = service.register_local(RegisterIn(**data))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.post("/activate")
@timing
def activate():
    """Activate a registered account with the code it was sent."""

    data = code_schema.load(request.get_json(silent=True) or {})
    service = providers.auth_service(_ctx())
    user = service.activate_account(SecurityCodeIn(**data))
    return json_response({"data": user_schema.dump(user)})


@bp.post("/activate/request")
@limiter.limit(_login_rate_limit)
@timing
def request_activation():
    """Send a fresh activation code to an inactive account."""

    data = email_schema.load(request.get_json(silent=True) or {})
    service = providers.auth_service(_ctx())
    ticket = service.request_activation_code(data["email"])
    return json_response({"data": issued_schema.dump(ticket)}, status=202)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue the device's first token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    service = providers.auth_service(_ctx())
    tokens = service.login(LoginIn(**data), device_from_headers())
    response = json_response({"data": token_schema.dump(tokens)})
    return attach_tokens(
        response,
        TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token),
    )


@bp.get("/whoami")
@require_device_access
@timing
def whoami():
    """Return the signed-in user as seen through the current access token."""

    claims = g.token_claims
    service = providers.auth_service(_ctx(actor_id=claims.get("user_id"), device_id=g.device_id))
    user = service.whoami(int(claims["user_id"]))
    body = {
        "user_id": user.id,
        "name": user.name,
        "email": user.email,
        "device_id": g.device_id,
    }
    return json_response({"data": whoami_schema.dump(body)})


@bp.post("/logout")
@authorize_device(echo_tokens=False)
@timing
def logout():
    """Delete the current device, revoking its tokens."""

    service = providers.auth_service(
        _ctx(actor_id=g.token_claims.get("user_id"), device_id=g.device_id)
    )
    service.logout(int(g.device_id))
    return "", 204
