"""Token check endpoint running the renewal orchestrator."""

from __future__ import annotations

from flask import Blueprint

from authgate.api.deps import (
    attach_tokens,
    evaluate_presented_tokens,
    json_response,
    rejection_error,
    timing,
)
from authgate.schemas import TokenCheckSchema

bp = Blueprint("token", __name__, url_prefix="/token")

check_schema = TokenCheckSchema()


@bp.get("/check")
@timing
def check():
    """Evaluate the presented pair and hand back the pair the client should keep.

    A rejection is rendered as a problem response; for an expired refresh
    token or an unknown device it also carries the re-login header.
    """

    decision = evaluate_presented_tokens()
    if not decision.accepted:
        raise rejection_error(decision)
    body = {
        "decision": decision.kind.value,
        "rotated": decision.rotated,
        "device_id": decision.device_id,
        "claims": decision.claims,
    }
    response = json_response({"data": check_schema.dump(body)})
    return attach_tokens(response, decision.pair)
