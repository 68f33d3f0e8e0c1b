# authgate/infra/mail/logging_code_delivery.py
from __future__ import annotations

import logging

from authgate.services._shared.ports import CodeDelivery, SecurityCodeTicket

log = logging.getLogger(__name__)


class LoggingCodeDelivery(CodeDelivery):
    """
    Record that a security code was issued without sending it anywhere.

    Active until a mail adapter is installed as ``app.extensions["code_delivery"]``.
    The code itself never reaches the log.
    """

    def deliver(self, ticket: SecurityCodeTicket) -> None:
        log.info(
            "security_code.issued",
            extra={
                "reason": ticket.purpose.value,
                "credentials_id": ticket.credentials_id,
                "expires_at": ticket.expires_at.isoformat(),
            },
        )
