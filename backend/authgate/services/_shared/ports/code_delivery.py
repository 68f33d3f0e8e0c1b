from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class CodePurpose(str, enum.Enum):
    """What a security code unlocks."""

    ACTIVATION = "activation"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True, slots=True)
class SecurityCodeTicket:
    """
    A freshly issued security code and where it should go.

    :ivar purpose: Activation or password reset.
    :ivar credentials_id: Account reference the code must be presented with.
    :ivar email: Recipient address.
    :ivar name: Recipient display name.
    :ivar code: Plain code; only its digest is stored.
    :ivar expires_at: Instant after which the code is refused (UTC).
    """

    purpose: CodePurpose
    credentials_id: int
    email: str
    name: str
    code: str
    expires_at: datetime


class CodeDelivery(Protocol):
    """Port for handing a security code to its owner (mail, SMS, ...)."""

    def deliver(self, ticket: SecurityCodeTicket) -> None:
        """Send ``ticket`` to ``ticket.email``. Must not log ``ticket.code``."""


class InMemoryCodeDelivery(CodeDelivery):
    """Keeps delivered tickets in a list for assertions."""

    def __init__(self) -> None:
        self.sent: list[SecurityCodeTicket] = []

    def deliver(self, ticket: SecurityCodeTicket) -> None:
        self.sent.append(ticket)

    @property
    def last(self) -> SecurityCodeTicket:
        return self.sent[-1]
