from .dto import DecisionKind, RenewalDecision, RenewalError, TokenPair
from .service import TokenRenewalService

__all__ = [
    "DecisionKind",
    "RenewalDecision",
    "RenewalError",
    "TokenPair",
    "TokenRenewalService",
]
