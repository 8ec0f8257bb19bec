"""Policy query and evaluation values exchanged with the PDP. Immutable, no I/O."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping


class PolicyOutcome(str, Enum):
    """Internal tri-state; collapsed to a boolean at the client boundary."""

    NOT_ENFORCED = "not_enforced"  # no PDP configured
    DENIED = "denied"
    ALLOWED = "allowed"


class PolicyReason(str, Enum):
    PDP_NOT_CONFIGURED = "pdp_not_configured"
    PDP_ALLOWED = "pdp_allowed"
    PDP_DENIED = "pdp_denied"
    PDP_UNREACHABLE = "pdp_unreachable"
    PDP_MALFORMED_RESPONSE = "pdp_malformed_response"


@dataclass(frozen=True)
class PolicyQuery:
    """
    What is being attempted, on what, by whom.
    `user` is opaque actor context forwarded to the PDP; it carries at least a role.
    """

    action: str
    resource: str
    user: Mapping[str, Any] = field(default_factory=dict)

    def to_input(self) -> Dict[str, Any]:
        """Body of the PDP `input` document."""
        return {
            "action": _plain(self.action),
            "resource": _plain(self.resource),
            "user": dict(self.user),
        }


@dataclass(frozen=True)
class PolicyEvaluation:
    outcome: PolicyOutcome
    reason: PolicyReason

    @property
    def allowed(self) -> bool:
        """Not-enforced and allowed both permit the action."""
        return self.outcome is not PolicyOutcome.DENIED


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
