"""Policy Enforcement Point client. Asks the remote PDP (OPA) for a decision. No FastAPI."""

import json
import logging
from typing import Any, Optional

import httpx

from app.security.policy_models import (
    PolicyEvaluation,
    PolicyOutcome,
    PolicyQuery,
    PolicyReason,
)

logger = logging.getLogger(__name__)


class PolicyClient:
    """
    Decision contract:
      - no PDP URL configured  -> not enforced (allow)
      - PDP says result: true  -> allowed
      - anything else          -> denied, including transport and parse failures

    No retries, no caching and no timeout of its own; every check is one round trip.
    The decision itself is never logged or persisted here; callers audit it.
    """

    def __init__(
        self,
        opa_url: Optional[str],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._opa_url = opa_url or None
        self._transport = transport

    @property
    def enforced(self) -> bool:
        return self._opa_url is not None

    async def evaluate(self, query: PolicyQuery) -> PolicyEvaluation:
        """Return the tri-state evaluation with a machine-readable reason. Never raises."""
        if self._opa_url is None:
            return PolicyEvaluation(PolicyOutcome.NOT_ENFORCED, PolicyReason.PDP_NOT_CONFIGURED)

        document = query.to_input()
        try:
            body = await self._post({"input": document})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(
                "pdp_unreachable",
                extra={"action": document["action"], "resource": document["resource"], "error": str(e)},
            )
            return PolicyEvaluation(PolicyOutcome.DENIED, PolicyReason.PDP_UNREACHABLE)
        except (ValueError, TypeError) as e:
            logger.warning("pdp_malformed_response", extra={"error": str(e)})
            return PolicyEvaluation(PolicyOutcome.DENIED, PolicyReason.PDP_MALFORMED_RESPONSE)

        if isinstance(body, dict) and body.get("result") is True:
            return PolicyEvaluation(PolicyOutcome.ALLOWED, PolicyReason.PDP_ALLOWED)
        return PolicyEvaluation(PolicyOutcome.DENIED, PolicyReason.PDP_DENIED)

    async def check_policy(self, query: PolicyQuery) -> bool:
        """True when the action may proceed."""
        evaluation = await self.evaluate(query)
        return evaluation.allowed

    async def _post(self, payload: dict) -> Any:
        # HTTP status is not inspected; the body alone decides.
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                self._opa_url,
                content=json.dumps(payload),
                headers={"Content-Type": "application/json"},
            )
        return response.json()
