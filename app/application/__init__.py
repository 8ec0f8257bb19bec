# Application layer: services that orchestrate security and governance.

from app.application.compliance_gateway import ComplianceGateway

__all__ = [
    "ComplianceGateway",
]
