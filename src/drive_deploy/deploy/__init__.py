"""PDF deploy workflow."""

from .workflow import (
    DeployWorkflow, DeployRequest, DeployResult, DeployStatus,
    PreviousVersionAction, deploy_pdf
)

__all__ = [
    "DeployWorkflow",
    "DeployRequest",
    "DeployResult",
    "DeployStatus",
    "PreviousVersionAction",
    "deploy_pdf",
]
