"""ProjectHelmChart CRD model, owned by this operator."""

from pydantic import Field
from typing import List, Optional, Dict, Any

from helm_project_operator.crd.base import CRDSpec, CRDStatus
from helm_project_operator.crd.definition import CRDOwner
from helm_project_operator.crd.registry import CRDRegistry


class ProjectHelmChartStatus(CRDStatus):
    """Observed state of a ProjectHelmChart."""

    dashboardValues: Dict[str, Any] = Field(
        default_factory=dict,
        description="Values exposed to dashboards for the deployed release",
    )
    status: Optional[str] = Field(
        default=None, description="Current status of the ProjectHelmChart"
    )
    statusMessage: Optional[str] = Field(
        default=None, description="Human-readable explanation of the status"
    )
    systemNamespace: Optional[str] = Field(
        default=None, description="Namespace the operator runs in"
    )
    releaseNamespace: Optional[str] = Field(
        default=None, description="Namespace the Helm release is deployed to"
    )
    releaseName: Optional[str] = Field(
        default=None, description="Name of the Helm release"
    )
    targetNamespaces: List[str] = Field(
        default_factory=list,
        description="Namespaces of the project the chart is deployed for",
    )


@CRDRegistry.register(
    "helm.cattle.io",
    "v1alpha1",
    "ProjectHelmChart",
    owner=CRDOwner.OPERATOR,
    status=ProjectHelmChartStatus,
    columns=[
        ("Status", ".status.status"),
        ("System Namespace", ".status.systemNamespace"),
        ("Release Namespace", ".status.releaseNamespace"),
        ("Release Name", ".status.releaseName"),
        ("Target Namespaces", ".status.targetNamespaces"),
    ],
)
class ProjectHelmChartSpec(CRDSpec):
    """ProjectHelmChart CRD specification."""

    helmApiVersion: str = Field(
        ..., description="Identifies the Helm chart this ProjectHelmChart deploys"
    )
    values: Dict[str, Any] = Field(
        default_factory=dict, description="Values passed to the Helm chart"
    )
