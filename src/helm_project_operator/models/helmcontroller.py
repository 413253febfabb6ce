"""HelmChart and HelmChartConfig CRD models, owned by helm-controller.

k3s and rke2 ship helm-controller and manage these CRDs themselves.
"""

from pydantic import Field
from typing import Optional, Dict

from helm_project_operator.crd.base import CRDSpec, CRDStatus
from helm_project_operator.crd.definition import CRDOwner
from helm_project_operator.crd.registry import CRDRegistry


class HelmChartStatus(CRDStatus):
    """Observed state of a HelmChart."""

    jobName: Optional[str] = Field(
        default=None, description="Name of the job running helm"
    )


@CRDRegistry.register(
    "helm.cattle.io",
    "v1",
    "HelmChart",
    owner=CRDOwner.HELM_CONTROLLER,
    status=HelmChartStatus,
    columns=[
        ("Job", ".status.jobName"),
        ("Chart", ".spec.chart"),
        ("TargetNamespace", ".spec.targetNamespace"),
        ("Version", ".spec.version"),
        ("Repo", ".spec.repo"),
        ("HelmVersion", ".spec.helmVersion"),
        ("Bootstrap", ".spec.bootstrap"),
    ],
)
class HelmChartSpec(CRDSpec):
    """HelmChart CRD specification."""

    targetNamespace: Optional[str] = Field(default=None)
    createNamespace: Optional[bool] = Field(default=None)
    chart: Optional[str] = Field(default=None, description="Chart name or URL")
    version: Optional[str] = Field(default=None)
    repo: Optional[str] = Field(default=None)
    repoCA: Optional[str] = Field(default=None)
    set: Dict[str, str] = Field(default_factory=dict)
    valuesContent: Optional[str] = Field(default=None)
    helmVersion: Optional[str] = Field(default=None)
    bootstrap: Optional[bool] = Field(default=None)
    chartContent: Optional[str] = Field(default=None)
    jobImage: Optional[str] = Field(default=None)
    timeout: Optional[str] = Field(default=None)
    failurePolicy: Optional[str] = Field(default=None)
    authSecret: Optional[Dict[str, str]] = Field(default=None)
    dockerRegistrySecret: Optional[Dict[str, str]] = Field(default=None)


@CRDRegistry.register(
    "helm.cattle.io",
    "v1",
    "HelmChartConfig",
    owner=CRDOwner.HELM_CONTROLLER,
)
class HelmChartConfigSpec(CRDSpec):
    """HelmChartConfig CRD specification."""

    valuesContent: Optional[str] = Field(default=None)
    failurePolicy: Optional[str] = Field(default=None)
