"""HelmRelease CRD model, owned by helm-locker."""

from pydantic import Field
from typing import Optional

from helm_project_operator.crd.base import CRDSpec, CRDStatus
from helm_project_operator.crd.definition import CRDOwner
from helm_project_operator.crd.registry import CRDRegistry


class ReleaseKey(CRDSpec):
    """Reference to a Helm release."""

    name: str = Field(..., description="Name of the Helm release")
    namespace: str = Field(..., description="Namespace of the Helm release")


class HelmReleaseStatus(CRDStatus):
    """Observed state of a locked Helm release."""

    state: Optional[str] = Field(default=None, description="Lock state")
    version: Optional[int] = Field(
        default=None, description="Release revision currently locked"
    )
    description: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)


@CRDRegistry.register(
    "helm.cattle.io",
    "v1alpha1",
    "HelmRelease",
    owner=CRDOwner.HELM_LOCKER,
    status=HelmReleaseStatus,
    columns=[
        ("Release Name", ".spec.release.name"),
        ("Release Namespace", ".spec.release.namespace"),
        ("Version", ".status.version"),
        ("State", ".status.state"),
    ],
)
class HelmReleaseSpec(CRDSpec):
    """HelmRelease CRD specification."""

    release: ReleaseKey = Field(..., description="The Helm release to lock")
