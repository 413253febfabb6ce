"""Detect which Kubernetes distribution a cluster runs on."""

import logging
from enum import Enum

import kubernetes
import urllib3
from kubernetes.client.exceptions import ApiException

from helm_project_operator.errors import RuntimeDetectionError

logger = logging.getLogger(__name__)


class RuntimeIdentity(str, Enum):
    K3S = "k3s"
    RKE2 = "rke2"
    RKE = "rke"
    EKS = "eks"
    GKE = "gke"
    AKS = "aks"
    UNKNOWN = "unknown"


# Distributions that ship helm-controller and own its CRDs
HELM_CONTROLLER_RUNTIMES = (RuntimeIdentity.K3S, RuntimeIdentity.RKE2)

VERSION_MARKERS = [
    ("+k3s", RuntimeIdentity.K3S),
    ("+rke2", RuntimeIdentity.RKE2),
    ("-eks-", RuntimeIdentity.EKS),
    ("-gke.", RuntimeIdentity.GKE),
]

LABEL_MARKERS = [
    ("node.kubernetes.io/instance-type", "k3s", RuntimeIdentity.K3S),
    ("node.kubernetes.io/instance-type", "rke2", RuntimeIdentity.RKE2),
    ("eks.amazonaws.com/nodegroup", None, RuntimeIdentity.EKS),
    ("cloud.google.com/gke-nodepool", None, RuntimeIdentity.GKE),
    ("kubernetes.azure.com/cluster", None, RuntimeIdentity.AKS),
]

ANNOTATION_MARKERS = [
    ("rke.cattle.io/external-ip", RuntimeIdentity.RKE),
    ("rke.cattle.io/internal-ip", RuntimeIdentity.RKE),
]


def runtime_from_version(git_version):
    """Match a ``gitVersion`` string such as ``v1.27.4+k3s1``."""
    for marker, identity in VERSION_MARKERS:
        if marker in (git_version or ""):
            return identity
    return RuntimeIdentity.UNKNOWN


def runtime_from_node(node):
    """Match a node's kubelet version, labels and annotations."""
    node_info = node.status.node_info if node.status else None
    if node_info is not None:
        identity = runtime_from_version(node_info.kubelet_version)
        if identity is not RuntimeIdentity.UNKNOWN:
            return identity

    labels = node.metadata.labels or {}
    for label, value, identity in LABEL_MARKERS:
        if label in labels and (value is None or labels[label] == value):
            return identity

    annotations = node.metadata.annotations or {}
    for annotation, identity in ANNOTATION_MARKERS:
        if annotation in annotations:
            return identity

    return RuntimeIdentity.UNKNOWN


def identify_runtime(api_client=None):
    """Identify the Kubernetes distribution of the cluster.

    The server version is checked first, then the nodes.

    Returns:
        RuntimeIdentity: the closest known distribution, or UNKNOWN

    Raises:
        RuntimeDetectionError: if the cluster could not be inspected
    """
    try:
        version_info = kubernetes.client.VersionApi(api_client).get_code()
        identity = runtime_from_version(version_info.git_version)
        if identity is not RuntimeIdentity.UNKNOWN:
            return identity

        nodes = kubernetes.client.CoreV1Api(api_client).list_node().items
    except ApiException as e:
        raise RuntimeDetectionError(
            f"could not identify Kubernetes runtime: {e.status} {e.reason}"
        ) from e
    except urllib3.exceptions.HTTPError as e:
        raise RuntimeDetectionError(
            f"could not identify Kubernetes runtime: {e}"
        ) from e

    for node in nodes:
        identity = runtime_from_node(node)
        if identity is not RuntimeIdentity.UNKNOWN:
            return identity

    return RuntimeIdentity.UNKNOWN


def should_manage_helm_controller_crds(
    api_client=None, detect_runtime=True, identify=identify_runtime
):
    """Determine if this operator should manage the helm-controller CRDs.

    k3s and rke2 run their own helm-controller and own these CRDs. Detection
    errors count as an unknown runtime, so the CRDs are still managed.
    """
    if not detect_runtime:
        logger.debug(
            "k3s/rke2 detection feature is disabled; `helm-controller` CRDs will be managed"
        )
        return True

    try:
        runtime = identify(api_client)
    except Exception as e:
        logger.error(f"could not identify Kubernetes runtime: {e}")
        runtime = RuntimeIdentity.UNKNOWN

    if runtime in HELM_CONTROLLER_RUNTIMES:
        logger.debug(
            f"the cluster is running on {runtime.value}, "
            "`helm-controller` CRDs will not be managed by this operator"
        )
        return False

    return True
