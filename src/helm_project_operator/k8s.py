"""Helpers for connecting to the Kubernetes API."""

__all__ = ("create_api_client",)

import logging

import kubernetes
from kubernetes.config import ConfigException

logger = logging.getLogger(__name__)


def create_api_client() -> kubernetes.client.ApiClient:
    """Get a Kubernetes API client configured with available cluster
    authentication.

    In-cluster authentication is used when available. Otherwise this falls
    back to the local kubectl config file, which is appropriate for
    development.
    """
    try:
        kubernetes.config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
    except ConfigException:
        kubernetes.config.load_kube_config()
        logger.info("Loaded local Kubernetes config")
    return kubernetes.client.ApiClient()
