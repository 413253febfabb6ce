"""Process configuration read from the environment."""

import os

from pydantic import BaseModel, Field

TRUTHY = ("true", "1", "yes", "on")


def env_flag(name, default):
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


class OperatorConfig(BaseModel):
    """Settings for the operator and the CRD installer."""

    detect_runtime: bool = Field(
        default=True,
        description="Detect k3s/rke2 and leave helm-controller CRDs to them",
    )
    update_crds: bool = Field(
        default=False, description="Re-install every CRD even if present"
    )
    manage_crds: bool = Field(
        default=True, description="Install CRDs when the operator starts"
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    worker_limit: int = Field(default=5, description="kopf batching worker limit")
    posting_enabled: bool = Field(
        default=False, description="Post kopf events to Kubernetes"
    )

    class Config:
        frozen = True

    @classmethod
    def from_env(cls):
        """Build the configuration from environment variables."""
        return cls(
            detect_runtime=env_flag("DETECT_K3S_RKE2", True),
            update_crds=env_flag("UPDATE_CRDS", False),
            manage_crds=env_flag("MANAGE_CRDS", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            worker_limit=int(os.getenv("WORKER_LIMIT", "5")),
            posting_enabled=env_flag("POSTING_ENABLED", False),
        )
