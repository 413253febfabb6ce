"""CRD management for the Helm Project Operator."""

from .definition import CRDDefinition, CRDOwner, PrinterColumn
from .registry import CRDRegistry
from .base import CRDSpec, CRDStatus
from .generator import list_crds, manifests

__all__ = [
    "CRDDefinition",
    "CRDOwner",
    "PrinterColumn",
    "CRDRegistry",
    "CRDSpec",
    "CRDStatus",
    "list_crds",
    "manifests",
]
