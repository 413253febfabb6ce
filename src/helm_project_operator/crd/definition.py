"""Immutable CRD definitions and their CustomResourceDefinition manifests."""

import re
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field


class CRDOwner(str, Enum):
    """The component responsible for installing and updating a CRD."""

    OPERATOR = "operator"
    HELM_LOCKER = "helm-locker"
    HELM_CONTROLLER = "helm-controller"


class PrinterColumn(BaseModel):
    """An additional printer column shown by ``kubectl get``."""

    name: str
    json_path: str
    type: str = "string"

    class Config:
        frozen = True

    def to_manifest(self):
        return {"name": self.name, "type": self.type, "jsonPath": self.json_path}


def guess_plural_name(kind):
    """Guess the lowercase plural resource name for a kind.

    Same rules as wrangler's ``name.GuessPluralName``, so names match CRDs
    installed by Rancher components, e.g.
    ``HelmChart`` -> ``helmcharts``, ``Policy`` -> ``policies``.
    """
    if not kind:
        return kind
    if kind.lower() == "endpoints":
        return kind.lower()

    lower = kind.lower()
    if lower.endswith(("s", "ch", "x", "sh")):
        return lower + "es"
    if lower.endswith(("f", "fe")):
        return lower + "ves"
    if len(lower) > 2 and re.search(r"[^aeiou]y$", lower):
        return lower[:-1] + "ies"
    return lower + "s"


class CRDDefinition(BaseModel):
    """A custom resource type and everything needed to register it."""

    group: str
    version: str
    kind: str
    plural: str
    singular: str
    scope: str = "Namespaced"
    owner: CRDOwner = CRDOwner.OPERATOR
    spec_schema: Dict[str, Any] = Field(default_factory=dict)
    status_schema: Optional[Dict[str, Any]] = None
    columns: Tuple[PrinterColumn, ...] = ()

    class Config:
        frozen = True

    @property
    def name(self):
        """Cluster-facing CRD name, ``<plural>.<group>``."""
        return f"{self.plural}.{self.group}"

    @property
    def group_key(self):
        """Key used to group definitions into output files."""
        return self.name.split(".", 1)[0]

    @property
    def identity(self):
        return (self.group, self.kind)

    def to_manifest(self):
        """Render the ``apiextensions.k8s.io/v1`` CustomResourceDefinition."""
        properties = {"spec": self.spec_schema}
        if self.status_schema is not None:
            properties["status"] = self.status_schema

        version = {
            "name": self.version,
            "served": True,
            "storage": True,
            "schema": {
                "openAPIV3Schema": {
                    "type": "object",
                    "properties": properties,
                }
            },
        }
        if self.status_schema is not None:
            version["subresources"] = {"status": {}}
        if self.columns:
            version["additionalPrinterColumns"] = [
                column.to_manifest() for column in self.columns
            ]

        return {
            "apiVersion": "apiextensions.k8s.io/v1",
            "kind": "CustomResourceDefinition",
            "metadata": {"name": self.name},
            "spec": {
                "group": self.group,
                "versions": [version],
                "scope": self.scope,
                "names": {
                    "plural": self.plural,
                    "singular": self.singular,
                    "kind": self.kind,
                },
            },
        }
