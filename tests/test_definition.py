"""Tests for the helm_project_operator.crd.definition module."""

from __future__ import annotations

import pytest

from helm_project_operator.crd.definition import (
    CRDDefinition,
    PrinterColumn,
    guess_plural_name,
)

from .conftest import make_definition


@pytest.mark.parametrize(
    "kind,plural",
    [
        ("ProjectHelmChart", "projecthelmcharts"),
        ("HelmRelease", "helmreleases"),
        ("HelmChartConfig", "helmchartconfigs"),
        ("Policy", "policies"),
        ("Gateway", "gateways"),
        ("Ingress", "ingresses"),
        ("Box", "boxes"),
        ("Patch", "patches"),
        ("Leaf", "leafves"),
        ("Knife", "knifeves"),
        ("Quiz", "quizs"),
        ("Fy", "fys"),
        ("Endpoints", "endpoints"),
    ],
)
def test_guess_plural_name(kind: str, plural: str) -> None:
    assert guess_plural_name(kind) == plural


def test_name_and_group_key() -> None:
    definition = make_definition("ProjectHelmChart", plural="projecthelmcharts")

    assert definition.name == "projecthelmcharts.helm.cattle.io"
    assert definition.group_key == "projecthelmcharts"
    assert definition.identity == ("helm.cattle.io", "ProjectHelmChart")


def test_definition_is_immutable() -> None:
    definition = make_definition("HelmRelease")

    with pytest.raises(Exception):
        definition.kind = "Other"


def test_to_manifest() -> None:
    definition = CRDDefinition(
        group="helm.cattle.io",
        version="v1alpha1",
        kind="HelmRelease",
        plural="helmreleases",
        singular="helmrelease",
        spec_schema={"type": "object", "properties": {"a": {"type": "string"}}},
        status_schema={"type": "object"},
        columns=(PrinterColumn(name="State", json_path=".status.state"),),
    )

    manifest = definition.to_manifest()

    assert manifest["apiVersion"] == "apiextensions.k8s.io/v1"
    assert manifest["kind"] == "CustomResourceDefinition"
    assert manifest["metadata"] == {"name": "helmreleases.helm.cattle.io"}
    assert manifest["spec"]["scope"] == "Namespaced"
    assert manifest["spec"]["names"] == {
        "plural": "helmreleases",
        "singular": "helmrelease",
        "kind": "HelmRelease",
    }
    version = manifest["spec"]["versions"][0]
    assert version["name"] == "v1alpha1"
    assert version["served"] is True
    assert version["storage"] is True
    assert version["subresources"] == {"status": {}}
    assert version["additionalPrinterColumns"] == [
        {"name": "State", "type": "string", "jsonPath": ".status.state"}
    ]
    properties = version["schema"]["openAPIV3Schema"]["properties"]
    assert properties["spec"]["properties"] == {"a": {"type": "string"}}
    assert properties["status"] == {"type": "object"}


def test_to_manifest_without_status_or_columns() -> None:
    version = make_definition("HelmChartConfig").to_manifest()["spec"]["versions"][0]

    assert "subresources" not in version
    assert "additionalPrinterColumns" not in version
    assert "status" not in version["schema"]["openAPIV3Schema"]["properties"]
