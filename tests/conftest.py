"""Shared fixtures for the helm_project_operator tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from kubernetes.client.exceptions import ApiException

from helm_project_operator.crd.definition import CRDDefinition, CRDOwner


def make_definition(
    kind: str,
    group: str = "helm.cattle.io",
    version: str = "v1alpha1",
    owner: CRDOwner = CRDOwner.OPERATOR,
    plural: str | None = None,
) -> CRDDefinition:
    plural = plural or kind.lower() + "s"
    return CRDDefinition(
        group=group,
        version=version,
        kind=kind,
        plural=plural,
        singular=kind.lower(),
        owner=owner,
        spec_schema={"type": "object"},
    )


def found_crd(*stored_versions: str) -> SimpleNamespace:
    return SimpleNamespace(
        metadata=SimpleNamespace(resource_version="1"),
        status=SimpleNamespace(stored_versions=list(stored_versions)),
    )


class FakeCRDClient:
    """In-memory stand-in for CRDClient.

    ``state`` maps CRD names to either a found CRD object or an exception to
    raise. Missing names raise a 404.
    """

    def __init__(self, state: dict | None = None) -> None:
        self.state = state or {}
        self.queried: list[str] = []
        self.created: list[CRDDefinition] = []
        self.waited = False
        self.wait_error: Exception | None = None

    def get(self, name: str):
        self.queried.append(name)
        value = self.state.get(name)
        if value is None:
            raise ApiException(status=404, reason="Not Found")
        if isinstance(value, Exception):
            raise value
        return value

    def create(self, *definitions: CRDDefinition):
        self.created.extend(definitions)
        return self

    def wait(self, timeout: float = 60.0, interval: float = 1.0) -> None:
        self.waited = True
        if self.wait_error is not None:
            raise self.wait_error


@pytest.fixture
def fake_client() -> FakeCRDClient:
    return FakeCRDClient()


@pytest.fixture
def scenario_catalog():
    """One operator CRD, two helm-locker CRDs and one helm-controller CRD."""
    primary = [make_definition("ProjectHelmChart")]
    locker = [
        make_definition(
            "HelmChart", version="v1", owner=CRDOwner.HELM_LOCKER
        ),
        make_definition(
            "HelmChart",
            group="charts.cattle.io",
            version="v1",
            owner=CRDOwner.HELM_LOCKER,
        ),
    ]
    controller = [
        make_definition("HelmRelease", owner=CRDOwner.HELM_CONTROLLER)
    ]

    def catalog():
        return list(primary), list(locker), list(controller)

    return catalog
