"""Tests for the helm_project_operator.crd.installer module."""

from __future__ import annotations

from unittest import mock

import pytest
from kubernetes.client.exceptions import ApiException

from helm_project_operator.crd.installer import (
    CRDInstaller,
    create_crds,
    merge_groups,
)
from helm_project_operator.crd.runtime import (
    RuntimeIdentity,
    should_manage_helm_controller_crds,
)
from helm_project_operator.errors import (
    CRDBatchError,
    CRDQueryError,
    DuplicateCRDError,
    RuntimeDetectionError,
)

from .conftest import FakeCRDClient, found_crd, make_definition


def manage(value):
    return mock.Mock(return_value=value)


def runtime_check_for(runtime):
    """Build a runtime check that uses the real ownership rules."""

    def check(api_client, detect_runtime):
        return should_manage_helm_controller_crds(
            api_client, detect_runtime, mock.Mock(return_value=runtime)
        )

    return check


def test_merge_groups_preserves_every_entry() -> None:
    g1 = [make_definition("A"), make_definition("B")]
    g2 = [make_definition("C")]
    g3 = [make_definition("D"), make_definition("E")]

    merged = merge_groups(g1, g2, g3)

    assert [d.kind for d in merged] == ["A", "B", "C", "D", "E"]


def test_merge_groups_rejects_duplicates() -> None:
    with pytest.raises(DuplicateCRDError):
        merge_groups([make_definition("A")], [make_definition("A")])


def test_plan_scenario_on_k3s(scenario_catalog) -> None:
    _, locker, _ = scenario_catalog()
    client = FakeCRDClient({d.name: found_crd("v1") for d in locker})
    installer = CRDInstaller(
        client,
        detect_runtime=True,
        catalog=scenario_catalog,
        runtime_check=runtime_check_for(RuntimeIdentity.K3S),
    )

    plan = installer.plan()

    assert [d.name for d in plan] == ["projecthelmcharts.helm.cattle.io"]


def test_plan_includes_controller_group_when_managed(scenario_catalog) -> None:
    installer = CRDInstaller(
        FakeCRDClient(), catalog=scenario_catalog, runtime_check=manage(True)
    )

    plan = installer.plan()

    assert [d.group_key for d in plan] == [
        "projecthelmcharts",
        "helmcharts",
        "helmcharts",
        "helmreleases",
    ]


def test_plan_excludes_controller_group_even_when_missing(scenario_catalog) -> None:
    installer = CRDInstaller(
        FakeCRDClient(), catalog=scenario_catalog, runtime_check=manage(False)
    )

    plan = installer.plan()

    assert "helmreleases" not in [d.group_key for d in plan]
    assert len(plan) == 3


def test_runtime_detection_failure_fails_open(scenario_catalog) -> None:
    def check(api_client, detect_runtime):
        identify = mock.Mock(side_effect=RuntimeDetectionError("no access"))
        return should_manage_helm_controller_crds(api_client, detect_runtime, identify)

    installer = CRDInstaller(
        FakeCRDClient(), catalog=scenario_catalog, runtime_check=check
    )

    assert "helmreleases" in [d.group_key for d in installer.plan()]


def test_detect_runtime_is_passed_to_runtime_check(scenario_catalog) -> None:
    check = manage(True)
    api_client = object()
    installer = CRDInstaller(
        FakeCRDClient(),
        api_client=api_client,
        detect_runtime=False,
        catalog=scenario_catalog,
        runtime_check=check,
    )

    installer.plan()

    check.assert_called_once_with(api_client, False)


def test_update_crds_skips_filter(scenario_catalog) -> None:
    primary, locker, controller = scenario_catalog()
    everything = primary + locker + controller
    client = FakeCRDClient({d.name: found_crd("v1") for d in everything})
    installer = CRDInstaller(
        client, catalog=scenario_catalog, runtime_check=manage(True)
    )

    with mock.patch(
        "helm_project_operator.crd.installer.filter_missing_crds"
    ) as filter_missing:
        plan = installer.plan(update_crds=True)

    filter_missing.assert_not_called()
    assert client.queried == []
    assert plan == everything


def test_filter_failure_aborts_plan(scenario_catalog) -> None:
    _, _, controller = scenario_catalog()
    client = FakeCRDClient(
        {controller[0].name: ApiException(status=500, reason="Internal Server Error")}
    )
    installer = CRDInstaller(
        client, catalog=scenario_catalog, runtime_check=manage(True)
    )

    with pytest.raises(CRDQueryError):
        installer.create()

    assert client.created == []


def test_create_submits_plan_and_waits(scenario_catalog) -> None:
    client = FakeCRDClient()
    installer = CRDInstaller(
        client, catalog=scenario_catalog, runtime_check=manage(False)
    )

    installed = installer.create()

    assert client.created == installed
    assert len(installed) == 3
    assert client.waited


def test_create_with_nothing_to_install(scenario_catalog) -> None:
    primary, locker, controller = scenario_catalog()
    client = FakeCRDClient(
        {d.name: found_crd("v1") for d in primary + locker + controller}
    )
    installer = CRDInstaller(
        client, catalog=scenario_catalog, runtime_check=manage(True)
    )

    assert installer.create() == []
    assert not client.waited


def test_create_surfaces_batch_error(scenario_catalog) -> None:
    client = FakeCRDClient()
    client.wait_error = CRDBatchError({"helmcharts.helm.cattle.io": "422 Invalid"})
    installer = CRDInstaller(
        client, catalog=scenario_catalog, runtime_check=manage(True)
    )

    with pytest.raises(CRDBatchError) as excinfo:
        installer.create()

    assert "helmcharts.helm.cattle.io" in excinfo.value.failures


@mock.patch("helm_project_operator.crd.installer.CRDInstaller")
@mock.patch("helm_project_operator.crd.installer.CRDClient")
def test_create_crds(crd_client, installer_cls) -> None:
    api_client = object()

    create_crds(api_client, update_crds=True, detect_runtime=False)

    crd_client.assert_called_once_with(api_client)
    installer_cls.assert_called_once_with(
        crd_client.return_value, api_client=api_client, detect_runtime=False
    )
    installer_cls.return_value.create.assert_called_once_with(update_crds=True)
