"""Drop CRDs that are already installed in the cluster."""

import logging

import urllib3
from kubernetes.client.exceptions import ApiException

from helm_project_operator.errors import CRDQueryError

logger = logging.getLogger(__name__)


def stored_versions(crd):
    status = getattr(crd, "status", None)
    return list(getattr(status, "stored_versions", None) or [])


def filter_missing_crds(client, expected):
    """Return the CRDs from ``expected`` that are missing from the cluster.

    The input list is left untouched. Any query error other than "not found"
    aborts the whole filter, since a partially checked list cannot be trusted.

    Args:
        client: CRDClient (anything with ``get(name)``)
        expected: CRDDefinitions to check

    Raises:
        CRDQueryError: if the existence of a CRD could not be determined
    """
    missing = []
    for definition in expected:
        crd_name = definition.name

        try:
            found = client.get(crd_name)
        except ApiException as e:
            if e.status != 404:
                raise CRDQueryError(crd_name, f"{e.status} {e.reason}") from e
            logger.debug(f"Did not find `{crd_name}` on the cluster, it will be installed")
            missing.append(definition)
            continue
        except urllib3.exceptions.HTTPError as e:
            raise CRDQueryError(crd_name, str(e)) from e

        versions = stored_versions(found)
        if not versions:
            raise CRDQueryError(crd_name, "CRD exists but reports no stored versions")

        logger.debug(
            f"Found `{crd_name}` at version `{versions[0]}`, "
            f"expecting version `{definition.version}`"
        )
        logger.debug(
            f"Installing `{crd_name}` will be skipped; a suitable version exists on the cluster"
        )

    return missing
