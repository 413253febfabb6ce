"""Plan and install the CRDs this operator needs."""

import logging

from helm_project_operator.errors import DuplicateCRDError

from .client import CRDClient
from .filter import filter_missing_crds
from .generator import list_crds
from .runtime import should_manage_helm_controller_crds

logger = logging.getLogger(__name__)


def merge_groups(*groups):
    """Concatenate CRD groups, rejecting duplicate group/kind identities."""
    merged = []
    seen = set()
    for group in groups:
        for definition in group:
            if definition.identity in seen:
                raise DuplicateCRDError(definition.identity)
            seen.add(definition.identity)
            merged.append(definition)
    return merged


class CRDInstaller:
    """Decides which CRDs to install and submits them to the cluster.

    Args:
        client: CRDClient used for existence checks and creation
        api_client: kubernetes ApiClient used for runtime detection
        detect_runtime: leave helm-controller CRDs alone on k3s/rke2
        catalog: callable returning (operator, helm-locker, helm-controller)
            CRD groups
        runtime_check: callable deciding whether helm-controller CRDs are
            managed by this operator
    """

    def __init__(
        self,
        client,
        api_client=None,
        detect_runtime=True,
        catalog=list_crds,
        runtime_check=should_manage_helm_controller_crds,
    ):
        self.client = client
        self.api_client = api_client
        self.detect_runtime = detect_runtime
        self.catalog = catalog
        self.runtime_check = runtime_check

    def plan(self, update_crds=False):
        """Return the CRDs that should be created or updated.

        Raises:
            CRDQueryError: if the cluster state of any CRD is unknown
            DuplicateCRDError: if two groups define the same CRD
        """
        crds, locker_crds, controller_crds = self.catalog()

        # When update_crds is set, filtering is skipped and every CRD is re-installed
        if not update_crds:
            crds = filter_missing_crds(self.client, crds)
            locker_crds = filter_missing_crds(self.client, locker_crds)
            controller_crds = filter_missing_crds(self.client, controller_crds)
        else:
            logger.debug("UpdateCRDs is enabled; all CRDs will be installed.")

        groups = [crds, locker_crds]
        if self.runtime_check(self.api_client, self.detect_runtime):
            groups.append(controller_crds)

        return merge_groups(*groups)

    def create(self, update_crds=False, timeout=60.0):
        """Install every planned CRD and wait for them to be established.

        Returns:
            list: the CRDDefinitions that were submitted

        Raises:
            CRDBatchError: if any CRD could not be created
        """
        planned = self.plan(update_crds=update_crds)
        if not planned:
            logger.info("All CRDs are already installed")
            return planned

        logger.info(f"Installing CRDs: {', '.join(d.name for d in planned)}")
        self.client.create(*planned).wait(timeout=timeout)
        return planned


def create_crds(api_client=None, update_crds=False, detect_runtime=True):
    """Create all CRDs and dependent CRDs in the cluster."""
    installer = CRDInstaller(
        CRDClient(api_client),
        api_client=api_client,
        detect_runtime=detect_runtime,
    )
    return installer.create(update_crds=update_crds)
