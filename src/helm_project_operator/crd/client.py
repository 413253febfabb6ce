"""Thin client for reading and batch-creating CustomResourceDefinitions."""

import logging
import time

import kubernetes
import urllib3
from kubernetes.client.exceptions import ApiException

from helm_project_operator.errors import CRDBatchError

logger = logging.getLogger(__name__)


class BatchCreation:
    """Handle for a batch of submitted CRDs.

    Creation errors are collected rather than raised so that every CRD in the
    batch is attempted; ``wait`` reports them together.
    """

    def __init__(self, api, names, failures=None):
        self.api = api
        self.names = list(names)
        self.failures = dict(failures or {})

    def wait(self, timeout=60.0, interval=1.0):
        """Block until every submitted CRD is established.

        Raises:
            CRDBatchError: if any CRD failed to create or did not become
                established before the timeout.
        """
        pending = [name for name in self.names if name not in self.failures]
        deadline = time.monotonic() + timeout

        while pending:
            still_pending = []
            for name in pending:
                try:
                    crd = self.api.read_custom_resource_definition(name)
                except ApiException as e:
                    self.failures[name] = f"{e.status} {e.reason}"
                    continue
                except urllib3.exceptions.HTTPError as e:
                    self.failures[name] = str(e)
                    continue
                if not is_established(crd):
                    still_pending.append(name)
            pending = still_pending

            if not pending:
                break
            if time.monotonic() >= deadline:
                for name in pending:
                    self.failures[name] = f"not established after {timeout}s"
                break
            time.sleep(interval)

        if self.failures:
            raise CRDBatchError(self.failures)

        logger.info(f"{len(self.names)} CRDs are established")


def is_established(crd):
    """Check the Established condition of a CRD read from the cluster."""
    conditions = (crd.status and crd.status.conditions) or []
    return any(c.type == "Established" and c.status == "True" for c in conditions)


class CRDClient:
    """Cluster access for CRDs over the apiextensions.k8s.io/v1 API."""

    def __init__(self, api_client=None, api=None):
        self.api = api or kubernetes.client.ApiextensionsV1Api(api_client)

    def get(self, name):
        """Read a CRD by name.

        Raises:
            ApiException: with status 404 if the CRD does not exist.
        """
        return self.api.read_custom_resource_definition(name)

    def create(self, *definitions):
        """Create or update each definition and return a batch handle."""
        failures = {}
        for definition in definitions:
            try:
                self._apply(definition.to_manifest())
            except ApiException as e:
                logger.error(f"Failed to create CRD {definition.name}: {e.reason}")
                failures[definition.name] = f"{e.status} {e.reason}"
            except urllib3.exceptions.HTTPError as e:
                logger.error(f"Failed to create CRD {definition.name}: {e}")
                failures[definition.name] = str(e)

        return BatchCreation(self.api, [d.name for d in definitions], failures)

    def _apply(self, manifest):
        name = manifest["metadata"]["name"]
        try:
            self.api.create_custom_resource_definition(body=manifest)
            logger.info(f"Created CRD: {name}")
        except ApiException as e:
            if e.status != 409:
                raise
            existing = self.api.read_custom_resource_definition(name)
            manifest["metadata"]["resourceVersion"] = (
                existing.metadata.resource_version
            )
            self.api.replace_custom_resource_definition(name=name, body=manifest)
            logger.info(f"Updated CRD: {name}")
