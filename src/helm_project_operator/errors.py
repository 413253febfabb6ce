"""Exceptions raised while planning, installing and exporting CRDs."""


class CRDError(Exception):
    """Base class for CRD management errors."""


class CRDQueryError(CRDError):
    """The cluster could not tell whether a CRD is installed."""

    def __init__(self, crd_name, reason):
        self.crd_name = crd_name
        self.reason = reason
        super().__init__(f"failed to check CRD {crd_name}: {reason}")


class CRDBatchError(CRDError):
    """One or more CRDs in a batch could not be created or did not become ready."""

    def __init__(self, failures):
        self.failures = dict(failures)
        details = "; ".join(f"{name}: {err}" for name, err in self.failures.items())
        super().__init__(
            f"failed to create {len(self.failures)} CRD(s): {details}"
        )


class DuplicateCRDError(CRDError):
    """The same group/kind appears more than once in an installation plan."""

    def __init__(self, identity):
        self.identity = identity
        group, kind = identity
        super().__init__(f"CRD {kind}.{group} is listed more than once")


class RuntimeDetectionError(CRDError):
    """The Kubernetes distribution of the cluster could not be inspected."""
