"""CRD Registry system for automatic CRD discovery."""

import importlib
import pkgutil
import logging

from .definition import CRDOwner, PrinterColumn, guess_plural_name

logger = logging.getLogger(__name__)

DEFAULT_MODEL_PACKAGES = ["helm_project_operator.models"]


class CRDRegistry:
    """Global registry for CRD models with auto-discovery."""

    _instance = None
    _initialised = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._models = {}
            cls._instance._initialised = False
        return cls._instance

    def __init__(self):
        if not self._initialised:
            self._models = {}
            self._initialised = True

    @classmethod
    def register(
        cls,
        group,
        version,
        kind,
        owner=CRDOwner.OPERATOR,
        plural=None,
        scope="Namespaced",
        status=None,
        columns=(),
    ):
        """Decorator to register CRD spec models.

        Args:
            group: API group (e.g., 'helm.cattle.io')
            version: API version (e.g., 'v1alpha1')
            kind: Kind name (e.g., 'ProjectHelmChart')
            owner: Component that owns the CRD in the cluster
            plural: Plural name (guessed from the kind when omitted)
            scope: 'Namespaced' or 'Cluster'
            status: Optional pydantic model describing the status subresource
            columns: (name, jsonPath) pairs or PrinterColumn objects
        """

        def decorator(model_class):
            if not hasattr(model_class, "__annotations__"):
                raise ValueError(
                    f"CRD model {model_class.__name__} must have type annotations"
                )

            registry_instance = cls()
            key = f"{group}/{kind}"
            if key in registry_instance._models:
                existing = registry_instance._models[key]["model"]
                if existing is not model_class:
                    raise ValueError(
                        f"CRD {key} is already registered by {existing.__name__}"
                    )

            registry_instance._models[key] = {
                "model": model_class,
                "status": status,
                "group": group,
                "version": version,
                "kind": kind,
                "plural": plural or guess_plural_name(kind),
                "singular": kind.lower(),
                "scope": scope,
                "owner": CRDOwner(owner),
                "columns": tuple(
                    c if isinstance(c, PrinterColumn)
                    else PrinterColumn(name=c[0], json_path=c[1])
                    for c in columns
                ),
            }

            logger.debug(f"Registered CRD: {key} ({owner})")
            return model_class

        return decorator

    def discover_models(self, package_paths=None):
        """Auto-discover all CRD models in specified packages.

        Args:
            package_paths: List of package paths to search
        """
        if package_paths is None:
            package_paths = DEFAULT_MODEL_PACKAGES

        for package_path in package_paths:
            self._discover_in_package(package_path)

    def _discover_in_package(self, package_path):
        """Import a package and all of its submodules."""
        package = importlib.import_module(package_path)

        if hasattr(package, "__path__"):
            for _, module_name, _ in pkgutil.iter_modules(package.__path__):
                full_module_name = f"{package_path}.{module_name}"
                importlib.import_module(full_module_name)
                logger.debug(f"Discovered models in {full_module_name}")

    def get_all_models(self):
        """Get all registered CRD models, in registration order."""
        return self._models.copy()

    def get_models_by_owner(self, owner):
        """Get all models owned by a component."""
        owner = CRDOwner(owner)
        return {
            key: model_info
            for key, model_info in self._models.items()
            if model_info["owner"] == owner
        }

    def list_registered_models(self):
        """List all registered model keys."""
        return list(self._models.keys())
