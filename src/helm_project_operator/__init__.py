"""Helm Project Operator CRD management."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("helm-project-operator")
except PackageNotFoundError:
    __version__ = "unknown"
