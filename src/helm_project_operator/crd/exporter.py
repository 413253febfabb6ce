"""Export CRD manifests as YAML files or streams.

CRDs should be written to a chart's templates directory (or similar) and
dependent CRDs to its crds/ directory. Uninstalling or upgrading the CRD chart
must not destroy dependent CRDs that other components rely on: removing the
HelmChart CRD can break a k3s or rke2 cluster that uses those resources to
manage its own components.
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from .generator import list_crds

logger = logging.getLogger(__name__)

MAX_WRITE_WORKERS = 8


class WriteResult(BaseModel):
    """Outcome of writing one bucket of CRDs to disk."""

    key: str
    path: str
    count: int = 0
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None


class ExportResult(BaseModel):
    """Per-bucket results of a file export, keyed by directory."""

    results: Dict[str, List[WriteResult]] = Field(default_factory=dict)

    @property
    def failures(self):
        return [r for results in self.results.values() for r in results if not r.ok]

    @property
    def ok(self):
        return not self.failures


def export(*definitions):
    """Serialize CRDs to a multi-document YAML string.

    Raises:
        yaml.YAMLError: if a manifest cannot be serialized
    """
    return yaml.safe_dump_all(
        [definition.to_manifest() for definition in definitions],
        explicit_start=True,
        default_flow_style=False,
        sort_keys=False,
    )


def bucket_by_key(definitions):
    """Group definitions by their group key, keeping input order."""
    buckets = defaultdict(list)
    for definition in definitions:
        buckets[definition.group_key].append(definition)
    return dict(buckets)


def _write_bucket(dirpath, key, data, count):
    path = Path(dirpath) / f"{key}.yaml"
    try:
        path.write_text(data)
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        return WriteResult(key=key, path=str(path), count=count, error=str(e))

    logger.info(f"Wrote {count} CRD(s) to {path}")
    return WriteResult(key=key, path=str(path), count=count)


def write_bucket_files(dirpath, definitions, writer=_write_bucket):
    """Write one ``<key>.yaml`` file per group key into ``dirpath``.

    Buckets are serialized up front, so a serialization error aborts before
    anything is written. Files are then written concurrently; a failed write
    is logged and reported in its WriteResult without stopping the others.
    """
    dirpath = Path(dirpath)
    dirpath.mkdir(parents=True, exist_ok=True)

    payloads = {
        key: (export(*bucket), len(bucket))
        for key, bucket in bucket_by_key(definitions).items()
    }
    if not payloads:
        return []

    workers = min(len(payloads), MAX_WRITE_WORKERS)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            key: (executor.submit(writer, dirpath, key, data, count), count)
            for key, (data, count) in payloads.items()
        }
        return [
            _collect(dirpath, key, future, count)
            for key, (future, count) in futures.items()
        ]


def _collect(dirpath, key, future, count):
    try:
        return future.result()
    except Exception as e:
        path = dirpath / f"{key}.yaml"
        logger.error(f"Failed to write {path}: {e}")
        return WriteResult(key=key, path=str(path), count=count, error=str(e))


def write_files(crd_dirpath, crd_dep_dirpath, catalog=list_crds):
    """Write CRDs to ``crd_dirpath`` and dependent CRDs to ``crd_dep_dirpath``."""
    crds, locker_crds, controller_crds = catalog()

    result = ExportResult()
    result.results[str(crd_dirpath)] = write_bucket_files(crd_dirpath, crds)
    result.results[str(crd_dep_dirpath)] = write_bucket_files(
        crd_dep_dirpath, locker_crds + controller_crds
    )

    for failure in result.failures:
        logger.warning(f"CRD file {failure.path} was not written")
    return result


def print_crds(out, dep_out, catalog=list_crds):
    """Print CRDs to ``out`` and dependent CRDs to ``dep_out``."""
    crds, locker_crds, controller_crds = catalog()
    out.write(export(*crds))
    dep_out.write(export(*locker_crds))
    dep_out.write(export(*controller_crds))
