"""Canonical hashing of resource graphs for idempotency checks."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from securebucket.models.graph import ResourceGraph


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def content_address(obj: Any) -> str:
    """Return ``sha256:<hex>`` of a JSON-serializable object."""
    return f"sha256:{sha256_hex(canonical_json_bytes(obj))}"


def graph_fingerprint(graph: ResourceGraph) -> str:
    """Fingerprint of a graph's manifest.

    Equal configurations produce equal fingerprints, so a re-provisioning
    run can tell whether anything would change.
    """
    return content_address(graph.to_manifest())
