"""Realization-time guards.

These checks need knowledge of the target account (existing resource
names, registered identity providers) that the construction pass does
not have.  External collaborators call them before handing a graph to
the provisioning engine; construction never does.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from securebucket.core.errors import MissingTrustAnchor, NameCollision
from securebucket.models.graph import ResourceGraph

logger = logging.getLogger(__name__)


def ensure_no_collisions(graph: ResourceGraph, existing_names: Iterable[str]) -> None:
    """Raise ``NameCollision`` if any derived identifier already exists.

    Checks node physical names and output export names.
    """
    existing = set(existing_names)
    derived = [n.physical_name for n in graph.nodes]
    derived.extend(o.export_name for o in graph.outputs.entries)
    clashes = [name for name in derived if name in existing]
    if clashes:
        logger.error("Derived identifiers already exist: %s", clashes)
        raise NameCollision(clashes, where="target account")


def ensure_trust_anchor(graph: ResourceGraph, known_provider_arns: Iterable[str]) -> None:
    """Raise ``MissingTrustAnchor`` if the role's provider is not registered.

    An injected anchor ARN must match exactly.  Otherwise any registered
    provider for the anchor's issuer (``...:oidc-provider/<issuer>``) will do.
    A graph without an identity role has nothing to check.
    """
    anchor = graph.trust_anchor
    if anchor is None:
        return
    known = set(known_provider_arns)
    if anchor.arn is not None:
        found = anchor.arn in known
    else:
        suffix = f":oidc-provider/{anchor.issuer}"
        found = any(arn.endswith(suffix) for arn in known)
    if not found:
        locator = anchor.arn or anchor.issuer
        logger.error("Trust anchor missing: %s", locator)
        raise MissingTrustAnchor(locator)
