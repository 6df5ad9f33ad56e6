"""Naming deriver — every identifier is a pure function of project + environment."""

from __future__ import annotations

from securebucket.models.config import Configuration
from securebucket.models.naming import ResourceNames


def derive_names(config: Configuration) -> ResourceNames:
    """Compute store, key, role and export names.

    Only ``project_id`` and ``environment`` participate, so configurations
    that differ elsewhere share identifiers (idempotent re-provisioning).
    """
    p, e = config.project_id, config.environment
    return ResourceNames(
        store_name=f"{p}-secure-bucket-{e}",
        key_alias=f"alias/{p}-bucket-key-{e}",
        role_name=f"{p}-github-oidc-role-{e}",
        store_export=f"{p}-bucket-name-{e}",
        role_export=f"{p}-oidc-role-arn-{e}",
        key_export=f"{p}-kms-key-arn-{e}",
    )
