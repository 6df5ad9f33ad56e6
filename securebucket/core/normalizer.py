"""Configuration normalizer — resolves every optional field to its default."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from securebucket.core.errors import InvalidConfiguration
from securebucket.models.config import Configuration, RawConfiguration

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "dev"


def normalize(raw: RawConfiguration | Mapping[str, Any]) -> Configuration:
    """Produce a fully-populated ``Configuration``.

    Accepts a ``RawConfiguration`` or a plain mapping (snake_case or
    camelCase keys).  Fails fast with ``InvalidConfiguration`` when
    ``project_id`` is missing or blank, or a field has the wrong type.
    """
    if not isinstance(raw, RawConfiguration):
        try:
            raw = RawConfiguration.model_validate(dict(raw))
        except ValidationError as exc:
            raise InvalidConfiguration(f"Invalid configuration: {exc}") from exc

    if not raw.project_id.strip():
        raise InvalidConfiguration("project_id is required and must be non-empty")

    config = Configuration(
        project_id=raw.project_id,
        # An empty environment counts as "not supplied".
        environment=raw.environment or DEFAULT_ENVIRONMENT,
        enable_versioning=bool(raw.enable_versioning),
        enable_encryption=bool(raw.enable_encryption),
        identity_repo=raw.identity_repo or None,
        additional_identity_repos=tuple(raw.additional_identity_repos or ()),
    )
    logger.debug("Normalized configuration: %s", config.model_dump())
    return config
