"""Securebucket: configuration-driven secure object store provisioning.

From a handful of options, one construction pass derives an object store,
an optional encryption key and an optional GitHub OIDC role, with
deterministic names, least-privilege grants and explicit trust conditions.
"""

__version__ = "0.1.0"
__description__ = (
    "Configuration-driven secure bucket, KMS key and GitHub OIDC role construct"
)

from securebucket.core.construct import SecureBucket, SecureBucketStack
from securebucket.core.graph_builder import build_graph
from securebucket.core.errors import (
    InvalidConfiguration,
    MissingTrustAnchor,
    NameCollision,
    SecureBucketError,
)

__all__ = [
    "SecureBucket",
    "SecureBucketStack",
    "build_graph",
    "SecureBucketError",
    "InvalidConfiguration",
    "NameCollision",
    "MissingTrustAnchor",
    "__version__",
]
