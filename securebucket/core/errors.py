"""Error taxonomy for a construction pass.

Every error is fatal to the pass that raised it.  Nothing in the core
catches or retries; the caller sees the failure verbatim and no partial
graph is ever returned.
"""

from __future__ import annotations


class SecureBucketError(RuntimeError):
    """Base class for all construct errors."""


class InvalidConfiguration(SecureBucketError, ValueError):
    """A required configuration field is missing or malformed."""


class NameCollision(SecureBucketError):
    """A derived identifier collides with another resource.

    Raised for duplicates within a single graph, and by the realization
    guard for names that already exist in the target account.
    """

    def __init__(self, names: list[str], where: str = "resource graph") -> None:
        self.names = list(names)
        super().__init__(
            f"Identifier collision in {where}: {', '.join(self.names)}"
        )


class MissingTrustAnchor(SecureBucketError):
    """The referenced identity-provider trust anchor does not exist."""

    def __init__(self, locator: str) -> None:
        self.locator = locator
        super().__init__(
            f"Identity provider trust anchor not found: {locator}. "
            "It must be created in the account before the role can be realized."
        )
