"""The resource graph — immutable result of one construction pass."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from securebucket.core.errors import NameCollision
from securebucket.models.outputs import NamedOutputs
from securebucket.models.policy import GrantKind
from securebucket.models.resources import (
    EncryptionKey,
    EncryptionMode,
    IdentityRole,
    ResourceNode,
    Store,
    TrustAnchor,
)


class ResourceGraph(BaseModel):
    """At most three nodes plus the outputs that mirror their existence.

    The graph owns every node.  ``store`` refers to ``key``, and ``role``
    to ``store`` and ``key``, by logical id only; every such reference must
    resolve inside the graph.
    """

    model_config = ConfigDict(frozen=True)

    key: EncryptionKey | None = None
    store: Store
    role: IdentityRole | None = None
    trust_anchor: TrustAnchor | None = None  # referenced, never created
    outputs: NamedOutputs = NamedOutputs()

    @model_validator(mode="after")
    def _check_unique_identifiers(self) -> ResourceGraph:
        logical_ids = [n.logical_id for n in self.nodes]
        if self.trust_anchor is not None:
            logical_ids.append(self.trust_anchor.logical_id)
        logical_ids.extend(o.logical_id for o in self.outputs.entries)
        _raise_on_duplicates(logical_ids, "logical ids")
        _raise_on_duplicates([n.physical_name for n in self.nodes], "physical names")
        _raise_on_duplicates(
            [o.export_name for o in self.outputs.entries], "export names"
        )
        return self

    @model_validator(mode="after")
    def _check_references(self) -> ResourceGraph:
        key_managed = self.store.encryption is EncryptionMode.KEY_MANAGED
        if key_managed != (self.key is not None):
            raise ValueError(
                "store encryption is key-managed if and only if the graph has a key"
            )
        if self.key is not None and self.store.encryption_key_ref != self.key.logical_id:
            raise ValueError(
                f"store key reference {self.store.encryption_key_ref!r} does not "
                f"match key {self.key.logical_id!r}"
            )

        if self.role is not None:
            if self.trust_anchor is None:
                raise ValueError("an identity role requires a trust anchor")
            self._resolve(self.role.store_ref, Store, "role store_ref")
            if self.role.key_ref is not None:
                self._resolve(self.role.key_ref, EncryptionKey, "role key_ref")
            for grant in self.role.grants:
                if grant.kind is GrantKind.STORE_READ_WRITE:
                    self._resolve(grant.target, Store, f"grant {grant.sid}")
                elif grant.kind is GrantKind.KEY_ENCRYPT_DECRYPT:
                    self._resolve(grant.target, EncryptionKey, f"grant {grant.sid}")

        for output in self.outputs.entries:
            self._resolve(output.source, ResourceNode, f"output {output.logical_id}")
        return self

    def _resolve(self, logical_id: str, expected: type, label: str) -> ResourceNode:
        try:
            found = self.node(logical_id)
        except KeyError:
            raise ValueError(f"{label} {logical_id!r} does not resolve") from None
        if not isinstance(found, expected):
            raise ValueError(
                f"{label} {logical_id!r} is a {found.kind.value}, "
                f"expected {expected.__name__}"
            )
        return found

    @property
    def nodes(self) -> list[ResourceNode]:
        """Present nodes in construction order (key, store, role)."""
        return [n for n in (self.key, self.store, self.role) if n is not None]

    def node(self, logical_id: str) -> ResourceNode:
        for n in self.nodes:
            if n.logical_id == logical_id:
                return n
        raise KeyError(logical_id)

    def to_manifest(self) -> dict[str, Any]:
        """Plain JSON-serializable description of the whole graph."""
        resources: dict[str, Any] = {}
        for n in self.nodes:
            entry = n.model_dump(mode="json", exclude={"logical_id"})
            entry["physical_name"] = n.physical_name
            resources[n.logical_id] = entry
        if self.role is not None:
            resources[self.role.logical_id]["trust_conditions"] = (
                self.role.trust_policy.conditions()
            )
        return {
            "resources": resources,
            "references": (
                {
                    self.trust_anchor.logical_id: (
                        self.trust_anchor.arn or self.trust_anchor.issuer
                    )
                }
                if self.trust_anchor is not None
                else {}
            ),
            "outputs": {
                o.logical_id: {
                    "export_name": o.export_name,
                    "value": o.value if o.value is not None else o.reference,
                    "description": o.description,
                }
                for o in self.outputs.entries
            },
        }


def _raise_on_duplicates(values: list[str], label: str) -> None:
    seen: set[str] = set()
    dupes: list[str] = []
    for v in values:
        if v in seen and v not in dupes:
            dupes.append(v)
        seen.add(v)
    if dupes:
        raise NameCollision(dupes, where=f"resource graph ({label})")
