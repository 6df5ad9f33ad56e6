"""Named outputs — export name to the node attribute it publishes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class OutputAttribute(str, Enum):
    NAME = "Name"
    ARN = "Arn"


class NamedOutput(BaseModel):
    """A single exported value surfaced to operators and downstream automation.

    ``value`` is filled when known at construction time (the store name).
    ARNs are assigned by the provisioning engine, so their outputs carry
    only the ``source`` node and ``attribute``.
    """

    model_config = ConfigDict(frozen=True)

    logical_id: str  # "BucketName", "OIDCRoleArn", "KMSKeyArn"
    export_name: str
    source: str  # logical id of the published node
    attribute: OutputAttribute
    description: str = ""
    value: str | None = None

    @property
    def reference(self) -> str:
        return f"{self.source}.{self.attribute.value}"


class NamedOutputs(BaseModel):
    """Ordered collection of outputs, keyed by export name."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[NamedOutput, ...] = ()

    def as_mapping(self) -> dict[str, str]:
        """Export name to literal value, or ``<node>.<attribute>`` when deferred."""
        return {
            o.export_name: o.value if o.value is not None else o.reference
            for o in self.entries
        }

    def get(self, export_name: str) -> NamedOutput | None:
        for output in self.entries:
            if output.export_name == export_name:
                return output
        return None

    def __contains__(self, export_name: object) -> bool:
        return any(o.export_name == export_name for o in self.entries)

    def __len__(self) -> int:
        return len(self.entries)
