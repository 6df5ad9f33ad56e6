"""Derived resource identifiers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ResourceNames(BaseModel):
    """Every identifier the construct hands out, derived from project + environment."""

    model_config = ConfigDict(frozen=True)

    store_name: str
    key_alias: str
    role_name: str
    store_export: str
    role_export: str
    key_export: str

    def all_physical_names(self) -> list[str]:
        """Names that materialize as account-level resources."""
        return [self.store_name, self.key_alias, self.role_name]

    def all_export_names(self) -> list[str]:
        return [self.store_export, self.role_export, self.key_export]
