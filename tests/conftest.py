"""Shared test fixtures for Securebucket."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from aws_cdk import App, Environment, Stack
from aws_cdk.assertions import Template

from securebucket.core.construct import SecureBucket
from securebucket.core.graph_builder import build_graph
from securebucket.core.naming import derive_names
from securebucket.core.normalizer import normalize
from securebucket.models.config import Configuration, RawConfiguration
from securebucket.models.graph import ResourceGraph
from securebucket.models.naming import ResourceNames

ACCOUNT = "123456789012"
REGION = "us-east-1"


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep SECUREBUCKET_* variables and stray .env files out of tests."""
    for name in list(os.environ):
        if name.startswith("SECUREBUCKET_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def account() -> str:
    """Provide a deterministic test account id."""
    return ACCOUNT


@pytest.fixture
def make_config() -> Callable[..., Configuration]:
    """Factory fixture: normalized configuration with sensible defaults."""

    def _factory(project_id: str = "acme", **overrides: Any) -> Configuration:
        return normalize(RawConfiguration(project_id=project_id, **overrides))

    return _factory


@pytest.fixture
def make_graph() -> Callable[..., ResourceGraph]:
    """Factory fixture: the resource graph for a configuration."""

    def _factory(project_id: str = "acme", trust_anchor=None, **overrides: Any) -> ResourceGraph:
        return build_graph(
            RawConfiguration(project_id=project_id, **overrides),
            trust_anchor=trust_anchor,
        )

    return _factory


@pytest.fixture
def make_bucket(account: str) -> Callable[..., SecureBucket]:
    """Factory fixture: a SecureBucket construct in a fresh test stack."""

    def _factory(project_id: str = "acme", trust_anchor=None, **overrides: Any) -> SecureBucket:
        stack = Stack(App(), "TestStack", env=Environment(account=account, region=REGION))
        return SecureBucket(
            stack,
            "SecureBucket",
            config=RawConfiguration(project_id=project_id, **overrides),
            trust_anchor=trust_anchor,
        )

    return _factory


@pytest.fixture
def template_of() -> Callable[[SecureBucket], Template]:
    """Synthesize the stack holding a SecureBucket."""

    def _synth(bucket: SecureBucket) -> Template:
        return Template.from_stack(Stack.of(bucket))

    return _synth


@pytest.fixture
def dev_names(make_config: Callable[..., Configuration]) -> ResourceNames:
    """Names for project ``acme`` in ``dev``."""
    return derive_names(make_config())


FULL = {
    "environment": "prod",
    "enable_versioning": True,
    "enable_encryption": True,
    "identity_repo": "acme/infra",
    "additional_identity_repos": ["acme/app"],
}


@pytest.fixture
def full_graph(make_graph: Callable[..., ResourceGraph]) -> ResourceGraph:
    """Everything enabled: key, versioning and a role with two repos."""
    return make_graph(**FULL)


@pytest.fixture
def full_bucket(make_bucket: Callable[..., SecureBucket]) -> SecureBucket:
    """The fully-enabled configuration, realized as CDK resources."""
    return make_bucket(**FULL)


@pytest.fixture
def full_template(full_bucket: SecureBucket, template_of) -> Template:
    return template_of(full_bucket)
