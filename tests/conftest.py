"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging

import pytest

from glr.models import RepositoryDescriptor
from tests.factories import FakeRunner, project_record


@pytest.fixture
def svc() -> RepositoryDescriptor:
    return RepositoryDescriptor.from_api(project_record("teamA/svc"))


@pytest.fixture
def legacy() -> RepositoryDescriptor:
    return RepositoryDescriptor.from_api(project_record("teamA/legacy", fork_of="teamA/base"))


@pytest.fixture
def team_repos(svc: RepositoryDescriptor, legacy: RepositoryDescriptor) -> list[RepositoryDescriptor]:
    return [svc, legacy]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def logger() -> logging.Logger:
    """Logger that propagates to root so caplog sees its records."""
    lg = logging.getLogger("glr-tests")
    lg.setLevel(logging.DEBUG)
    lg.propagate = True
    return lg
