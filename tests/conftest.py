"""Pytest configuration and fixtures."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.models.model_update_center import (
    Deprecation,
    SecurityWarning,
    SecurityWarningVersion,
    UpdateCenter,
    UpdateCenterPlugin,
)
from pluginhealth.storage.file_manager import FileManager


@pytest.fixture
def now() -> datetime:
    """A fixed reference time."""
    return datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def update_center(now: datetime) -> UpdateCenter:
    """Create a small update-center snapshot for testing."""
    return UpdateCenter(
        plugins={
            "mailer": UpdateCenterPlugin(
                name="mailer",
                version="1.2",
                scm="https://github.com/jenkinsci/mailer-plugin",
                release_timestamp=now - timedelta(days=10),
            ),
            "adopt-me": UpdateCenterPlugin(
                name="adopt-me",
                version="2.0",
                scm="https://github.com/jenkinsci/adopt-me-plugin",
                release_timestamp=now - timedelta(days=400),
                labels=["adopt-this-plugin", "deprecated"],
            ),
            "old-plugin": UpdateCenterPlugin(
                name="old-plugin",
                version="0.9",
                scm="https://github.com/jenkinsci/old-plugin",
            ),
        },
        deprecations={
            "old-plugin": Deprecation(url="https://www.jenkins.io/doc/old-plugin-deprecated"),
        },
        warnings=[
            SecurityWarning(
                id="SECURITY-123",
                name="mailer",
                type="plugin",
                url="https://www.jenkins.io/security/advisory/SECURITY-123",
                versions=[SecurityWarningVersion(lastVersion="1.2", pattern=r"1\.[0-2]")],
            ),
            SecurityWarning(
                id="CORE-2024-01",
                name="core",
                type="core",
                url="https://www.jenkins.io/security/advisory/core",
                versions=[SecurityWarningVersion(pattern=".*")],
            ),
        ],
    )


@pytest.fixture
def sample_plugin(now: datetime) -> Plugin:
    """Create a sample plugin without probe results."""
    return Plugin(
        name="mailer",
        version="1.2",
        scm="https://github.com/jenkinsci/mailer-plugin",
        release_timestamp=now - timedelta(days=10),
    )


@pytest.fixture
def probed_plugin(sample_plugin: Plugin, now: datetime) -> Plugin:
    """Sample plugin with a few probe results recorded a while ago."""
    recorded = now - timedelta(days=30)
    results = [
        ProbeResult(id="up-for-adoption", message="This plugin is not up for adoption.", status="SUCCESS", timestamp=recorded),
        ProbeResult(id="deprecation", message="This plugin is NOT deprecated.", status="SUCCESS", timestamp=recorded),
        ProbeResult(id="jenkinsfile", message="Jenkinsfile found", status="SUCCESS", timestamp=recorded),
    ]
    return sample_plugin.model_copy(update={"details": {r.id: r for r in results}})


@pytest.fixture
def file_manager(tmp_path: Path) -> FileManager:
    """Create a FileManager with temporary directory."""
    return FileManager(data_dir=tmp_path / "data")
