"""Clients for the external systems the probes rely on."""

from pluginhealth.clients.git import GitClient, GitError
from pluginhealth.clients.github import GitHubClient
from pluginhealth.clients.http_client import BaseHttpClient
from pluginhealth.clients.rate_limiter import RateLimiter
from pluginhealth.clients.update_center import UpdateCenterClient, UpdateCenterError

__all__ = [
    "BaseHttpClient",
    "GitClient",
    "GitError",
    "GitHubClient",
    "RateLimiter",
    "UpdateCenterClient",
    "UpdateCenterError",
]
