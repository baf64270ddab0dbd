import os
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    """Read an integer setting from the environment, falling back to default."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


DEFAULT_DATA_DIR = Path(
    os.getenv(
        "PLUGIN_HEALTH_DATA_DIR",
        (Path(__file__).parent.parent.resolve() / "data").absolute(),
    )
).resolve()

# Update-center (catalog) configuration
UPDATE_CENTER_URL = os.getenv(
    "UPDATE_CENTER_URL",
    "https://updates.jenkins.io/current/update-center.actual.json",
)
DOCUMENTATION_URLS_URL = os.getenv(
    "DOCUMENTATION_URLS_URL",
    "https://updates.jenkins.io/plugin-documentation-urls.json",
)

# GitHub API configuration
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN", "").strip() or None

# HTTP and git settings
HTTP_TIMEOUT_SECONDS = 30.0
HTTP_MAX_RETRIES = 5
GIT_TIMEOUT_SECONDS = 300

# Engine concurrency (plugins processed in parallel)
PROBE_ENGINE_CONCURRENCY = _env_int("PROBE_ENGINE_CONCURRENCY", 4)
SCORE_ENGINE_CONCURRENCY = _env_int("SCORE_ENGINE_CONCURRENCY", 8)

# Update-center labels
ADOPTION_LABEL = "adopt-this-plugin"
DEPRECATED_LABEL = "deprecated"

# Plugin repositories hosted in the organization
SCM_URL_PATTERN = r"https://(?P<server>[^/]*)/(?P<repo>jenkinsci/[^/]*)(?:/tree/(?P<branch>[^/]+)/(?P<folder>.+?))?/?$"

# Reusable workflow implementing JEP-229 continuous delivery
CD_WORKFLOW_REFERENCE = "jenkins-infra/github-reusable-workflows/.github/workflows/maven-cd.yml"
