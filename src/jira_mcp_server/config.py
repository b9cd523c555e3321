"""Connection configuration for the Jira MCP server.

Reads Jira connection settings from CLI args, environment variables,
.env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    JIRA_URL: Jira instance URL, e.g. https://your-domain.atlassian.net (required)
    JIRA_USERNAME: Account e-mail or username (required)
    JIRA_API_TOKEN: API token for basic auth (required)
    DEFAULT_PROJECT_KEY: Project key suggested to agents (optional, default: PROJ)
    JIRA_INSECURE: Skip SSL verification (optional, default: false)
    JIRA_DEBUG: Enable debug logging (optional, default: false)
    JIRA_TIMEOUT: HTTP timeout in seconds (optional, default: 30)
    JIRA_READ_ONLY: Hide tools that modify Jira (optional, default: false)
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_KEY = "PROJ"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Config:
    jira_url: str
    username: str
    api_token: str
    default_project: str = DEFAULT_PROJECT_KEY
    insecure: bool = False
    debug: bool = False
    read_only: bool = False
    timeout: int = DEFAULT_TIMEOUT


def validate_config(config: Config) -> Config:
    """Validate configuration values and return a normalized copy.

    Args:
        config: Config instance to validate.

    Returns:
        Config with whitespace and trailing slash removed from the URL.

    Raises:
        ValueError: If URL format is invalid, credentials are empty,
            or the timeout is out of range.
    """
    jira_url = config.jira_url.strip()

    if not jira_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid Jira URL '{jira_url}': must start with http:// or https://"
        )

    parsed = urlparse(jira_url)
    if not parsed.hostname:
        raise ValueError(
            f"Invalid Jira URL '{jira_url}': URL must include a hostname"
        )

    if not config.username.strip():
        raise ValueError(
            "Jira username cannot be empty. Set JIRA_USERNAME environment variable."
        )

    if not config.api_token.strip():
        raise ValueError(
            "Jira API token cannot be empty. Set JIRA_API_TOKEN environment variable."
        )

    if not (1 <= config.timeout <= 300):
        raise ValueError(
            f"Invalid timeout {config.timeout}: must be between 1 and 300 seconds"
        )

    if config.insecure:
        logger.warning(
            "WARNING: SSL verification disabled (insecure=True). Use only for development."
        )

    return dataclasses.replace(
        config,
        jira_url=jira_url.removesuffix("/"),
        username=config.username.strip(),
        api_token=config.api_token.strip(),
        default_project=config.default_project.strip()
        or DEFAULT_PROJECT_KEY,
    )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def _resolve_flag(cli_value: bool, env_key: str, fallback) -> bool:
    if cli_value:
        return True
    env_value = _get_bool_env(env_key)
    if env_value is not None:
        return env_value
    return bool(fallback)


def load_config(
    url: str | None = None,
    username: str | None = None,
    api_token: str | None = None,
    default_project: str | None = None,
    insecure: bool = False,
    debug: bool = False,
    read_only: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        url: Override Jira URL.
        username: Override Jira username / e-mail.
        api_token: Override API token.
        default_project: Override default project key.
        insecure: Skip SSL verification (CLI flag).
        debug: Enable debug logging (CLI flag).
        read_only: Hide mutating tools (CLI flag).
        yaml_fallbacks: Dict of values from the YAML config ``jira`` section.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If URL, username or API token is missing after checking
            all sources, or if any value is invalid.
    """
    fb = yaml_fallbacks or {}

    jira_url = url or os.getenv("JIRA_URL") or fb.get("url")
    if not jira_url:
        raise ValueError(
            "Jira URL not found. Set JIRA_URL environment variable, "
            "pass --url CLI argument, or add 'url' to config.yml."
        )

    jira_username = (
        username or os.getenv("JIRA_USERNAME") or fb.get("username")
    )
    if not jira_username:
        raise ValueError(
            "Jira username not found. Set JIRA_USERNAME environment variable, "
            "pass --username CLI argument, or add 'username' to config.yml."
        )

    jira_token = (
        api_token or os.getenv("JIRA_API_TOKEN") or fb.get("api_token")
    )
    if not jira_token:
        raise ValueError(
            "Jira API token not found. Set JIRA_API_TOKEN environment variable, "
            "pass --api-token CLI argument, or add 'api_token' to config.yml."
        )

    project = (
        default_project
        or os.getenv("DEFAULT_PROJECT_KEY")
        or fb.get("default_project")
        or DEFAULT_PROJECT_KEY
    )

    timeout_raw = os.getenv("JIRA_TIMEOUT")
    if timeout_raw is not None:
        try:
            timeout = int(timeout_raw)
        except ValueError:
            raise ValueError(
                f"Invalid JIRA_TIMEOUT '{timeout_raw}': must be a number between 1 and 300"
            ) from None
    else:
        timeout = int(fb.get("timeout", DEFAULT_TIMEOUT))

    config = Config(
        jira_url=jira_url,
        username=jira_username,
        api_token=jira_token,
        default_project=project,
        insecure=_resolve_flag(insecure, "JIRA_INSECURE", fb.get("insecure")),
        debug=_resolve_flag(debug, "JIRA_DEBUG", fb.get("debug")),
        read_only=_resolve_flag(
            read_only, "JIRA_READ_ONLY", fb.get("read_only")
        ),
        timeout=timeout,
    )

    return validate_config(config)
