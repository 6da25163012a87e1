"""Load the session context from the config file, environment and CLI options."""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..errors import ConfigError, GitPRError
from .schema import FileConfig, SessionContext

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GITPR_CONFIG"

# Environment variable -> config key
ENV_OVERRIDES = {
    "GITHUB_TOKEN": "token",
    "GITPR_USERNAME": "username",
    "GITPR_OWNER": "owner",
    "GITPR_REPO": "repo",
}


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the config file location.

    $GITPR_CONFIG wins, then $XDG_CONFIG_HOME/gitpr/config.yaml,
    then ~/.config/gitpr/config.yaml.
    """
    environ = os.environ if environ is None else environ
    if environ.get(CONFIG_ENV_VAR):
        return Path(environ[CONFIG_ENV_VAR]).expanduser()
    base = environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base).expanduser() / "gitpr" / "config.yaml"


def load_file_config(path: Path) -> FileConfig:
    """Read and validate the YAML config file.

    A missing file is treated as an empty one.

    Raises:
        ConfigError: If the file is unreadable, not YAML, or fails validation
    """
    if not path.exists():
        logger.debug("No config file at %s", path)
        return FileConfig()

    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error reading {path}: {e}")

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(raw).__name__}")

    try:
        return FileConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}")


def apply_overrides(
    file_config: FileConfig,
    environ: Mapping[str, str],
    cli_options: Dict[str, object],
) -> Dict[str, object]:
    """Merge settings with precedence CLI > environment > file.

    CLI options whose value is None are treated as not given.
    """
    settings = file_config.model_dump()
    for env_var, key in ENV_OVERRIDES.items():
        if environ.get(env_var):
            settings[key] = environ[env_var]
    for key, value in cli_options.items():
        if value is not None:
            settings[key] = value
    return settings


def build_session_context(
    settings: Dict[str, object],
    repo_info: Optional[Callable[[], Tuple[str, str]]] = None,
    lookup_username: Optional[Callable[[Optional[str]], str]] = None,
) -> SessionContext:
    """Fill in the remaining gaps and freeze the settings.

    Args:
        settings: Merged settings from apply_overrides
        repo_info: Returns (owner, repo) of the local checkout's origin remote
        lookup_username: Returns the login that owns the given token

    Returns:
        SessionContext ready to hand to the orchestrator

    Raises:
        ConfigError: If username or repository cannot be determined
    """
    settings = dict(settings)

    if not settings.get("username") and lookup_username is not None:
        try:
            settings["username"] = lookup_username(settings.get("token"))
        except GitPRError as e:
            raise ConfigError(f"Could not determine GitHub username: {e}")
    if not settings.get("username"):
        raise ConfigError(
            "GitHub username is not configured. Set 'username' in the config file "
            "or the GITPR_USERNAME env var."
        )

    if (not settings.get("owner") or not settings.get("repo")) and repo_info is not None:
        try:
            remote_owner, remote_repo = repo_info()
        except GitPRError as e:
            logger.debug("Could not read owner/repo from origin remote: %s", e)
        else:
            if not settings.get("owner") and not settings.get("repo"):
                settings["owner"] = remote_owner
            if not settings.get("repo"):
                settings["repo"] = remote_repo

    if not settings.get("owner"):
        settings["owner"] = settings["username"]
    if not settings.get("repo"):
        raise ConfigError(
            "Repository is not configured. Set 'repo' in the config file, "
            "pass --repo, or run inside a checkout with a GitHub origin remote."
        )

    try:
        return SessionContext(**settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}")


def load_session_context(
    config_path: Optional[Path] = None,
    cli_options: Optional[Dict[str, object]] = None,
    environ: Optional[Mapping[str, str]] = None,
    repo_info: Optional[Callable[[], Tuple[str, str]]] = None,
    lookup_username: Optional[Callable[[Optional[str]], str]] = None,
) -> SessionContext:
    """Load configuration from every source and build the session context."""
    environ = os.environ if environ is None else environ
    path = config_path or default_config_path(environ)
    file_config = load_file_config(path)
    settings = apply_overrides(file_config, environ, cli_options or {})
    return build_session_context(settings, repo_info=repo_info, lookup_username=lookup_username)
