"""Configuration loading: explicit values, environment, build context."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

import httpx

from .errors import ConfigurationError
from .models import DEFAULT_API_HOST, DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT, UploadConfig


ENV_API_HOST = "APPDYNAMICS_HOST"
ENV_ACCOUNT_NAME = "APPDYNAMICS_ACCOUNT_NAME"
ENV_LICENSE_KEY = "APPDYNAMICS_LICENSE_KEY"
ENV_DSYM_PATH = "APPDYNAMICS_DSYM_PATH"
ENV_DSYM_PATHS = "APPDYNAMICS_DSYM_PATHS"
ENV_TIMEOUT = "APPDYNAMICS_TIMEOUT"

# Values exported by earlier build steps (dSYM download, archive, zip).
ENV_CONTEXT_OUTPUT_PATH = "DSYM_OUTPUT_PATH"
ENV_CONTEXT_PATHS = "DSYM_PATHS"
ENV_CONTEXT_ZIP_PATH = "DSYM_ZIP_PATH"


def split_path_list(value: Optional[str]) -> Optional[Tuple[str, ...]]:
    """Split a comma separated path list; None when nothing is listed."""
    if value is None:
        return None
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or None


def _non_empty(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class BuildContext:
    """dSYM locations produced by a previous build step."""
    dsym_output_path: Optional[str] = None
    dsym_paths: Optional[Tuple[str, ...]] = None
    dsym_zip_path: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildContext":
        env = os.environ if environ is None else environ
        return cls(
            dsym_output_path=_non_empty(env.get(ENV_CONTEXT_OUTPUT_PATH)),
            dsym_paths=split_path_list(env.get(ENV_CONTEXT_PATHS)),
            dsym_zip_path=_non_empty(env.get(ENV_CONTEXT_ZIP_PATH)),
        )


def _validate_api_host(value: str) -> str:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"Invalid API host {value!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid API host {value!r}: expected an http(s) URL")
    return value


def _parse_timeout(value: Optional[str]) -> float:
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {ENV_TIMEOUT} value: {value!r}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"{ENV_TIMEOUT} must be positive, got {value!r}")
    return timeout


def load_upload_config(
    api_host: Optional[str] = None,
    account_name: Optional[str] = None,
    license_key: Optional[str] = None,
    dsym_path: Optional[str] = None,
    dsym_paths: Optional[Sequence[str]] = None,
    dsym_zip_path: Optional[str] = None,
    timeout: Optional[float] = None,
    max_redirects: Optional[int] = None,
    context: Optional[BuildContext] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> UploadConfig:
    """
    Build the UploadConfig of a run.

    Precedence per option: explicit argument, then environment variable, then
    the build context default. Credentials are not checked here; the
    orchestrator rejects empty ones before doing any work.

    Args:
        api_host: API host URL
        account_name: AppDynamics account name
        license_key: AppDynamics license key
        dsym_path: Single dSYM path
        dsym_paths: List of dSYM paths
        dsym_zip_path: Zipped dSYM produced by an earlier build step
        timeout: Request timeout in seconds
        max_redirects: Redirect hops followed per upload
        context: Build context (defaults to BuildContext.from_env)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Immutable UploadConfig
    """
    env = os.environ if environ is None else environ
    if context is None:
        context = BuildContext.from_env(env)

    if max_redirects is None:
        max_redirects = DEFAULT_MAX_REDIRECTS
    if max_redirects < 0:
        raise ConfigurationError(f"max redirects must not be negative, got {max_redirects}")

    if timeout is None:
        timeout = _parse_timeout(env.get(ENV_TIMEOUT))
    elif timeout <= 0:
        raise ConfigurationError(f"timeout must be positive, got {timeout}")

    paths = dsym_paths
    if paths is None:
        paths = split_path_list(env.get(ENV_DSYM_PATHS))
    if paths is None:
        paths = context.dsym_paths

    return UploadConfig(
        account_name=account_name or env.get(ENV_ACCOUNT_NAME, ""),
        license_key=license_key or env.get(ENV_LICENSE_KEY, ""),
        api_host=_validate_api_host(
            api_host or _non_empty(env.get(ENV_API_HOST)) or DEFAULT_API_HOST
        ),
        dsym_path=dsym_path or _non_empty(env.get(ENV_DSYM_PATH)) or context.dsym_output_path,
        dsym_paths=paths,
        dsym_zip_path=dsym_zip_path or context.dsym_zip_path,
        timeout=timeout,
        max_redirects=max_redirects,
    )
