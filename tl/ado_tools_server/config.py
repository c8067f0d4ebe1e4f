"""Configuration for the Azure DevOps tool server.

Configuration comes from the process environment, optionally seeded from a
``.env`` file. It is loaded once at startup and passed explicitly to the
components that need it.
"""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv
from loguru import logger
from pathlib import Path
from tl.ado_tools_server.errors import ConfigurationError
from typing import Mapping, Optional


TRANSPORT_STDIO = 'stdio'
TRANSPORT_SSE = 'sse'
TRANSPORTS = (TRANSPORT_STDIO, TRANSPORT_SSE)

DEFAULT_HOST = 'dev.azure.com'
DEFAULT_PORT = 8080
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass(frozen=True)
class ADOConfig:
    """Immutable process configuration."""

    organization: str
    project: str
    personal_access_token: str = field(repr=False)
    transport: str = TRANSPORT_STDIO
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    logfire_token: Optional[str] = field(default=None, repr=False)


def load_dotenv_file() -> Optional[Path]:
    """Load the first ``.env`` file found.

    Looks in the current working directory, then in the package directory and up
    to three levels above it. Variables already set in the environment win.

    Returns:
        Path of the loaded file, or None if no file was found
    """
    candidates = [Path.cwd() / '.env']
    current_dir = Path(os.path.dirname(os.path.abspath(__file__)))
    for _ in range(4):
        candidates.append(current_dir / '.env')
        current_dir = current_dir.parent

    for env_file in candidates:
        if env_file.exists():
            logger.info(f'Loading configuration from {env_file}')
            load_dotenv(dotenv_path=env_file, override=False)
            return env_file

    logger.warning('No .env file found. Using environment variables if available.')
    return None


def _required(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, '').strip()
    if not value:
        raise ConfigurationError(f'Missing required environment variable: {name}')
    return value


def _path_segment(environ: Mapping[str, str], name: str) -> str:
    value = _required(environ, name)
    if '/' in value:
        raise ConfigurationError(f'{name} must be a name, not a path or URL: {value!r}')
    return value


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ConfigurationError(f'PORT must be an integer, got {value!r}') from None
    if not 1 <= port <= 65535:
        raise ConfigurationError(f'PORT must be between 1 and 65535, got {port}')
    return port


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigurationError(
            f'AZURE_DEVOPS_REQUEST_TIMEOUT must be a number, got {value!r}'
        ) from None
    if timeout <= 0:
        raise ConfigurationError(
            f'AZURE_DEVOPS_REQUEST_TIMEOUT must be positive, got {timeout}'
        )
    return timeout


def load_config(environ: Optional[Mapping[str, str]] = None) -> ADOConfig:
    """Build the configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        The validated configuration

    Raises:
        ConfigurationError: If a required variable is missing or a value is malformed
    """
    if environ is None:
        environ = os.environ

    organization = _path_segment(environ, 'AZURE_DEVOPS_ORG')
    project = _required(environ, 'AZURE_DEVOPS_PROJECT')
    token = _required(environ, 'AZURE_DEVOPS_PAT')

    transport = environ.get('TRANSPORT_TYPE', '').strip().lower() or TRANSPORT_STDIO
    if transport not in TRANSPORTS:
        raise ConfigurationError(
            f'TRANSPORT_TYPE must be one of {", ".join(TRANSPORTS)}, got {transport!r}'
        )

    port = _parse_port(environ.get('PORT', '').strip() or str(DEFAULT_PORT))
    host = environ.get('AZURE_DEVOPS_HOST', '').strip().rstrip('/') or DEFAULT_HOST
    request_timeout = _parse_timeout(
        environ.get('AZURE_DEVOPS_REQUEST_TIMEOUT', '').strip() or str(DEFAULT_REQUEST_TIMEOUT)
    )

    return ADOConfig(
        organization=organization,
        project=project,
        personal_access_token=token,
        transport=transport,
        port=port,
        host=host,
        request_timeout=request_timeout,
        logfire_token=environ.get('LOGFIRE_WRITE_TOKEN', '').strip() or None,
    )
