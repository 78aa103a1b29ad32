"""
CLI utilities for the Business Directory admin tools.

Provides common Click options, .env loading and coloured output helpers
shared by the admin commands.
"""

import functools
import os
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import click
from dotenv import load_dotenv

from business_directory.config import Settings


F = TypeVar('F', bound=Callable[..., Any])


def load_env_file(env_path: Optional[str] = None) -> bool:
    """
    Load environment variables from a .env file.

    Searches for .env files in the following order:
    1. Explicitly provided path
    2. Current directory
    3. Parent directories up to the filesystem root

    Args:
        env_path: Optional explicit path to .env file

    Returns:
        bool: True if a .env file was loaded, False otherwise
    """
    if env_path:
        if Path(env_path).exists():
            load_dotenv(env_path)
            return True
        click.echo(f"Warning: .env file not found at {env_path}", err=True)
        return False

    current = Path.cwd()
    while current != current.parent:
        env_file = current / ".env"
        if env_file.exists():
            load_dotenv(env_file)
            return True
        current = current.parent

    return load_dotenv()


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Build settings from a YAML config file plus environment overrides.

    Raises:
        click.ClickException: If an explicit config file does not exist
    """
    if config_path is None:
        return Settings.load_from_yaml()
    if not Path(config_path).exists():
        raise click.ClickException(f"Config file not found: {config_path}")
    return Settings.load_from_yaml(config_path)


def common_options(func: F) -> F:
    """
    Decorator that adds common CLI options to a Click command.

    Adds the following options:
    - --dry-run: Preview changes without executing
    - --verbose / -v: Enable verbose output
    - --config / -c: Path to the YAML configuration file
    """
    @click.option(
        '--dry-run',
        is_flag=True,
        default=False,
        help='Preview changes without executing them.'
    )
    @click.option(
        '--verbose', '-v',
        is_flag=True,
        default=False,
        help='Enable verbose output.'
    )
    @click.option(
        '--config', '-c',
        type=click.Path(exists=False),
        default=None,
        help='Path to YAML configuration file (default: config/config.yaml).'
    )
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def elasticsearch_options(func: F) -> F:
    """
    Decorator that adds Elasticsearch connection options.

    These options override environment variables when provided.
    """
    @click.option(
        '--es-url',
        envvar='ELASTICSEARCH_URL',
        default=None,
        help='Elasticsearch URL (default: from ELASTICSEARCH_URL env var).'
    )
    @click.option(
        '--es-api-key',
        envvar='ELASTICSEARCH_API_KEY',
        default=None,
        help='Elasticsearch API key (default: from ELASTICSEARCH_API_KEY env var).'
    )
    @click.option(
        '--es-username',
        envvar='ELASTICSEARCH_USERNAME',
        default=None,
        help='Elasticsearch username (default: from ELASTICSEARCH_USERNAME env var).'
    )
    @click.option(
        '--es-password',
        envvar='ELASTICSEARCH_PASSWORD',
        default=None,
        help='Elasticsearch password (default: from ELASTICSEARCH_PASSWORD env var).'
    )
    @functools.wraps(func)
    def wrapper(*args, es_url, es_api_key, es_username, es_password, **kwargs):
        if es_url:
            os.environ['ELASTICSEARCH_URL'] = es_url
        if es_api_key:
            os.environ['ELASTICSEARCH_API_KEY'] = es_api_key
        if es_username:
            os.environ['ELASTICSEARCH_USERNAME'] = es_username
        if es_password:
            os.environ['ELASTICSEARCH_PASSWORD'] = es_password

        return func(*args, **kwargs)

    return wrapper  # type: ignore


def env_option(func: F) -> F:
    """Decorator that adds a --env option for loading a specific .env file."""
    @click.option(
        '--env',
        type=click.Path(exists=True),
        default=None,
        help='Path to .env file to load.'
    )
    @functools.wraps(func)
    def wrapper(*args, env, **kwargs):
        load_env_file(env)
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def confirm_action(message: str, default: bool = False, abort: bool = True) -> bool:
    """Prompt user for confirmation before a destructive action."""
    return click.confirm(message, default=default, abort=abort)


def echo_success(message: str) -> None:
    """Print a success message in green."""
    click.echo(click.style(f"[OK] {message}", fg='green'))


def echo_warning(message: str) -> None:
    """Print a warning message in yellow."""
    click.echo(click.style(f"[WARNING] {message}", fg='yellow'), err=True)


def echo_error(message: str) -> None:
    """Print an error message in red."""
    click.echo(click.style(f"[ERROR] {message}", fg='red'), err=True)


def echo_info(message: str) -> None:
    """Print an info message in blue."""
    click.echo(click.style(f"[INFO] {message}", fg='blue'))


def echo_verbose(message: str, verbose: bool) -> None:
    """Print a message only if verbose mode is enabled."""
    if verbose:
        click.echo(click.style(f"[DEBUG] {message}", fg='cyan'))
