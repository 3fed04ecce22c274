"""Configuration management for ecrpoll."""

import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..exceptions import ConfigError


logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "/output/results.json"
DEFAULT_PERMISSION_MODE = 0o644
DEFAULT_COLD_START_COUNT = 5

# Sentinel for "never fetched before"; selects the cold-start filter.
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)

# Zone abbreviations accepted after the numeric offset: three capitals,
# four or five ending in T, a few irregular names, GMT+h, or +hh[mm].
_ZONE = (
    r'[A-Z]{3}|[A-Z]{3,4}T|WITA|ChST|MeST'
    r'|GMT[+-]\d{1,2}|[+-]\d{2}(?:\d{2})?'
)

# 2006-01-02 15:04:05[.999999999] -0700 MST, nothing before or after
_LAST_FETCHED_RE = re.compile(
    r'(?P<stamp>\d{4}-\d{2}-\d{2} \d{1,2}:\d{2}:\d{2})'
    r'(?:\.(?P<fraction>\d{1,9}))?'
    r' (?P<offset>[+-]\d{4})'
    r' (?:' + _ZONE + r')\Z'
)


def parse_last_fetched_time(value: Optional[str]) -> datetime:
    """Parse LAST_FETCHED_TIME, falling back to ZERO_TIME when absent or malformed."""
    if not value:
        logger.info("LAST_FETCHED_TIME not set, polling the most recent images")
        return ZERO_TIME

    match = _LAST_FETCHED_RE.match(value)
    if not match:
        logger.warning(f"Could not parse LAST_FETCHED_TIME '{value}', using zero time")
        return ZERO_TIME

    fraction = (match.group('fraction') or '0')[:6].ljust(6, '0')
    try:
        return datetime.strptime(
            f"{match.group('stamp')}.{fraction} {match.group('offset')}",
            '%Y-%m-%d %H:%M:%S.%f %z'
        )
    except ValueError as e:
        logger.warning(f"Could not parse LAST_FETCHED_TIME '{value}' ({e}), using zero time")
        return ZERO_TIME


def is_zero_time(value: datetime) -> bool:
    return value == ZERO_TIME


def _parse_permission_mode(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid PERMISSION_MODE: {value!r}")
    if isinstance(value, int):
        mode = value
    else:
        try:
            mode = int(str(value), 8)
        except ValueError:
            raise ConfigError(f"Invalid PERMISSION_MODE: {value!r}")
    if not 0 <= mode <= 0o777:
        raise ConfigError(f"PERMISSION_MODE out of range: {oct(mode)}")
    return mode


def _parse_cold_start_count(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid COLD_START_COUNT: {value!r}")
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid COLD_START_COUNT: {value!r}")
    if count < 1:
        raise ConfigError(f"COLD_START_COUNT must be positive, got {count}")
    return count


class Config:
    """Configuration manager for ecrpoll."""

    REQUIRED_VARS = [
        'ACCESS_KEY',
        'SECRET_KEY',
        'DOCKER_REGISTRY_URL',
        'AWS_REGION',
        'REPOSITORY'
    ]

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        env = os.environ if environ is None else environ
        self._validate_environment(env)

        self.access_key = env['ACCESS_KEY']
        self.secret_key = env['SECRET_KEY']
        self.registry_url = env['DOCKER_REGISTRY_URL']
        self.region = env['AWS_REGION']
        self.repositories = self._split_repositories(env['REPOSITORY'])
        self.last_fetched_time = parse_last_fetched_time(env.get('LAST_FETCHED_TIME'))

        self.poller_config_path = env.get('POLLER_CONFIG')
        settings = self._load_poller_config()

        self.output_path = settings.get('OUTPUT_PATH') or DEFAULT_OUTPUT_PATH
        if not isinstance(self.output_path, str):
            raise ConfigError(f"Invalid OUTPUT_PATH: {self.output_path!r}")
        self.permission_mode = _parse_permission_mode(
            settings.get('PERMISSION_MODE', DEFAULT_PERMISSION_MODE)
        )
        self.cold_start_count = _parse_cold_start_count(
            settings.get('COLD_START_COUNT', DEFAULT_COLD_START_COUNT)
        )

    def _validate_environment(self, env: Mapping[str, str]):
        """Validate required environment variables."""
        missing_vars = [var for var in self.REQUIRED_VARS if not env.get(var)]
        if missing_vars:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing_vars)}")

    @staticmethod
    def _split_repositories(value: str) -> List[str]:
        repositories = [name.strip() for name in value.split(',') if name.strip()]
        if not repositories:
            raise ConfigError(f"REPOSITORY does not name any repository: {value!r}")
        return repositories

    def _load_poller_config(self) -> Dict[str, Any]:
        """Load the optional YAML settings file."""
        if not self.poller_config_path:
            return {}

        if not os.path.exists(self.poller_config_path):
            raise ConfigError(f"Poller config file not found: {self.poller_config_path}")

        try:
            with open(self.poller_config_path, 'r') as f:
                settings = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load poller config {self.poller_config_path}: {e}") from e

        if settings is None:
            return {}
        if not isinstance(settings, dict):
            raise ConfigError(f"Poller config must be a mapping: {self.poller_config_path}")
        return settings

    @property
    def is_cold_start(self) -> bool:
        """True when no prior fetch timestamp is known."""
        return is_zero_time(self.last_fetched_time)
