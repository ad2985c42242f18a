import argparse
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = 'sqlite:///ghworld.db'


@dataclass
class Settings:
    token: str = None
    database_url: str = DEFAULT_DATABASE_URL
    user_agent: str = 'ghworld-app'
    request_timeout: int = 10
    geocode_timeout: int = 10
    geocode_min_delay: float = 1.0
    events_per_page: int = 100
    enrichment_floor: int = 500
    retention_minutes: int = 60
    eviction_batch_size: int = 500
    eviction_max_batches: int = 20
    live_window_minutes: int = 5
    result_limit: int = 5000
    scan_limit: int = 20000
    location_refresh_days: int = 30
    poll_interval_seconds: int = 60
    eviction_interval_seconds: int = 300
    stats_interval_seconds: int = 600
    log_level: str = 'INFO'

    @classmethod
    def from_mapping(cls, values: dict):
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in (values or {}).items()
                      if key in known and value is not None})


def get_default_value(arg_name):
    """Get the default value for an argument"""
    defaults = {
        'token': os.getenv('GITHUB_TOKEN'),
        'database_url': os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL),
        'log_level': 'INFO',
    }
    return defaults.get(arg_name)


def load_config(config_path):
    """Load configuration from a YAML file"""
    if not config_path:
        return {}

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Could not load config from {config_path}: {e}. Input supports only YAML/YML format!")
        return {}


def merge_config_with_args(args, config):
    """Config file values fill in wherever the command line kept its default"""
    final_args = argparse.Namespace(**vars(args))

    for arg_name, config_value in (config or {}).items():
        if config_value is None:
            continue
        if not hasattr(args, arg_name):
            setattr(final_args, arg_name, config_value)
            continue
        if getattr(args, arg_name) == get_default_value(arg_name):
            setattr(final_args, arg_name, config_value)

    return final_args


def build_settings(args) -> Settings:
    config = load_config(getattr(args, 'config', None))
    merged = merge_config_with_args(args, config)
    return Settings.from_mapping(vars(merged))
