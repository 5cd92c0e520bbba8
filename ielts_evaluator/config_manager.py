import json
import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = 'IELTS_EVALUATOR_CONFIG'

DEFAULT_CONFIG = {
    "model": "gemini-3-flash-preview",
    "validate_response": False
}


@dataclass(frozen=True)
class Settings:
    """Resolved settings handed to the Gemini client factory."""
    api_key: Optional[str]
    model: str = DEFAULT_CONFIG["model"]
    validate_response: bool = DEFAULT_CONFIG["validate_response"]


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def get_config(config_file: Optional[str] = None) -> dict:
    """Loads the configuration from the JSON file, using defaults for missing keys."""
    config = dict(DEFAULT_CONFIG)
    config_file = config_file or os.environ.get(CONFIG_FILE_ENV)
    if not config_file:
        return config
    if not os.path.exists(config_file):
        logger.warning(f"Config file {config_file} not found, using defaults")
        return config
    with open(config_file, 'r') as f:
        config.update(json.load(f))
    return config


def load_settings(config_file: Optional[str] = None, env_file: Optional[str] = None) -> Settings:
    """
    Resolve settings from the config file and the environment.

    The API key is read once here and frozen into the returned Settings;
    an unset or empty key is kept as None so the client factory rejects it.
    """
    load_dotenv(env_file)
    config = get_config(config_file)

    api_key = os.environ.get('API_KEY') or os.environ.get('GOOGLE_API_KEY') or None
    model = os.environ.get('GEMINI_MODEL') or config['model']
    validate_response = config['validate_response']
    if 'STRICT_RESPONSE_VALIDATION' in os.environ:
        validate_response = _parse_bool(os.environ['STRICT_RESPONSE_VALIDATION'])

    return Settings(
        api_key=api_key,
        model=model,
        validate_response=bool(validate_response)
    )
