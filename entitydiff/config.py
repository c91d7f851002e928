"""Loading comparison options from YAML or JSON files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import yaml

from .exceptions import ConfigError
from .models import CompareOptions

logger = logging.getLogger(__name__)


def load_options(path: Union[str, Path]) -> CompareOptions:
    """
    Load options from a YAML or JSON file.

    The options may sit at the top level of the file or under an
    ``options`` key. An empty file yields the defaults.

    Raises:
        ConfigError: if the file is missing, unparseable or not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Options file not found: {path}", str(path))

    with open(path, 'r') as f:
        content = f.read()

    # JSON is valid YAML, so one loader covers both
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse options file: {e}", str(path))

    if data is None:
        return CompareOptions()
    if not isinstance(data, dict):
        raise ConfigError(
            f"Options file must contain a mapping, got {type(data).__name__}", str(path)
        )

    if isinstance(data.get("options"), dict):
        data = data["options"]

    logger.debug(f"Loaded options from {path}")
    return CompareOptions.from_dict(data)
