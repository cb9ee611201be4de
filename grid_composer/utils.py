"""
utils.py - Shared utilities for the grid composer.

Exit codes used by the command-line entry point and the YAML loader for
optional configuration files.
"""

from pathlib import Path

import yaml

# ============================================================================
# Exit codes
# ============================================================================
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1  # Configuration error or failed write


# ============================================================================
# Configuration loading
# ============================================================================


def load_grid_config(config_path: Path) -> dict:
    """
    Load grid configuration overrides from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing the configuration (empty for an empty file)

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
        TypeError: If the document is not a mapping
    """
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise TypeError(f"Expected a mapping at the top level of {config_path}, got {type(config).__name__}")
    return config
