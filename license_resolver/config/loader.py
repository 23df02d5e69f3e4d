"""Configuration file discovery and loading for license-resolver."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from license_resolver.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from license_resolver.exceptions import ConfigurationError
from license_resolver.models.config import ResolverConfig

# Top-level key under which settings may be nested in a shared YAML file
CONFIG_SECTION = "license_resolver"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find the nearest configuration file.

    Looks for `.license-resolver.yaml`, then `.license-resolver.yml`, in
    the start directory and then in each of its parents.

    Args:
        start_dir: Directory to start from. Defaults to the current
            working directory.

    Returns:
        Path to the configuration file if found, None otherwise.
    """
    search_dir = (start_dir or Path.cwd()).resolve()
    for directory in (search_dir, *search_dir.parents):
        for name in DEFAULT_CONFIG_NAMES:
            config_path = directory / name
            if config_path.is_file():
                return config_path
    return None


def _settings_from_document(data: Any, path: Path) -> dict[str, Any] | None:
    """Pick the resolver settings out of a parsed YAML document."""
    # Empty file or only comments
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )
    if CONFIG_SECTION in data:
        section = data[CONFIG_SECTION]
        if section is None:
            return None
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"Invalid configuration in '{path}': "
                f"'{CONFIG_SECTION}' must be a mapping"
            )
        return section
    return data


def load_config_file(path: Path) -> ResolverConfig:
    """Load and validate configuration from a YAML file.

    Settings may sit at the root of the document or under a
    ``license_resolver`` key.

    Args:
        path: Path to the configuration file.

    Returns:
        Validated ResolverConfig instance.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML,
            or fails validation.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e

    settings = _settings_from_document(data, path)
    if not settings:
        return get_default_config()

    try:
        return ResolverConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {_format_validation_errors(e)}"
        ) from e


def _format_validation_errors(error: ValidationError) -> str:
    """Join pydantic errors as ``field: message`` pairs."""
    return "; ".join(
        f"{'.'.join(str(x) for x in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    )


def load_config(
    config_path: str | None = None, start_dir: Path | None = None
) -> ResolverConfig:
    """Load configuration from an explicit file, a discovered file, or defaults.

    Args:
        config_path: Optional path to a configuration file. If given, it
            must exist and be valid.
        start_dir: Directory to start discovery from when no path is given.

    Returns:
        ResolverConfig with loaded or default values.

    Raises:
        ConfigurationError: If the chosen configuration file is invalid.
    """
    if config_path is not None:
        return load_config_file(Path(config_path))

    discovered = find_config_file(start_dir)
    if discovered is not None:
        return load_config_file(discovered)
    return get_default_config()
