"""TOML-based configuration of decomposition options.

Hosts that expose the engine (debuggers, REPL inspectors) can keep their
inclusion policy in a file instead of code.

Usage:
    from lookup_engine.config import find_config_file, load_options

    config_path = find_config_file(Path.cwd())
    options = load_options(config_path) if config_path else DecomposeOptions()

Example lookup.toml:
    include_fields = true
    include_private_members = true
    enable_extensions = true
    type_resolver = "my_debugger.descriptors:resolve"

In pyproject.toml the same keys live under ``[tool.lookup]``.
"""

from __future__ import annotations

import importlib
import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any

from lookup_engine.options import DecomposeOptions, TypeResolver, default_type_resolver

# Config file names to search for (in order of preference)
CONFIG_FILE_NAMES = ["lookup.toml", ".lookuprc.toml", "pyproject.toml"]

FLAG_KEYS = tuple(f.name for f in fields(DecomposeOptions) if f.name != "type_resolver")


def find_config_file(
    start_dir: Path,
    config_names: list[str] | None = None,
) -> Path | None:
    """Find a config file by searching up the directory hierarchy.

    Args:
        start_dir: Directory to start searching from
        config_names: Config file names to search for (default: CONFIG_FILE_NAMES)

    Returns:
        Path to the config file, or None if not found
    """
    config_names = config_names or CONFIG_FILE_NAMES
    current = start_dir.resolve()

    while True:
        for name in config_names:
            config_path = current / name
            if config_path.exists():
                # pyproject.toml only counts with a [tool.lookup] table
                if name == "pyproject.toml":
                    if _has_lookup_section(config_path):
                        return config_path
                else:
                    return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _has_lookup_section(pyproject_path: Path) -> bool:
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return "lookup" in data.get("tool", {})


def load_options(path: Path) -> DecomposeOptions:
    """Load DecomposeOptions from a TOML file.

    Args:
        path: lookup.toml, .lookuprc.toml or pyproject.toml

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file holds unknown keys or invalid values
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    if path.name == "pyproject.toml":
        if "lookup" not in data.get("tool", {}):
            raise ValueError(f"No [tool.lookup] section in {path}")
        data = data["tool"]["lookup"]

    return options_from_dict(data)


def options_from_dict(data: dict[str, Any]) -> DecomposeOptions:
    """Build DecomposeOptions from a dictionary of settings.

    Raises:
        ValueError: On unknown keys, non-boolean flags or an unloadable resolver
    """
    unknown = sorted(set(data) - set(FLAG_KEYS) - {"type_resolver"})
    if unknown:
        raise ValueError(f"Unknown option(s): {', '.join(unknown)}")

    settings: dict[str, Any] = {}
    for key in FLAG_KEYS:
        if key in data:
            if not isinstance(data[key], bool):
                raise ValueError(f"Option '{key}' must be a boolean, got {data[key]!r}")
            settings[key] = data[key]

    if "type_resolver" in data:
        settings["type_resolver"] = import_resolver(data["type_resolver"])

    return DecomposeOptions(**settings)


def import_resolver(reference: str) -> TypeResolver:
    """Import a type resolver from a ``module:attribute`` reference.

    Raises:
        ValueError: If the reference is malformed or does not name a callable
    """
    if not isinstance(reference, str) or reference.count(":") != 1:
        raise ValueError(f"Type resolver must be 'module:attribute', got {reference!r}")

    module_name, _, attribute = reference.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"Cannot import type resolver module: {module_name}") from exc

    resolver = module
    for part in attribute.split("."):
        resolver = getattr(resolver, part, None)
        if resolver is None:
            raise ValueError(f"Type resolver not found: {reference}")

    if not callable(resolver):
        raise ValueError(f"Type resolver is not callable: {reference}")
    return resolver


def options_to_toml(options: DecomposeOptions) -> str:
    """Render options as lookup.toml content.

    A custom resolver is written as its ``module:qualname`` reference.
    """
    lines = [f"{key} = {str(getattr(options, key)).lower()}" for key in FLAG_KEYS]
    if options.type_resolver is not default_type_resolver:
        resolver = options.type_resolver
        lines.append(f'type_resolver = "{resolver.__module__}:{resolver.__qualname__}"')
    lines.append("")
    return "\n".join(lines)
