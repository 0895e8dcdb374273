"""Configuration loading from pyproject.toml."""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from depgraph._enums import NodeOrdering
from depgraph._errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class GraphConfig:
    """Options controlling how a DependencyGraph traverses its nodes.

    Attributes:
        ordering: Order in which a node's neighbours are visited. With
            ``NodeOrdering.SORTED`` the node identifiers must be mutually
            comparable.

    """

    ordering: NodeOrdering = NodeOrdering.INSERTION


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _parse_ordering(value: object) -> NodeOrdering:
    if not isinstance(value, str):
        msg = "Invalid [tool.depgraph].ordering: expected string"
        raise ConfigError(msg)
    try:
        return NodeOrdering(value)
    except ValueError as e:
        choices = ", ".join(f"'{o.value}'" for o in NodeOrdering)
        msg = f"Invalid [tool.depgraph].ordering '{value}'. Expected one of: {choices}"
        raise ConfigError(msg) from e


def load_config(pyproject_path: Path) -> GraphConfig:
    """Load and validate [tool.depgraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed GraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("depgraph", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.depgraph]: expected a table"
        raise ConfigError(msg)

    unknown = sorted(set(section) - {"ordering"})
    if unknown:
        msg = f"Unknown [tool.depgraph] keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    if "ordering" not in section:
        return GraphConfig()

    config = GraphConfig(ordering=_parse_ordering(section["ordering"]))
    logger.debug("Loaded %s from %s", config, pyproject_path)
    return config


def get_config() -> GraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        GraphConfig (defaults if no pyproject.toml or no [tool.depgraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return GraphConfig()
    return load_config(pyproject_path)
