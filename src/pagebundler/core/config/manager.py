"""
PageBundler configuration management (YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pagebundler.core.exceptions import ConfigError
from pagebundler.core.schemas import validate_payload
from pagebundler.core.utils.io import read_yaml
from pagebundler.core.utils.merge import deep_merge
from pagebundler.core.utils.paths import absolute_path
from pagebundler.data import get_data_path

from .settings import BundlerSettings

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("pagebundler.yaml", "pagebundler.yml")
ENV_PREFIX = "PAGEBUNDLER_"
CONFIG_SCHEMA = "config.schema"


def _dates_to_iso(value: Any) -> Any:
    """Turn YAML timestamps (unquoted ``2024-01-01``) back into ISO strings."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _dates_to_iso(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_dates_to_iso(v) for v in value]
    return value

class ConfigManager:
    """Load, merge, and validate PageBundler configuration.

    Configuration sources (highest to lowest priority):
    1. Explicit overrides passed to ``load_config`` (CLI flags)
    2. Environment variables: PAGEBUNDLER_*
    3. Project config: ``pagebundler.yaml`` in the project root, or ``config_path``
    4. Bundled defaults: pagebundler.data/config/defaults.yaml
    """

    def __init__(self, project_root: Optional[Path] = None, config_path: Optional[Path] = None) -> None:
        self.config_path = absolute_path(config_path) if config_path else None
        if project_root is not None:
            self.project_root = absolute_path(project_root)
        elif self.config_path is not None:
            self.project_root = self.config_path.parent
        else:
            self.project_root = absolute_path(Path.cwd())
        self.defaults_path = get_data_path("config", "defaults.yaml")

    @property
    def config_file(self) -> Optional[Path]:
        """The project config file in effect, if any."""
        if self.config_path is not None:
            return self.config_path
        for name in CONFIG_FILENAMES:
            candidate = self.project_root / name
            if candidate.exists():
                return candidate
        return None

    @property
    def base_dir(self) -> Path:
        """Directory that relative configuration paths are resolved against."""
        cfg = self.config_file
        return cfg.parent if cfg is not None else self.project_root

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except FileNotFoundError as err:
            raise ConfigError(f"Config file not found: {path}", context={"path": str(path)}) from err
        except Exception as err:
            raise ConfigError(f"Cannot parse {path}: {err}", context={"path": str(path)}) from err
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}", context={"path": str(path)})
        return data

    # ------------------------------------------------------------------
    # Environment overrides
    # ------------------------------------------------------------------
    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return s
        return s

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            # Double underscore separates nesting levels: PAGEBUNDLER_INCLUDES__PREFIX
            segs = [s.lower() for s in raw.split("__")]
            if not raw or any(not s for s in segs):
                logger.warning("Ignoring malformed environment override %s", key)
                continue
            yield segs, self._coerce_type(os.environ[key])

    def _env_overrides(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for path, value in self._iter_env_overrides():
            node = result
            for seg in path[:-1]:
                node = node.setdefault(seg, {})
            node[path[-1]] = value
        return result

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load_config(
        self,
        *,
        validate: bool = True,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Return the merged configuration dict.

        Raises:
            ConfigError: unreadable file.
            SchemaValidationError: merged payload violates the config schema.
        """
        cfg = self.load_yaml(self.defaults_path)

        cfg_file = self.config_file
        if cfg_file is not None:
            logger.debug("Loading project config %s", cfg_file)
            cfg = deep_merge(cfg, self.load_yaml(cfg_file))
        elif self.config_path is None:
            logger.debug("No project config found under %s; using defaults", self.project_root)

        cfg = deep_merge(cfg, self._env_overrides())
        if overrides:
            cfg = deep_merge(cfg, overrides)
        cfg = _dates_to_iso(cfg)

        if validate:
            validate_payload(cfg, CONFIG_SCHEMA)
        return cfg

    def load_settings(self, *, overrides: Optional[Dict[str, Any]] = None) -> BundlerSettings:
        """Load, validate and convert the configuration into ``BundlerSettings``."""
        cfg = self.load_config(validate=True, overrides=overrides)
        return BundlerSettings.from_dict(cfg, self.base_dir)


__all__ = ["CONFIG_FILENAMES", "ENV_PREFIX", "ConfigManager"]
