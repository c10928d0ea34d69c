"""JSON-backed configuration for the router and its command line."""
import json
import logging
from dataclasses import asdict, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .settings import ApplicationSettings
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _resolve(path: PathLike) -> Path:
    return Path(path).expanduser().resolve()


def _merge(target: Any, data: Dict[str, Any], prefix: str = "") -> None:
    """Copy ``data`` onto a settings dataclass, descending into nested sections."""
    known = {f.name for f in fields(target)}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if key not in known:
            logger.warning(f"Ignoring unknown setting: {name}")
            continue
        current = getattr(target, key)
        if is_dataclass(current):
            if isinstance(value, dict):
                _merge(current, value, prefix=f"{name}.")
            else:
                logger.warning(f"Setting {name} must be an object, got {type(value).__name__}")
            continue
        setattr(target, key, value)


class ConfigManager:
    """Loads, validates and saves ApplicationSettings.

    With an explicit ``config_path`` the file is loaded, or written with
    defaults when it does not exist yet. Without one, the first file found in
    DEFAULT_CONFIG_PATHS is loaded; if there is none the built-in defaults
    are used and nothing is written.
    """

    DEFAULT_CONFIG_PATHS = [
        "cellroute.json",
        "config/cellroute.json",
        "~/.cellroute/config.json",
        "~/.config/cellroute/config.json",
    ]

    def __init__(self, config_path: Optional[PathLike] = None):
        self.settings = ApplicationSettings()
        self.config_path: Optional[Path] = _resolve(config_path) if config_path else self._find_config_file()

        if self.config_path is None:
            logger.debug("No configuration file found, using built-in defaults")
        elif self.config_path.exists():
            self.load()
        elif self.save():
            logger.info(f"Wrote default configuration to {self.config_path}")

    def _find_config_file(self) -> Optional[Path]:
        for candidate in self.DEFAULT_CONFIG_PATHS:
            path = _resolve(candidate)
            if path.exists():
                return path
        return None

    def load(self, config_path: Optional[PathLike] = None) -> bool:
        """Merge a JSON file onto the current settings.

        Returns:
            False if the file is missing or not valid JSON; settings are left untouched.
        """
        path = _resolve(config_path) if config_path else self.config_path
        if path is None or not path.exists():
            logger.warning(f"Configuration file not found: {path}")
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read configuration {path}: {e}")
            return False
        if not isinstance(data, dict):
            logger.error(f"Configuration {path} must contain a JSON object")
            return False

        _merge(self.settings, data)
        for problem in self._problems():
            logger.warning(f"Configuration {path}: {problem}")
        logger.info(f"Loaded configuration from {path}")
        return True

    def save(self, config_path: Optional[PathLike] = None) -> bool:
        path = _resolve(config_path) if config_path else self.config_path
        if path is None:
            logger.error("Cannot save configuration: no path given")
            return False

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self.settings), f, indent=2)
        except OSError as e:
            logger.error(f"Cannot write configuration {path}: {e}")
            return False
        return True

    def get_settings(self) -> ApplicationSettings:
        return self.settings

    def _update_section(self, section: str, values: Dict[str, Any]) -> None:
        target = getattr(self.settings, section)
        _merge(target, values, prefix=f"{section}.")

    def update_routing_settings(self, **kwargs):
        self._update_section("routing", kwargs)

    def update_drc_settings(self, **kwargs):
        self._update_section("drc", kwargs)

    def update_logging_settings(self, **kwargs):
        self._update_section("logging", kwargs)

    def validate(self) -> Dict[str, List[str]]:
        """Validation errors per settings section (empty lists when valid)."""
        return self.settings.validate()

    def _problems(self) -> List[str]:
        return [f"{section}: {error}" for section, errors in self.validate().items() for error in errors]

    def get_routing_config(self):
        """RoutingConfig built from the routing section.

        Raises:
            ConfigurationError: If the routing section does not validate
        """
        errors = self.settings.routing.validate()
        if errors:
            raise ConfigurationError(
                f"Invalid routing settings: {'; '.join(errors)}",
                details={"errors": errors}
            )
        return self.settings.routing.to_routing_config()

    def reset_to_defaults(self):
        self.settings = ApplicationSettings()
        logger.info("Configuration reset to defaults")

    def get_config_info(self) -> Dict[str, Any]:
        return {
            "config_path": str(self.config_path) if self.config_path else None,
            "config_exists": bool(self.config_path and self.config_path.exists()),
            "version": self.settings.version,
            "config_version": self.settings.config_version,
            "validation_errors": self.validate(),
        }


_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Process-wide ConfigManager, created on first use."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def initialize_config(config_path: Optional[PathLike] = None) -> ConfigManager:
    """Replace the process-wide ConfigManager, loading ``config_path`` if given."""
    global _config_manager
    _config_manager = ConfigManager(config_path)
    return _config_manager
