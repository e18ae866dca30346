import yaml
from pathlib import Path
import copy
import os
from typing import Any, Dict, Optional, List, Callable
import logging
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileModifiedEvent
import time
import re

logger = logging.getLogger("KassenBlick.config")

DEFAULT_CONFIG: Dict[str, Any] = {
    "update_interval": 1000,  # milliseconds
    "components": {
        "Bills": {
            "enable": True,
            "path": "Data/Bills.csv",
            "max_bills": 15,
            "columns": 3,
            "yellow_threshold": 5,
            "use_aliases": True,
        },
        "Buckets": {
            "enable": True,
            "path": "Data/Buckets.csv",
            "max_buckets": 5,
        },
    },
    "presenter": {
        "type": "skin",
    },
    "maintenance": {
        "enable": False,
        "day": 1,
        "time": "00:05",
        "reset_statuses": True,
    },
    "logging": {
        "level": "INFO",
        "file": "kassenblick.log",
    },
}


class ConfigChangeHandler(FileSystemEventHandler):
    def __init__(self, config):
        self.config = config
        self.last_modified = 0
        self.cooldown = 1.0  # Cooldown period in seconds

    def on_modified(self, event):
        if not isinstance(event, FileModifiedEvent):
            return

        current_time = time.time()
        if current_time - self.last_modified < self.cooldown:
            return

        if Path(event.src_path).resolve() == self.config.config_file:
            try:
                self.last_modified = current_time
                self.config.reload()
            except Exception as e:
                logger.error(f"Error handling config change: {e}")


class Config:
    def __init__(self, config_path: Optional[str] = None, watch: bool = True):
        logger.debug("Initializing Config class")

        self.change_callbacks: List[Callable] = []
        self._loading = False  # Lock to prevent recursive reloading

        if config_path:
            self.config_file = Path(config_path).resolve()
            self.config_dir = self.config_file.parent
        else:
            self.config_dir = Path.cwd()
            self.config_file = self.config_dir / "config.yaml"

        logger.debug(f"Using config directory: {self.config_dir}")
        logger.debug(f"Using config file: {self.config_file}")

        # Load environment variables from .env file
        self._load_env_file()

        self._ensure_config_exists()
        self._load_config()

        # Setup file watching
        self.observer = None
        if watch:
            self.observer = Observer()
            handler = ConfigChangeHandler(self)
            logger.info(f"Path monitored for reloading: {self.config_dir}")
            self.observer.schedule(handler, str(self.config_dir), recursive=False)
            self.observer.start()

    def register_change_callback(self, callback: Callable) -> None:
        """Register a callback to be called when config changes"""
        self.change_callbacks.append(callback)

    def reload(self) -> None:
        """Reload config and notify listeners"""
        if self._loading:
            return

        self._loading = True
        try:
            logger.info("Config file change detected - reloading configuration")

            # Wait briefly for file to be fully written
            time.sleep(0.1)

            old_config = copy.deepcopy(self.data) if hasattr(self, 'data') else {}
            self._load_config()

            # Log changes
            self._log_config_changes(old_config, self.data)

            for callback in self.change_callbacks:
                try:
                    callback(self.data)
                except Exception as e:
                    logger.error(f"Error in config change callback: {e}")

        except Exception as e:
            logger.error(f"Error reloading config: {e}")
            logger.exception(e)
        finally:
            self._loading = False

    def _log_config_changes(self, old_config: Dict, new_config: Dict) -> None:
        """Log the differences between old and new configs"""
        def compare_dict(path: str, dict1: Dict, dict2: Dict) -> None:
            all_keys = set(dict1.keys()) | set(dict2.keys())
            for key in all_keys:
                current_path = f"{path}.{key}" if path else key

                # Key exists in both configs
                if key in dict1 and key in dict2:
                    if isinstance(dict1[key], dict) and isinstance(dict2[key], dict):
                        compare_dict(current_path, dict1[key], dict2[key])
                    elif dict1[key] != dict2[key]:
                        logger.info(f"Config changed: {current_path}: {dict1[key]} -> {dict2[key]}")

                # Key only in old config
                elif key in dict1:
                    logger.info(f"Config removed: {current_path}: {dict1[key]}")

                # Key only in new config
                else:
                    logger.info(f"Config added: {current_path}: {dict2[key]}")

        logger.info("=== Configuration Changes Detected ===")
        compare_dict("", old_config, new_config)
        logger.info("=== End of Configuration Changes ===")

    def cleanup(self) -> None:
        """Stop the file observer"""
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None

    def _ensure_config_exists(self) -> None:
        """Create default config if it doesn't exist"""
        if not self.config_dir.exists():
            logger.info(f"Creating config directory: {self.config_dir}")
            self.config_dir.mkdir(parents=True)

        if not self.config_file.exists():
            logger.info(f"Creating default config file: {self.config_file}")
            self.config_file.write_text(yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False))

    def _load_env_file(self) -> None:
        """Load environment variables from .env file"""
        # Look for .env file in config directory or project root
        env_files = [
            self.config_dir / ".env",
            self.config_dir.parent / ".env",
            Path.cwd() / ".env"
        ]

        env_file = None
        for path in env_files:
            if path.exists():
                env_file = path
                break

        if not env_file:
            logger.debug("No .env file found, skipping environment variable loading")
            return

        logger.info(f"Loading environment variables from: {env_file}")
        try:
            with open(env_file, 'r') as f:
                for line in f:
                    line = line.strip()
                    # Skip empty lines and comments
                    if not line or line.startswith('#'):
                        continue

                    match = re.match(r'^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$', line)
                    if match:
                        key, value = match.groups()
                        value = value.strip('"').strip("'")
                        # Set environment variable if not already set
                        if key not in os.environ:
                            os.environ[key] = value
                            logger.debug(f"Loaded env var: {key}")
        except Exception as e:
            logger.warning(f"Error loading .env file: {e}")

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute environment variables in config data"""
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str):
            # Format: ${VAR_NAME} or $VAR_NAME
            if data.startswith('${') and data.endswith('}'):
                var_name = data[2:-1]
                return os.environ.get(var_name, data)
            elif data.startswith('$') and len(data) > 1:
                var_name = data[1:]
                return os.environ.get(var_name, data)
            return data
        else:
            return data

    def _merge_defaults(self, defaults: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        """Fill keys missing from data with defaults, recursing into nested sections"""
        merged = copy.deepcopy(defaults)
        for key, value in data.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge_defaults(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _load_config(self) -> None:
        """Load configuration from file"""
        try:
            logger.debug(f"Loading config from: {self.config_file}")
            with open(self.config_file) as f:
                new_data = yaml.safe_load(f)

            if not isinstance(new_data, dict):
                raise ValueError("Invalid config format: root must be a dictionary")

            new_data = self._substitute_env_vars(new_data)
            self.data = self._merge_defaults(DEFAULT_CONFIG, new_data)
            logger.debug(f"Loaded config data: {self.data}")

        except Exception as e:
            logger.error(f"Error loading config: {e}")
            if hasattr(self, 'data'):
                logger.info("Keeping previous configuration")
            else:
                logger.info("Using default configuration")
                self.data = copy.deepcopy(DEFAULT_CONFIG)

    def resolve_path(self, value: str) -> Path:
        """Resolve a configured path; relative paths are taken from the config directory"""
        path = Path(os.path.expanduser(str(value)))
        if not path.is_absolute():
            path = self.config_dir / path
        return path.resolve()

    def get_component_config(self, component_name: str) -> Optional[Dict[str, Any]]:
        """Get config for a specific component"""
        components = self.data.get("components", {}) or {}
        return components.get(component_name, None)

    @property
    def update_interval_seconds(self) -> float:
        """update_interval is configured in milliseconds"""
        try:
            interval = float(self.data.get("update_interval", 1000))
        except (TypeError, ValueError):
            interval = 1000.0
        return max(interval, 50.0) / 1000.0
