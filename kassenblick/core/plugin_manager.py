import importlib
import pkgutil
from datetime import date
from pathlib import Path
from typing import Dict, Type, Any, Optional, Callable
import logging
from .component_base import StatusComponent

class PluginManager:
    def __init__(self, plugin_package: str = "kassenblick.plugins"):
        self.components: Dict[str, Type[StatusComponent]] = {}
        self.logger = logging.getLogger("KassenBlick.plugins")
        self.discover_plugins(plugin_package)

    def discover_plugins(self, plugin_package: str = "kassenblick.plugins") -> None:
        """Discover and register all plugins in the specified package"""
        package = importlib.import_module(plugin_package)
        self.logger.info(f"Discovering plugins in package: {plugin_package}")

        for _, name, is_pkg in pkgutil.iter_modules(package.__path__):
            if is_pkg:
                try:
                    module = importlib.import_module(f"{plugin_package}.{name}")
                    self.logger.debug(f"Found plugin module: {name}")
                    if hasattr(module, "register_components"):
                        module.register_components(self)
                        self.logger.info(f"Registered components from plugin: {name}")
                except Exception as e:
                    self.logger.error(f"Error loading plugin {name}: {e}")
                    self.logger.exception(e)

    def register_component(self, component_class: Type[StatusComponent]) -> None:
        """Register a new component class"""
        self.logger.debug(f"Registering component: {component_class.name}")
        self.components[component_class.name] = component_class

    def create_component(
        self,
        name: str,
        config: Optional[Dict[str, Any]],
        resolve_path: Callable[[str], Path],
        clock: Optional[Callable[[], date]] = None,
    ) -> Optional[StatusComponent]:
        """Create an instance of a registered component if it's enabled in config"""
        if name not in self.components:
            self.logger.warning(f"Component '{name}' not found")
            return None

        # Only create component if it has config and is enabled
        if not config or not config.get("enable", False):
            self.logger.info(f"Component '{name}' disabled (enable: {config.get('enable', False) if config else False})")
            return None

        path = config.get("path")
        if not path:
            self.logger.error(f"Component '{name}' has no source path configured")
            return None

        self.logger.debug(f"Creating component {name} with config: {config}")
        return self.components[name](config, resolve_path(path), clock=clock)
