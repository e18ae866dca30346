from datetime import date, datetime
from typing import Dict, Any, List, Optional, Callable
import logging
import sys
import threading
from .config import Config
from .component_base import StatusComponent
from .plugin_manager import PluginManager
from .presenter import Presenter, create_presenter
from .refresh import RefreshOrchestrator
from .task_manager import TaskManager

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
HANDLER_PREFIX = "kassenblick."


class KassenBlickApp:
    def __init__(
        self,
        config_path: Optional[str] = None,
        watch_config: bool = True,
        presenter: Optional[Presenter] = None,
        clock: Optional[Callable[[], date]] = None,
        setup_logging: bool = True,
    ):
        self.logger = logging.getLogger("KassenBlick")
        self.clock = clock or date.today

        self.config = Config(config_path=config_path, watch=watch_config)
        self.config.register_change_callback(self.handle_config_change)
        self._pending_config: Optional[Dict[str, Any]] = None

        if setup_logging:
            self._setup_logging()

        self.plugin_manager = PluginManager()
        self.task_manager = TaskManager()
        self._fixed_presenter = presenter
        self.presenter = presenter or create_presenter(self.config.data.get("presenter"), self.config.resolve_path)
        self.orchestrator = RefreshOrchestrator(self.initialize_components(), self.presenter)
        self.maintenance = self._build_maintenance()
        self._stop_event = threading.Event()

    def _setup_logging(self) -> None:
        """Configure logging to write to both file and stdout"""
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            if (handler.get_name() or "").startswith(HANDLER_PREFIX):
                root_logger.removeHandler(handler)
                handler.close()

        logging_config = self.config.data.get("logging") or {}
        level = getattr(logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO)
        root_logger.setLevel(level)

        formatter = logging.Formatter(LOG_FORMAT)

        log_file = logging_config.get("file")
        if log_file:
            try:
                file_handler = logging.FileHandler(self.config.resolve_path(log_file))
                file_handler.set_name(HANDLER_PREFIX + "file")
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)
            except OSError as e:
                self.logger.warning(f"Cannot open log file {log_file}: {e}")

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(HANDLER_PREFIX + "console")
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        self.logger.info("KassenBlick starting...")

    def initialize_components(self) -> List[StatusComponent]:
        components = []
        for component_name in self.plugin_manager.components:
            component_config = self.config.get_component_config(component_name)
            try:
                component = self.plugin_manager.create_component(
                    component_name, component_config, self.config.resolve_path, clock=self.clock
                )
            except Exception as e:
                self.logger.error(f"Error initializing component {component_name}: {e}")
                self.logger.exception(e)
                continue
            if component:
                self.logger.debug(f"Component {component_name} reads {component.source_path}")
                components.append(component)
            else:
                self.logger.debug(f"Skipping disabled component: {component_name}")
        return components

    def _build_maintenance(self):
        maintenance_config = self.config.data.get("maintenance") or {}
        if not maintenance_config.get("enable", False):
            return None
        bills_config = self.config.get_component_config("Bills") or {}
        if not bills_config.get("path"):
            self.logger.warning("Maintenance enabled but Bills has no path")
            return None
        from kassenblick.plugins.bills.maintenance import BillsMaintenanceTask

        config = dict(maintenance_config)
        config.setdefault("use_aliases", bills_config.get("use_aliases", True))
        task = BillsMaintenanceTask(self.config.resolve_path(bills_config["path"]), config)
        task.ensure_scheduled()
        return task

    def handle_config_change(self, new_config: Dict[str, Any]) -> None:
        """Called from the watcher thread; the change is applied at the start of the next tick"""
        self.logger.info("Config change queued for next tick")
        self._pending_config = new_config

    def _apply_pending_config(self) -> None:
        new_config = self._pending_config
        if new_config is None:
            return
        self._pending_config = None
        # update_interval is read once in run(); a new interval needs a restart
        self.logger.info("Applying config change")
        if self._fixed_presenter is None:
            self.presenter = create_presenter(new_config.get("presenter"), self.config.resolve_path)
        self.orchestrator = RefreshOrchestrator(self.initialize_components(), self.presenter)
        self.maintenance = self._build_maintenance()

    def tick(self) -> List[str]:
        """One update pass: pending config, changed sources, due maintenance"""
        self._apply_pending_config()
        applied = self.orchestrator.tick()
        if self.maintenance is not None:
            self.maintenance.run_if_due(datetime.now())
        return applied

    def run(self, once: bool = False) -> None:
        try:
            if once:
                self.tick()
                return
            interval = self.config.update_interval_seconds
            self.logger.info(f"Refreshing every {interval:.2f} seconds")
            self.tick()
            self.task_manager.schedule_task("refresh", self.tick, interval, one_time=False)
            self._stop_event.wait()
        except KeyboardInterrupt:
            self.logger.info("Interrupted, shutting down")
        finally:
            self.stop()

    def stop(self) -> None:
        self._stop_event.set()
        self.task_manager.stop()
        self.config.cleanup()
