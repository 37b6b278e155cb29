# file: main.py

import logging
import os
from pathlib import Path
from typing import Optional

from editor.commands.command_history import CommandHistory, DEFAULT_MAX_STACK_SIZE
from editor.event_bus import EventBus
from editor.service_locator import ServiceLocator
from utils.config_loader import ConfigLoader
from utils.logger import setup_logging


def default_config_dir() -> Path:
    """Platform-specific directory for the editor's config files."""
    base = os.getenv("APPDATA") or Path.home() / ".config"
    return Path(base) / "SceneEditor" / "config"


def register_core_services(locator: ServiceLocator, config_dir: Path):
    """Registers the services the undo/redo system is built from."""
    locator.register("config_loader", lambda: ConfigLoader(config_dir), singleton=True)
    locator.register("event_bus", EventBus, singleton=True)

    def create_command_history(config_loader: ConfigLoader, event_bus: EventBus) -> CommandHistory:
        max_stack_size = config_loader.get("commands_config.json", "max_stack_size", DEFAULT_MAX_STACK_SIZE)
        return CommandHistory(event_bus, max_stack_size=max_stack_size)

    locator.register("command_history", create_command_history, singleton=True)


def bootstrap(config_dir: Optional[Path] = None) -> ServiceLocator:
    """
    Builds a ready-to-use service locator: configs loaded (defaults
    written on first run) and logging configured.
    """
    locator = ServiceLocator()
    register_core_services(locator, config_dir or default_config_dir())

    config_loader: ConfigLoader = locator.resolve("config_loader")
    config_loader.load_all_configs()
    setup_logging(config_loader)

    history: CommandHistory = locator.resolve("command_history")
    logging.info(f"Command history ready (max stack size {history.max_stack_size})")
    return locator


if __name__ == "__main__":
    bootstrap()
