"""CLI entrypoint for headless scriptbridge hosts."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn

from rest_api.app import create_app
from scriptbridge.adapters.host_network import list_host_addresses
from scriptbridge.adapters.notifier_log import LogNotifier
from scriptbridge.adapters.storage_local import StorageLocal
from scriptbridge.adapters.transport_memory import InMemoryTransport
from scriptbridge.adapters.workspace_fs import FilesystemWorkspace
from scriptbridge.app.controller import AppController
from scriptbridge.app.scheduler import Scheduler, loop_timers
from scriptbridge.domain.naming import make_capture_filename
from scriptbridge.domain.ports import UseCaseError
from scriptbridge.usecases.capture_screen import build_capture_script
from scriptbridge.utils import logging as logging_utils
from scriptbridge.viewmodels.settings_vm import SettingsVM

LOGGER = logging.getLogger(__name__)


def load_settings(settings_dir: str) -> SettingsVM:
    """Load persisted settings; unreadable or invalid files fall back to defaults."""
    vm = SettingsVM()
    storage = StorageLocal(root_dir=settings_dir)
    try:
        payload = storage.load_user_settings()
    except (OSError, ValueError) as exc:
        LOGGER.warning("Ignoring settings in %s: %s", storage.settings_path, exc)
        return vm
    if payload:
        try:
            vm.apply_dict(payload)
        except ValueError as exc:
            LOGGER.warning("Ignoring settings in %s: %s", storage.settings_path, exc)
            return SettingsVM()
    return vm


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="scriptbridge", description="Push scripts to devices and receive their files.")
    parser.add_argument("--settings-dir", default=".", help="folder holding user_settings.json")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="receive device uploads into a workspace folder")
    serve.add_argument("--workspace", required=True)
    serve.add_argument("--host", default="0.0.0.0", help="bind address")
    serve.add_argument("--port", type=int, default=None)

    capture = sub.add_parser("capture-script", help="print a screenshot capture script")
    capture.add_argument("--host", default=None, help="address devices use to reach this host")
    capture.add_argument("--port", type=int, default=None)
    return parser.parse_args(argv)


def serve(args: argparse.Namespace, settings_vm: SettingsVM, log_level: int = logging.INFO) -> None:
    if args.port is not None:
        settings_vm.server_port = args.port
    workspace = FilesystemWorkspace([Path(args.workspace).resolve()])
    transport = InMemoryTransport(
        server_port=settings_vm.server_port,
        addresses=list_host_addresses(),
    )
    controller = AppController(
        transport=transport,
        workspace=workspace,
        notifier=LogNotifier(),
        scheduler=Scheduler(*loop_timers()),
        settings_vm=settings_vm,
    )
    transport.subscribe(controller.handle_event)
    controller.start_server()
    app = create_app(controller.handle_event, api_key=settings_vm.api_key)
    try:
        uvicorn.run(app, host=args.host, port=settings_vm.server_port, log_level=logging_utils.uvicorn_log_level(log_level))
    finally:
        controller.deactivate()


def capture_script(args: argparse.Namespace, settings_vm: SettingsVM) -> str:
    host = args.host or settings_vm.host_address or list_host_addresses()[0]
    port = args.port if args.port is not None else settings_vm.server_port
    filename = make_capture_filename(directory=settings_vm.screenshot_dir)
    return build_capture_script(host, port, filename)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint."""
    logging_utils.configure_root()
    args = _parse_args(argv)
    settings_vm = load_settings(args.settings_dir)
    level = logging_utils.apply_preferences(settings_vm.debug_logging)
    try:
        if args.command == "serve":
            serve(args, settings_vm, level)
        else:
            sys.stdout.write(capture_script(args, settings_vm))
    except (UseCaseError, ValueError) as exc:
        LOGGER.error("%s", getattr(exc, "message", exc))
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
