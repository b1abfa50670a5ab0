# src/xregister/app.py
"""
Application Entry Point - Wiring and Command Line

This module is the composition root: it loads settings, configures logging,
builds the store, provider, service and use cases, and runs one of the
commands:

    xregister migrate                  create the tables
    xregister sync                     run the sync worker in the foreground
    xregister serve [--port P] [--sync]  run the HTTP API (optionally with the worker)
    xregister history SOURCE TARGET    print the rate history of a pair

Files that USE this module:
- xregister.__main__ (python -m xregister)
- pyproject.toml (xregister console script)

Files that this module USES:
- xregister.config (load_settings)
- xregister.shared.logging_conf (setup_logging)
- xregister.adapters.* (store, provider, HTTP app)
- xregister.application.* (service, use cases, sync worker)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import argparse  # Command line parsing
import logging  # Standard library for logging messages and errors
import signal  # SIGINT/SIGTERM handling for the sync worker
import sys  # Exit codes
from typing import Optional, Sequence  # Type hints

from pydantic import ValidationError  # Raised for invalid configuration

from xregister.adapters.http import create_app  # Flask read API
from xregister.adapters.persistence import ExchangeStore, create_store, migrate  # Store factory and schema
from xregister.adapters.providers import build_provider  # Provider selection
from xregister.application import (
    ExchangeRateService,
    ListExchangesUseCase,
    SyncExchangeRateUseCase,
    SyncWorker,
)
from xregister.config import Settings, load_settings  # Application configuration
from xregister.domain.errors import ExchangeNotFoundError, StoreError  # Reported as exit code 1
from xregister.shared.logging_conf import setup_logging  # Configure logging with file rotation
from xregister.shared.validators import validate_currency_code  # CLI argument checks

logger = logging.getLogger(__name__)


def build_worker(settings: Settings, service: ExchangeRateService) -> SyncWorker:
    """Wire provider, sync use case and worker from settings."""
    provider = build_provider(settings)
    use_case = SyncExchangeRateUseCase(service, provider)
    return SyncWorker(
        use_case,
        sources=settings.currencies_from,
        targets=settings.currencies_to,
        interval=settings.sync_interval_seconds,
    )


def _install_stop_handlers(worker: SyncWorker) -> None:
    def _handle(signum, _frame):
        logger.info("Received signal %s", signal.Signals(signum).name)
        worker.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def _serve_stop_handler(worker: Optional[SyncWorker]):
    """SIGTERM handler for serve: stop the worker, then unwind app.run like Ctrl+C."""
    def _handle(signum, _frame):
        logger.info("Received signal %s", signal.Signals(signum).name)
        if worker is not None:
            worker.stop()
        raise KeyboardInterrupt

    return _handle


def cmd_migrate(settings: Settings, store: ExchangeStore, args: argparse.Namespace) -> int:
    migrate(store)
    return 0


def cmd_sync(settings: Settings, store: ExchangeStore, args: argparse.Namespace) -> int:
    service = ExchangeRateService(store, transactional=settings.sync_transactional)
    worker = build_worker(settings, service)
    _install_stop_handlers(worker)
    logger.info("Sync running... (press Ctrl+C to quit)")
    worker.run()
    return 0


def cmd_serve(settings: Settings, store: ExchangeStore, args: argparse.Namespace) -> int:
    service = ExchangeRateService(store, transactional=settings.sync_transactional)
    app = create_app(ListExchangesUseCase(service))
    port = args.port or settings.http_port

    worker: Optional[SyncWorker] = None
    if args.sync:
        worker = build_worker(settings, service)

    previous_handler = signal.signal(signal.SIGTERM, _serve_stop_handler(worker))
    if worker is not None:
        worker.start()
    logger.info("Service running on port %d... (press Ctrl+C to quit)", port)
    try:
        app.run(host=args.host, port=port, threaded=True, use_reloader=False)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)
        if worker is not None:
            worker.stop()
            worker.join(timeout=settings.http_timeout_seconds + 5)
        logger.info("Service stopped")
    return 0


def cmd_history(settings: Settings, store: ExchangeStore, args: argparse.Namespace) -> int:
    source, target = args.source.upper(), args.target.upper()
    for code in (source, target):
        if not validate_currency_code(code):
            raise ValueError(f"invalid currency code {code!r}")

    service = ExchangeRateService(store)
    exchange = service.get_exchange(source, target)
    if exchange is None:
        raise ExchangeNotFoundError(f"no exchange recorded for {source}-{target}")

    print(f"{source}-{target} (id={exchange.id}) current rate {exchange.rate}")
    for entry in service.list_history(exchange.id):
        print(f"{entry.created_at.isoformat()}  {entry.rate}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="xregister", description="Exchange rate register")
    sub = parser.add_subparsers(dest="command", required=True)

    p_migrate = sub.add_parser("migrate", help="Create the database tables")
    p_migrate.set_defaults(handler=cmd_migrate)

    p_sync = sub.add_parser("sync", help="Sync exchange rates from the provider until interrupted")
    p_sync.set_defaults(handler=cmd_sync)

    p_serve = sub.add_parser("serve", help="Start the HTTP API")
    p_serve.add_argument("-p", "--port", type=int, default=None, help="HTTP port (default: HTTP_PORT)")
    p_serve.add_argument("--host", default="0.0.0.0", help="Bind address")
    p_serve.add_argument("-s", "--sync", action="store_true", help="Also run the sync worker")
    p_serve.set_defaults(handler=cmd_serve)

    p_history = sub.add_parser("history", help="Print the rate history of a pair")
    p_history.add_argument("source", help="Source currency code")
    p_history.add_argument("target", help="Target currency code")
    p_history.set_defaults(handler=cmd_history)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse arguments, load configuration and run the selected command.
    
    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValidationError as e:
        setup_logging()
        logger.error("Invalid configuration: %s", e)
        return 2

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    store = create_store(settings.database_url, pool_size=settings.db_pool_size)
    try:
        store.connect()
        return args.handler(settings, store, args)
    except (ExchangeNotFoundError, StoreError, ValueError) as e:
        logger.error("%s", e)
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
