# ============================================================================
# SEED APP - HOST ENTRY POINT
# ============================================================================
# STATUS: Entry point - Local / dev seeding host
# PURPOSE: Build topology, probe resources, run seed routines, print report
# CREATED: 17 OCT 2026
# ============================================================================
"""
Seed App.

Runs the whole pipeline once against the configured topology:

    config -> default_topology -> bind one SeedRoutine per namespace
           -> ReadinessProbe (PROVISIONING -> READY) -> dispatcher tasks
           -> JSON report on stdout

Seeding failures are reported, never fatal: the exit code is 0 unless
the configuration itself is invalid.

    python seed_app.py --dry-run
    python seed_app.py --count 25
    ENVIRONMENT=test COSMOS_EMULATOR=false COSMOS_CONNECTION_STRING=... python seed_app.py
"""

import argparse
import asyncio
import json
import signal
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config import AppConfig, SeedingConfig, get_config
from config.env_validation import log_validation_results
from core.models import ResourceKind
from core.topology import Topology, default_topology
from infrastructure.factory import BackendFactory
from infrastructure.interface_repository import NamespaceBackend
from seeding import (
    LifecycleDispatcher,
    ReadinessProbe,
    SchemaEnsurer,
    SeedContext,
    SeedRoutine,
)
from util_logger import LoggerFactory, ComponentType, log_exceptions

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "SeedApp")
validation_logger = LoggerFactory.create_logger(ComponentType.VALIDATOR, "EnvValidation")

_NAMESPACE_KINDS = {k.value for k in ResourceKind if k.is_namespace}


@log_exceptions(ComponentType.TRIGGER, "SeedApp")
async def run_seeding(
    config: AppConfig,
    topology: Optional[Topology] = None,
    backends: Optional[Dict[ResourceKind, NamespaceBackend]] = None,
    context: Optional[SeedContext] = None,
) -> Dict[str, Any]:
    """
    Seed every namespace in the topology once.

    Args:
        config: Application configuration
        topology: Resources to seed (default_topology(config) if omitted)
        backends: Namespace backends (Azure SDK backends if omitted)
        context: Host facts (from config if omitted)

    Returns:
        Report dict: environment, import_path, resources[]
    """
    if topology is None:
        topology = default_topology(config)
    if backends is None:
        backends = BackendFactory.create_backends()
    if context is None:
        context = SeedContext.from_config(config)
    # Created once, before any routine runs
    import_path = context.import_path

    dispatcher = LifecycleDispatcher(
        max_retries=config.seeding.routine_retries,
        retry_delay_seconds=config.seeding.retry_delay_seconds,
    )
    ensurer = SchemaEnsurer(backends)

    for resource in topology:
        dispatcher.register(resource)
    namespaces = topology.namespaces()
    for resource in namespaces:
        dispatcher.bind(resource, SeedRoutine.from_config(config, ensurer))

    probe = ReadinessProbe(
        dispatcher,
        backends,
        timeout_seconds=config.seeding.readiness_timeout_seconds,
        poll_interval_seconds=config.seeding.readiness_poll_interval_seconds,
    )

    loop = asyncio.get_running_loop()
    _install_signal_handlers(loop, dispatcher)

    logger.info(
        f"Seeding {len(namespaces)} namespaces in environment {config.environment}",
        extra={'custom_dimensions': {
            'environment': config.environment,
            'correlation_id': context.correlation_id,
        }}
    )
    await probe.probe_all(namespaces, context)
    await dispatcher.wait_all()

    return {
        "environment": config.environment,
        "import_path": import_path,
        "correlation_id": context.correlation_id,
        "resources": [e for e in dispatcher.report() if e["kind"] in _NAMESPACE_KINDS],
    }


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, dispatcher: LifecycleDispatcher) -> None:
    """SIGINT / SIGTERM stop probes and new writes; in-flight writes finish."""
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, dispatcher.cancel_all, f"signal {signum.name}")
        except (NotImplementedError, RuntimeError):
            # Windows event loops and non-main threads have no signal support
            pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed the configured document container, blob container and queue with synthetic records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show what would be seeded (no connections are made)
  python seed_app.py --dry-run

  # Seed 25 records per namespace
  python seed_app.py --count 25
        """,
    )
    parser.add_argument(
        "--count", type=int, default=None,
        help="Records per namespace (default: SEED_RECORD_COUNT or 10)",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the resolved topology and configuration, then exit",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not log_validation_results(validation_logger):
        print("Invalid environment; see the ENV VAR ERROR log lines", file=sys.stderr)
        return 2

    try:
        config = get_config()
        if args.count is not None:
            seeding = SeedingConfig.model_validate({**config.seeding.model_dump(), "record_count": args.count})
            config = config.model_copy(update={"seeding": seeding})
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.dry_run:
        topology = default_topology(config)
        print(json.dumps({
            "environment": config.environment,
            "record_count": config.seeding.record_count,
            "cosmos": config.cosmos.debug_dict(),
            "storage": config.storage.debug_dict(),
            "topology": topology.describe(),
        }, indent=2))
        return 0

    try:
        report = asyncio.run(run_seeding(config))
    except OSError as e:
        print(f"Cannot prepare import directory under {config.seeding.content_root}: {e}", file=sys.stderr)
        return 2
    print(json.dumps(report, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
