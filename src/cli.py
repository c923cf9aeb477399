"""Command line entry point for the storage-class quota tool."""

import argparse
import logging
import sys
from typing import Sequence

from config import DEFAULT_QPS, DEFAULT_WORKERS, RunConfig, env_default
from constants import EXIT_FATAL, EXIT_OK, EXIT_PARTIAL_FAILURE
from kube_client import KubeClients, connect
from metrics import push_metrics
from models import (
    BatchResult,
    Intent,
    Migrate,
    OutcomeStatus,
    QuotaToolError,
    Restrict,
    Unrestrict,
    ZeroInit,
)
from quantity import parse_quantity
from ratelimit import RateLimiter
from resources.storage_class import ensure_storage_classes
from runner import BatchRunner

logger = logging.getLogger(__name__)

EPILOG = """\
examples:
  forbid namespace prometheus from using rbd-ceph-csi:
    %(prog)s restrict -s rbd-ceph-csi -n prometheus
  allow namespace prometheus to use rbd-ceph-csi again:
    %(prog)s unrestrict -s rbd-ceph-csi -n prometheus
  forbid every namespace from using rbd-ceph-csi:
    %(prog)s restrict -s rbd-ceph-csi
  cap namespace prometheus at 50G on rbd-ceph-csi:
    %(prog)s restrict -s rbd-ceph-csi -n prometheus -q 50G
  move the generic storage quota from ceph-old to ceph-new:
    %(prog)s migrate --from ceph-old --to ceph-new
  initialize the quota of a new storage class to zero:
    %(prog)s set-zero -s ceph-new
"""


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-n",
        "--namespace",
        default="",
        help="namespace to act on (default: all namespaces)",
    )
    parser.add_argument(
        "--kubeconfig",
        default=None,
        help="path to a kubeconfig file (default: in-cluster, then ~/.kube/config)",
    )
    parser.add_argument("--context", default=None, help="kubeconfig context to use")
    parser.add_argument(
        "--workers",
        type=int,
        default=env_default("STORAGECLASS_QUOTA_WORKERS", str(DEFAULT_WORKERS)),
        help="number of ResourceQuotas patched in parallel (default: 1)",
    )
    parser.add_argument(
        "--qps",
        type=float,
        default=env_default("STORAGECLASS_QUOTA_QPS", str(DEFAULT_QPS)),
        help="maximum patch requests per second, 0 for unlimited (default: 5)",
    )
    parser.add_argument(
        "--pushgateway",
        default=env_default("STORAGECLASS_QUOTA_PUSHGATEWAY"),
        help="Prometheus Pushgateway address to push run metrics to",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per intent."""
    parser = argparse.ArgumentParser(
        prog="storageclass-quota",
        description="Restrict, migrate or initialize per-storage-class "
        "ResourceQuota limits across namespaces.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    restrict = subparsers.add_parser(
        "restrict",
        aliases=["add"],
        help="limit usage of a storage class (quota 0 forbids it)",
    )
    restrict.add_argument(
        "-s", "--storageclass", required=True, help="storage class to restrict"
    )
    restrict.add_argument(
        "-q",
        "--quota",
        default="0",
        help="allowed size, for example 50G or 200T (default: 0, forbid)",
    )

    unrestrict = subparsers.add_parser(
        "unrestrict",
        aliases=["remove"],
        help="remove the storage class limit entirely",
    )
    unrestrict.add_argument(
        "-s", "--storageclass", required=True, help="storage class to unrestrict"
    )

    migrate = subparsers.add_parser(
        "migrate",
        help="copy the generic requests.storage quota onto a storage class",
    )
    migrate.add_argument(
        "--from",
        dest="from_storageclass",
        required=True,
        help="storage class whose quota is set to 0",
    )
    migrate.add_argument(
        "--to",
        dest="to_storageclass",
        required=True,
        help="storage class that receives the existing requests.storage quota",
    )

    set_zero = subparsers.add_parser(
        "set-zero",
        help="initialize a storage class quota to 0 where not already 0",
    )
    set_zero.add_argument(
        "-s", "--storageclass", required=True, help="storage class to initialize"
    )

    for subparser in (restrict, unrestrict, migrate, set_zero):
        _add_common_arguments(subparser)

    return parser


def build_intent(args: argparse.Namespace) -> Intent:
    """Translate parsed arguments into an intent.

    Raises:
        InvalidQuantityError: if the restrict quota is malformed
    """
    if args.command in ("restrict", "add"):
        quota = parse_quantity(args.quota)
        return Restrict(storage_class=args.storageclass, quota=quota.canonical)
    if args.command in ("unrestrict", "remove"):
        return Unrestrict(storage_class=args.storageclass)
    if args.command == "migrate":
        return Migrate(
            from_storage_class=args.from_storageclass,
            to_storage_class=args.to_storageclass,
        )
    return ZeroInit(storage_class=args.storageclass)


def build_config(args: argparse.Namespace) -> RunConfig:
    """Build the validated run configuration from parsed arguments."""
    return RunConfig(
        intent=build_intent(args),
        namespace=args.namespace or None,
        kubeconfig=args.kubeconfig,
        context=args.context,
        workers=args.workers,
        qps=args.qps,
        pushgateway=args.pushgateway,
    )


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def report(config: RunConfig, result: BatchResult) -> int:
    """Log the outcome of a run and return the process exit code."""
    applied = result.count(OutcomeStatus.APPLIED)
    skipped = result.count(OutcomeStatus.SKIPPED)

    error = result.error
    if error is None:
        logger.info(
            "Successfully applied %s to %s (%d applied, %d skipped)",
            config.intent.name,
            config.scope,
            applied,
            skipped,
        )
        return EXIT_OK

    logger.error(
        "%d of %d ResourceQuotas failed in %s (%d applied, %d skipped)",
        len(error.failures),
        len(result.outcomes),
        config.scope,
        applied,
        skipped,
    )
    for ref, cause in error.failures:
        logger.error("  %s: %s", ref, cause)
    return EXIT_PARTIAL_FAILURE


def run(config: RunConfig, clients: KubeClients | None = None) -> int:
    """Execute a run against the cluster and return the exit code.

    Raises:
        QuotaToolError: on any fatal precondition failure, before any mutation
    """
    if clients is None:
        clients = connect(config.kubeconfig, config.context)

    ensure_storage_classes(clients.storage, config.intent.storage_classes)

    runner = BatchRunner(
        clients.core,
        workers=config.workers,
        rate_limiter=RateLimiter.from_config(config),
    )
    try:
        result = runner.run(config.namespace, config.intent)
        return report(config, result)
    finally:
        push_metrics(config.pushgateway)


def main(argv: Sequence[str] | None = None) -> int:
    """Console script entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = build_config(args)
        return run(config)
    except QuotaToolError as e:
        logger.error("%s", e)
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
