"""
Command-line interface for Image Sync.

Commands map one-to-one onto workflow jobs:
- matrix: discover image definitions and publish the raw matrix
- filter: drop images already present in the destination registry
- sync-image: pull, tag and push one image (one matrix worker)
- sync: run discovery, filtering and syncing locally with a worker pool
- scan: build an image, scan it with Trivy and upload the SARIF report
"""

import argparse
import logging
import os
import sys
from typing import Callable, Optional

from constants import (
    DEFAULT_DEFINITIONS_DIR,
    DEFAULT_DESTINATION_REGISTRY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_RETRY_WAIT_TIMES,
    DEFAULT_SARIF_OUTPUT,
    DEFAULT_SCAN_IMAGE_NAME,
    DEFAULT_SCAN_SEVERITIES,
    DEFAULT_SCAN_TIMEOUT,
)
from core.exceptions import ImageSyncException
from core.orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")


def _add_registry_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("registry options")
    group.add_argument("--registry", default=DEFAULT_DESTINATION_REGISTRY, help="Destination registry.")
    group.add_argument("--owner", default=None, help="Destination owner (default: GITHUB_REPOSITORY_OWNER).")
    group.add_argument("--login", action="store_true", help="Log in with GITHUB_ACTOR/GITHUB_TOKEN first.")


def _add_retry_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("retry options")
    group.add_argument("--max-attempts", type=int, default=DEFAULT_MAX_ATTEMPTS, help="Pull/push attempt ceiling.")
    group.add_argument(
        "--retry-waits",
        default=" ".join(str(w) for w in DEFAULT_RETRY_WAIT_TIMES),
        help="Seconds to wait between attempts, e.g. '30 60 300'.",
    )
    group.add_argument("--platform", default=None, help="Image platform to pull (e.g. linux/amd64).")


def parse_matrix_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse arguments for the matrix command."""
    parser = argparse.ArgumentParser(prog="imagesync matrix", description="Generate the image sync matrix.")
    parser.add_argument("--definitions-dir", default=DEFAULT_DEFINITIONS_DIR, help="Definitions directory.")
    _add_common_arguments(parser)
    return parser.parse_args(args)


def parse_filter_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse arguments for the filter command."""
    parser = argparse.ArgumentParser(
        prog="imagesync filter",
        description="Filter out images that already exist in the destination registry.",
    )
    parser.add_argument("--matrix", default=None, help="Raw matrix JSON (default: RAW_MATRIX_JSON).")
    _add_registry_arguments(parser)
    _add_common_arguments(parser)
    return parser.parse_args(args)


def parse_sync_image_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse arguments for the sync-image command."""
    parser = argparse.ArgumentParser(prog="imagesync sync-image", description="Pull, tag and push one image.")
    record_group = parser.add_argument_group("image")
    record_group.add_argument("--source-repository", default=os.environ.get("DH_REPO"), help="Source repository.")
    record_group.add_argument("--source-tag", default=os.environ.get("DH_TAG"), help="Source tag.")
    record_group.add_argument("--source-digest", default=os.environ.get("DH_DIGEST"), help="Source digest.")
    record_group.add_argument("--package", default=os.environ.get("GHCR_PKG"), help="Destination package name.")
    record_group.add_argument("--tag", default=os.environ.get("GHCR_TAG"), help="Destination tag.")
    _add_registry_arguments(parser)
    _add_retry_arguments(parser)
    _add_common_arguments(parser)
    return parser.parse_args(args)


def parse_sync_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse arguments for the all-in-one sync command."""
    parser = argparse.ArgumentParser(prog="imagesync sync", description="Sync every defined image.")
    parser.add_argument("--definitions-dir", default=DEFAULT_DEFINITIONS_DIR, help="Definitions directory.")
    parser.add_argument("--max-workers", type=int, default=DEFAULT_MAX_WORKERS, help="Number of parallel workers.")
    parser.add_argument("--no-filter", action="store_true", help="Sync without checking existing tags.")
    parser.add_argument("--dry-run", action="store_true", help="List images to sync without syncing.")
    _add_registry_arguments(parser)
    _add_retry_arguments(parser)
    _add_common_arguments(parser)
    return parser.parse_args(args)


def parse_scan_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse arguments for the scan command."""
    parser = argparse.ArgumentParser(
        prog="imagesync scan",
        description="Build an image, scan it with Trivy and upload the results.",
    )
    build_group = parser.add_argument_group("build options")
    build_group.add_argument("--image-name", default=DEFAULT_SCAN_IMAGE_NAME, help="Image name (tagged with the sha).")
    build_group.add_argument("--sha", default=None, help="Commit sha (default: GITHUB_SHA).")
    build_group.add_argument("--context", default=".", help="Build context.")
    build_group.add_argument("--dockerfile", default=None, help="Dockerfile path.")
    build_group.add_argument("--no-build", action="store_true", help="Scan an existing image.")

    scan_group = parser.add_argument_group("scan options")
    scan_group.add_argument("-o", "--output", default=DEFAULT_SARIF_OUTPUT, help="SARIF output file.")
    scan_group.add_argument("--severity", default=",".join(DEFAULT_SCAN_SEVERITIES), help="Severities to report.")
    scan_group.add_argument("--timeout", default=DEFAULT_SCAN_TIMEOUT, help="Scan wait budget.")

    upload_group = parser.add_argument_group("upload options")
    upload_group.add_argument("--repository", default=None, help="owner/name (default: GITHUB_REPOSITORY).")
    upload_group.add_argument("--ref", default=None, help="Git ref (default: GITHUB_REF).")
    upload_group.add_argument("--no-upload", action="store_true", help="Skip uploading results.")

    _add_common_arguments(parser)
    return parser.parse_args(args)


COMMANDS: dict[str, tuple[Callable[[Optional[list[str]]], argparse.Namespace], str]] = {
    "matrix": (parse_matrix_args, "run_matrix"),
    "filter": (parse_filter_args, "run_filter"),
    "sync-image": (parse_sync_image_args, "run_sync_image"),
    "sync": (parse_sync_args, "run_sync"),
    "scan": (parse_scan_args, "run_scan"),
}


def run_command(command: str, argv: Optional[list[str]] = None) -> int:
    """
    Parse arguments for one command and run it.

    Returns:
        Process exit code
    """
    parse, method_name = COMMANDS[command]
    args = parse(argv)
    setup_logging(args.verbose)

    orchestrator = SyncOrchestrator(args)
    try:
        return getattr(orchestrator, method_name)()
    except ImageSyncException as e:
        logger.error(f"✗ {e}")
        return 1


def print_usage() -> None:
    print("usage: imagesync {" + ",".join(COMMANDS) + "} [options]", file=sys.stderr)
    print("Run 'imagesync <command> --help' for command options.", file=sys.stderr)


def main_dispatch(argv: Optional[list[str]] = None):
    """Main entry point with subcommand routing."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help"):
        print_usage()
        sys.exit(0 if argv else 2)

    command, rest = argv[0], argv[1:]
    if command not in COMMANDS:
        print(f"imagesync: unknown command '{command}'", file=sys.stderr)
        print_usage()
        sys.exit(2)

    sys.exit(run_command(command, rest))


if __name__ == "__main__":
    main_dispatch()
