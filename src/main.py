# src/main.py — v1
"""CLI entry point: process, url, ask, quota commands.

Usage:
    accessibilityhub process <file> [--user ID]
    accessibilityhub url <url> [--user ID]
    accessibilityhub ask <image> <question>
    accessibilityhub quota <user_id>
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable

from accessibilityhub.version import __version__

if TYPE_CHECKING:
    from accessibilityhub.config.settings import Settings
    from accessibilityhub.core.models import Notification, SessionSnapshot, UserIdentity
    from accessibilityhub.processing.orchestrator import PreviewController

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from accessibilityhub.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="accessibilityhub",
        description=f"AccessibilityHub v{__version__}: accessible transcripts, captions and summaries",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- process ---
    p_process = subparsers.add_parser(
        "process", help="Process a local audio, image or PDF file",
    )
    p_process.add_argument("file", type=Path, help="Path to the file")
    p_process.add_argument(
        "--user", default=None,
        help="User id charged for quota (default: signed-in session user)",
    )
    p_process.set_defaults(func=_cmd_process)

    # --- url ---
    p_url = subparsers.add_parser(
        "url", help="Fetch and process remote content",
    )
    p_url.add_argument("url", help="http(s) URL to fetch")
    p_url.add_argument("--user", default=None, help="User id charged for quota")
    p_url.set_defaults(func=_cmd_url)

    # --- ask ---
    p_ask = subparsers.add_parser(
        "ask", help="Ask a question about an image",
    )
    p_ask.add_argument("file", type=Path, help="Path to the image")
    p_ask.add_argument("question", help="Question to answer")
    p_ask.set_defaults(func=_cmd_ask)

    # --- quota ---
    p_quota = subparsers.add_parser(
        "quota", help="Show remaining processing quota",
    )
    p_quota.add_argument("user_id", help="User id")
    p_quota.set_defaults(func=_cmd_quota)

    return parser


async def _cmd_process(args: argparse.Namespace, settings: Settings) -> int:
    """Process a single local file."""
    from accessibilityhub.core.models import ContentUnit

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    content = ContentUnit.from_path(file_path)
    logger.info("Processing %s (%s)", content.name, content.media_type)
    return await _run_session(
        settings, lambda controller: controller.process_file(content, _user(args.user))
    )


async def _cmd_url(args: argparse.Namespace, settings: Settings) -> int:
    """Fetch a URL and process its body."""
    logger.info("Processing %s", args.url)
    return await _run_session(
        settings, lambda controller: controller.process_url(args.url, _user(args.user))
    )


async def _cmd_ask(args: argparse.Namespace, settings: Settings) -> int:
    """Answer a question about an image."""
    from accessibilityhub.api.facade import build_controller
    from accessibilityhub.core.errors import AccessibilityHubError
    from accessibilityhub.core.models import ContentUnit

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    controller = build_controller(settings)
    try:
        answer = await controller.answer_question(ContentUnit.from_path(file_path), args.question)
    except AccessibilityHubError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        await controller.close()
    print(answer)
    return 0


async def _cmd_quota(args: argparse.Namespace, settings: Settings) -> int:
    """Display the remaining quota for a user."""
    from accessibilityhub.quota.gate import QuotaGate
    from accessibilityhub.store.store_factory import create_data_store

    store = create_data_store(settings)
    if store is None:
        logger.error("No data store configured (set DATA_STORE_URL)")
        return 1

    try:
        quota = await QuotaGate(store).remaining(args.user_id)
    finally:
        await store.close()
    if quota is None:
        print(f"No quota record for {args.user_id}")
        return 1

    print(f"\nQuota for {args.user_id}:")
    print(f"  Audio minutes: {quota.audio_minutes}")
    print(f"  Images:        {quota.image_count}")
    print(f"  PDF pages:     {quota.pdf_pages}")
    return 0


async def _run_session(
    settings: Settings,
    start: Callable[[PreviewController], Awaitable[SessionSnapshot]],
) -> int:
    """Build a controller, run one session, print the outcome."""
    from accessibilityhub.api.facade import build_controller
    from accessibilityhub.core.models import ProcessingStatus

    controller = build_controller(settings, notifier=_print_notification)
    try:
        snapshot = await start(controller)
        _print_result_summary(snapshot)
    finally:
        await controller.close()
    return 0 if snapshot.status == ProcessingStatus.COMPLETED else 1


def _user(user_id: str | None) -> UserIdentity | None:
    if user_id is None:
        return None
    from accessibilityhub.core.models import UserIdentity
    return UserIdentity(id=user_id)


def _print_notification(notification: Notification) -> None:
    print(f"[{notification.title}] {notification.description}", file=sys.stderr)


def _print_result_summary(snapshot: SessionSnapshot) -> None:
    """Print a human-readable summary of a SessionSnapshot."""
    preview = snapshot.preview
    print(f"\nSession {snapshot.session_id}: {snapshot.status.value}")
    if preview.error:
        print(f"  Error:        {preview.error}")
        return
    print(f"  Content type: {preview.content_type}")
    if preview.audio_url:
        print(f"  Audio:        {preview.audio_url}")
    accessible = preview.accessible[:500]
    if len(preview.accessible) > 500:
        accessible += "..."
    print(f"\n{accessible}\n")
    print(preview.analysis)


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from accessibilityhub.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
