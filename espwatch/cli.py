"""
espwatch CLI
=============

Click-based command-line interface for espwatch.

Commands:
    espwatch scan -f PCAP_FILE     Report vendor devices seen in a capture
    espwatch prefixes              List the embedded vendor prefixes

Common options:
    --config PATH       espwatch configuration file (TOML)
    --quiet             Suppress console output and informational logs

Exit status is 0 on success and 1 when the prefix table is malformed,
the capture cannot be read, or the configuration file is missing.

References:
    - Click Documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from shared.config import WatchConfig
from shared.console import WatchConsole
from shared.logger import WatchLogger, configure_logging

from espwatch.core.exceptions import CaptureOpenError, PrefixTableError

logger = WatchLogger("espwatch.cli")


# ---------------------------------------------------------------------------
# CLI Group
# ---------------------------------------------------------------------------


@click.group(
    name="espwatch",
    help=(
        "ESPWATCH - Vendor device detector for 802.11 captures\n\n"
        "Reads a previously captured wireless trace and reports every "
        "unique device whose MAC address carries a known vendor prefix."
    ),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to espwatch configuration file (TOML).",
)
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress console output and informational logs.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], quiet: bool) -> None:
    """espwatch - main CLI entry point."""
    ctx.ensure_object(dict)

    try:
        config = WatchConfig.load(config_path) if config_path else WatchConfig()
    except FileNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    settings = config.global_settings
    configure_logging(
        log_level="WARNING" if quiet else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )
    logger.debug("Configuration loaded", path=config_path, **config.to_dict())

    ctx.obj["config"] = config
    ctx.obj["console"] = WatchConsole(quiet=quiet, color=settings.color)
    ctx.obj["quiet"] = quiet


# ---------------------------------------------------------------------------
# Scan Command
# ---------------------------------------------------------------------------


@cli.command(
    name="scan",
    help=(
        "Scan a capture file for vendor devices.\n\n"
        "Reads a PCAP or PCAPNG file of 802.11 frames, tests every MAC "
        "header address against the vendor prefix table, and reports the "
        "unique matching devices with the frame each was last seen in."
    ),
)
@click.option(
    "--file", "-f",
    "pcap_file",
    required=True,
    type=str,
    help="Capture file to read from.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.pass_context
def scan_capture(ctx: click.Context, pcap_file: str, verbose: bool) -> None:
    """Scan a capture trace and report matching devices."""
    config = ctx.obj["config"]
    console = ctx.obj["console"]

    if verbose:
        settings = config.global_settings
        configure_logging(
            log_level="DEBUG",
            log_file=settings.log_file,
            json_logs=settings.log_json,
        )

    from espwatch.core.engine import EspwatchEngine

    engine = EspwatchEngine(config=config, console=console)
    try:
        engine.scan_capture(pcap_file)
    except PrefixTableError as exc:
        logger.critical("Failed to load vendor prefixes", error=str(exc))
        console.error(f"Malformed vendor prefix table: {exc}")
        sys.exit(1)
    except CaptureOpenError as exc:
        logger.error("Failed to read input file", filename=pcap_file, error=str(exc))
        console.error(str(exc))
        sys.exit(1)


# ---------------------------------------------------------------------------
# Prefix Listing Command
# ---------------------------------------------------------------------------


@cli.command(
    name="prefixes",
    help="List the embedded vendor prefix table.",
)
@click.pass_context
def list_prefixes(ctx: click.Context) -> None:
    """Print every vendor prefix the scanner matches against."""
    from espwatch.core.engine import EspwatchEngine

    engine = EspwatchEngine(config=ctx.obj["config"], console=ctx.obj["console"])
    try:
        engine.list_prefixes()
    except PrefixTableError as exc:
        logger.critical("Failed to load vendor prefixes", error=str(exc))
        ctx.obj["console"].error(f"Malformed vendor prefix table: {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the espwatch CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
