"""Click CLI for the connection-event decoder.

Entry point registered in ``pyproject.toml`` as ``conn-event-decoder``.

Subcommands::

    conn-event-decoder < events.ndjson        # decode a notification stream
    conn-event-decoder decode PAYLOAD         # decode one raw payload
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Optional

import click
import orjson

from conn_event_decoder import __version__
from conn_event_decoder.classifier import classify
from conn_event_decoder.config import OUTPUT_FORMATS, AppConfig, LogFileConfig, load_config
from conn_event_decoder.directory import DeviceDirectory, load_directory
from conn_event_decoder.filter import EventFilter
from conn_event_decoder.models import MalformedNotification, Notification
from conn_event_decoder.output import StdoutSink
from conn_event_decoder.transform import Transformer

logger = logging.getLogger("conn_event_decoder")

CONFIG_ENV = "CONN_EVENT_DECODER_CONFIG"

# Marks handlers installed by this module so repeated runs replace them.
_HANDLER_TAG = "_conn_event_decoder"


# ── structured JSON log formatter ───────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON to stderr."""

    def format(self, record: logging.LogRecord) -> str:
        obj = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            obj["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(obj).decode()


def _setup_logging(
    level: str,
    log_format: str = "json",
    log_file_config: Optional[LogFileConfig] = None,
) -> None:
    """Configure the root logger with output on stderr + optional rotating file."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    if log_format == "text":
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        )
    else:
        formatter = _JsonFormatter()

    # Always log to stderr; stdout carries the decoded lines
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    # Optionally log to a rotating file
    if log_file_config and log_file_config.enabled:
        from logging.handlers import RotatingFileHandler

        Path(log_file_config.path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=log_file_config.path,
            maxBytes=log_file_config.max_size_bytes,
            backupCount=log_file_config.backup_count,
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)


# ── main CLI group ──────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.option("-i", "--input", "input_stream", type=click.File("rb"), default="-",
              help="NDJSON notification stream (default: stdin).")
@click.option("-c", "--config", "config_path", default=None,
              help="Config file path.")
@click.option("-r", "--directory", "directory_path", default=None,
              help="Device roster JSON used to resolve device names.")
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS),
              default=None, help="Output format (default: line).")
@click.option("--event-name", default=None,
              help="Only decode notifications with this event name.")
@click.option("--log-level", default=None,
              type=click.Choice(["debug", "info", "warn", "error"]),
              help="Log verbosity.")
@click.option("--validate-config", "validate_only", is_flag=True,
              help="Validate config and exit.")
@click.version_option(__version__)
@click.pass_context
def main(
    ctx: click.Context,
    input_stream: IO[bytes],
    config_path: Optional[str],
    directory_path: Optional[str],
    output_format: Optional[str],
    event_name: Optional[str],
    log_level: Optional[str],
    validate_only: bool,
) -> None:
    """Decode device connection-event notifications into readable lines."""
    if ctx.invoked_subcommand is not None:
        return  # defer to subcommand

    cfg_path = config_path or os.environ.get(CONFIG_ENV)

    # --- build overrides ---
    overrides: dict[str, str] = {}
    if event_name:
        overrides["EVENT_NAME"] = event_name
    if directory_path:
        overrides["DEVICE_ROSTER"] = directory_path

    # --- load + validate config ---
    try:
        cfg = load_config(cfg_path, overrides=overrides)
    except Exception as exc:
        click.echo(f"Config error: {exc}", err=True)
        raise SystemExit(1) from exc

    # --- resolve runtime overrides ---
    if event_name:
        cfg.stream.event_name = event_name
    if directory_path:
        cfg.directory.path = directory_path
    if output_format:
        cfg.output.format = output_format
    effective_level = (
        log_level
        or os.environ.get("CONN_EVENT_DECODER_LOG_LEVEL")
        or cfg.logging.level
    )

    _setup_logging(effective_level, cfg.logging.format, cfg.logging.file)

    if validate_only:
        click.echo("Configuration is valid.", err=True)
        raise SystemExit(0)

    # --- device directory ---
    if cfg.directory.path:
        try:
            directory = load_directory(cfg.directory.path)
        except Exception as exc:
            click.echo(f"Directory error: {exc}", err=True)
            raise SystemExit(1) from exc
    else:
        directory = DeviceDirectory()

    logger.info(
        "Starting conn-event-decoder %s (instance=%s, event=%s, format=%s)",
        __version__,
        cfg.instance_id,
        cfg.stream.event_name,
        cfg.output.format,
    )

    _run_pipeline(cfg, directory, input_stream)


# ── pipeline ────────────────────────────────────────────────────────


def _run_pipeline(cfg: AppConfig, directory: DeviceDirectory, stream: IO[bytes]) -> None:
    """Core loop: classify → filter → parse/decode → output."""
    filt = EventFilter(cfg.filter, event_name=cfg.stream.event_name)
    xform = Transformer(
        directory=directory,
        output_format=cfg.output.format,
        instance_id=cfg.instance_id,
    )
    sink = StdoutSink()

    notification_count = 0
    line_count = 0
    try:
        for raw_line in stream:
            result = classify(raw_line, instance_id=cfg.instance_id)

            if result is None:
                continue  # blank line

            if isinstance(result, MalformedNotification):
                logger.warning(
                    "Malformed notification (%s): %s",
                    result.error["code"],
                    result.error["message"],
                )
                data = xform.transform_malformed(result)
                lines = [data] if data is not None else []
            else:
                if filt.apply(result) is None:
                    continue
                notification_count += 1
                lines = xform.transform(result)

            for data in lines:
                sink.write(data)
                line_count += 1
    except BrokenPipeError:
        pass  # consumer went away; already logged by the sink
    except KeyboardInterrupt:
        logger.info("Received interrupt")
    finally:
        sink.close()
        logger.info(
            "Pipeline shut down (processed %d notifications, %d lines)",
            notification_count,
            line_count,
        )


# ── one-shot decode ─────────────────────────────────────────────────


@main.command("decode")
@click.argument("payload")
@click.option("--device-id", default="", help="Device id to print with each line.")
@click.option("-r", "--directory", "directory_path", default=None,
              help="Device roster JSON used to resolve the device name.")
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS),
              default="line", help="Output format.")
def decode_payload(
    payload: str,
    device_id: str,
    directory_path: Optional[str],
    output_format: str,
) -> None:
    """Decode a single raw PAYLOAD such as '1470912225,52,0,0;'."""
    if directory_path:
        try:
            directory = load_directory(directory_path)
        except Exception as exc:
            click.echo(f"Directory error: {exc}", err=True)
            raise SystemExit(1) from exc
    else:
        directory = DeviceDirectory()

    xform = Transformer(directory=directory, output_format=output_format)
    for data in xform.transform(Notification(device_id=device_id, data=payload)):
        click.echo(data.decode("utf-8"), nl=False)
