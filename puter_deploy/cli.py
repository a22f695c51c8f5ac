"""Command line interface for puter_deploy."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

import httpx
from rich.logging import RichHandler

from .cli_progress import DeployProgressDisplay, mask_secret, render_configuration_summary
from .errors import DeployError
from .models import DEFAULT_API_ORIGIN, DEFAULT_CONCURRENCY, DeployConfig, DeployResult
from .orchestrator import DeployOrchestrator

logger = logging.getLogger(__name__)


class CLIError(DeployError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default level is INFO (or LOG_LEVEL from the environment).
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent:
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL")
        level = getattr(logging, (env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _resolve_input(
    cli_value: Optional[str],
    env_name: str,
    action_input: str,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Pick an input value: CLI flag, then ``PUTER_*`` variable, then CI action input.

    Action inputs arrive as ``INPUT_<NAME>`` variables (name upper-cased,
    spaces replaced by underscores).
    """
    environ = os.environ if environ is None else environ
    if cli_value is not None:
        return cli_value
    if environ.get(env_name):
        return environ[env_name]
    return environ.get(f"INPUT_{action_input.replace(' ', '_').upper()}")


def _write_outputs(outputs: Dict[str, str], output_file: Optional[str] = None) -> None:
    """Append ``key=value`` lines to the CI runner's output file, if any."""
    output_file = output_file if output_file is not None else os.getenv("GITHUB_OUTPUT")
    if not output_file:
        return
    try:
        with open(output_file, "a", encoding="utf-8") as fh:
            for key, value in outputs.items():
                fh.write(f"{key}={value}\n")
    except OSError as exc:
        raise CLIError(f"could not write outputs to {output_file}: {exc}") from exc


def _build_config(args: argparse.Namespace) -> DeployConfig:
    return DeployConfig.from_inputs(
        subdomain=_resolve_input(args.subdomain, "PUTER_SUBDOMAIN", "subdomain"),
        remote_path=_resolve_input(args.puter_path, "PUTER_PATH", "puter_path"),
        token=_resolve_input(args.token, "PUTER_TOKEN", "puter_token"),
        source_path=_resolve_input(args.source, "PUTER_SOURCE_PATH", "source_path"),
        include_hidden=(
            True if args.include_hidden
            else _resolve_input(None, "PUTER_INCLUDE_HIDDEN", "include_hidden")
        ),
        concurrency=_resolve_input(
            str(args.concurrency) if args.concurrency is not None else None,
            "PUTER_CONCURRENCY",
            "concurrency",
        ),
        api_origin=_resolve_input(args.api_origin, "PUTER_API_ORIGIN", "api_origin"),
        workspace=os.getenv("GITHUB_WORKSPACE"),
        timeout=args.timeout,
    )


async def _run_deploy(config: DeployConfig, display: Optional[DeployProgressDisplay]) -> DeployResult:
    async with DeployOrchestrator(config) as deployer:
        if display is not None:
            deployer.on("phase_start", display.on_phase_start)
            deployer.on("discovered", display.on_discovered)
            deployer.on("progress", display.on_progress)
            deployer.on("finish", display.on_finish)
        try:
            return await deployer.deploy()
        except BaseException as exc:
            if display is not None:
                display.on_error(exc)
            raise


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="puter-deploy",
        description="Deploy a local folder to Puter and bind a subdomain to it.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Source file or folder (default from PUTER_SOURCE_PATH or '.')",
    )
    parser.add_argument("-s", "--subdomain", default=None, help="Subdomain to bind (PUTER_SUBDOMAIN)")
    parser.add_argument(
        "-p",
        "--puter-path",
        default=None,
        help="Remote directory to deploy into, e.g. /me/sites/blog (PUTER_PATH)",
    )
    parser.add_argument("-t", "--token", default=None, help="Puter auth token (PUTER_TOKEN)")
    parser.add_argument(
        "-a",
        "--include-hidden",
        action="store_true",
        help="Upload dot-files and dot-directories too",
    )
    parser.add_argument(
        "-j",
        "--concurrency",
        type=int,
        default=None,
        help=f"Parallel uploads (default {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--api-origin",
        default=None,
        help=f"Puter API origin (default from PUTER_API_ORIGIN or {DEFAULT_API_ORIGIN})",
    )
    parser.add_argument("--timeout", type=float, default=60.0, help="HTTP request timeout in seconds")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress display")
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument("--version", action="version", version="puter-deploy 0.1.0")
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    try:
        config = _build_config(args)
    except DeployError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    show_progress = not (args.no_progress or args.silent)
    if show_progress:
        render_configuration_summary(
            {
                "Source": str(config.source_path),
                "Puter Path": config.remote_path,
                "Subdomain": config.subdomain,
                "Token": mask_secret(config.token),
                "Include Hidden": "yes" if config.include_hidden else "no",
                "Concurrency": config.concurrency,
                "API": config.api_origin,
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    display = DeployProgressDisplay() if show_progress else None
    try:
        result = asyncio.run(_run_deploy(config, display))
        _write_outputs(result.outputs)
    except (DeployError, httpx.HTTPError, OSError) as exc:
        logger.debug("Deploy failed", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130

    if not show_progress and not args.silent:
        print(result.deployment_url)
    return 0


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
