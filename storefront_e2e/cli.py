# storefront_e2e/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
Convenience commands to view effective config, list/validate gateway profiles
and run scenario suites. Thin wrapper around the profile loader and pytest.
"""

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import click
import pytest

from storefront_e2e.core.profile_loader import find_profile_files, load_profiles
from storefront_e2e.utils.config import get_settings
from storefront_e2e.utils.logger import (
    attach_file_logger,
    bind,
    detach_file_logger,
    get_logger,
    set_log_level,
    unbind,
)


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _resolve_paths(paths: List[str]) -> List[Path]:
    return [Path(p).resolve() for p in paths]


def _collect_profile_files(targets: List[str], profiles_dir: Optional[str], recursive: bool) -> list[Path]:
    paths: list[Path] = []
    for p in _resolve_paths(targets):
        if p.is_dir():
            paths.extend(find_profile_files(p, recursive=True))
        else:
            paths.append(p)
    if profiles_dir:
        paths.extend(find_profile_files(Path(profiles_dir), recursive=recursive))
    return paths


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="storefront-e2e")
def cli(log_level: Optional[str]):
    _ = get_settings()
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars), secrets masked."""
    _echo_json(get_settings().masked())


@cli.command("profiles")
@click.option(
    "--dir", "profiles_dir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    show_default=True,
    help="Directory containing gateway profile YAML files",
)
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_profiles(profiles_dir: str, recursive: bool):
    """List gateway profiles available in a directory."""
    log = get_logger(__name__)
    rows = []
    for fp in find_profile_files(Path(profiles_dir), recursive=recursive):
        try:
            rows.extend((fp, prof) for prof in load_profiles(fp))
        except (ValueError, OSError) as e:
            # `validate` prints the details
            log.debug(f"Skipping {fp}: {e}")

    if not rows:
        click.echo("No profiles found.")
        return

    click.echo(f"Found {len(rows)} profile(s):\n")
    for fp, prof in rows:
        flags = [
            name for name, on in (
                ("add-payment-method", prof.supports_add_payment_method),
                ("token-editor", prof.supports_token_editor),
                ("tokens-api", prof.supports_tokenized_payment_methods_api),
                ("customer-id", prof.supports_customer_id),
            ) if on
        ]
        click.echo(f" - [{prof.id}] {prof.title}  ({', '.join(flags) or 'no extras'})  <- {fp}")


@cli.command("validate")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "profiles_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True), help="Validate all profiles under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_validate(targets: List[str], profiles_dir: Optional[str], recursive: bool):
    """Validate gateway profiles from files or a directory (supports multi-doc YAML)."""
    if not targets and not profiles_dir:
        click.echo("Provide file(s) or --dir to validate.")
        sys.exit(2)

    ok = True
    for fp in _collect_profile_files(list(targets), profiles_dir, recursive):
        try:
            for prof in load_profiles(fp):
                click.echo(f"OK  {fp}  ->  [{prof.id}] {prof.title}")
        except (ValueError, OSError) as e:
            ok = False
            click.echo(f"ERR {fp}  ->  {e}")

    sys.exit(0 if ok else 1)


@cli.command("run", context_settings=dict(ignore_unknown_options=True))
@click.argument("targets", nargs=-1, required=False)
@click.option("--headed/--headless", default=None, help="Override HEADLESS from settings")
@click.option("--browser", "browser_type", type=click.Choice(["chromium", "firefox", "webkit"]), default=None,
              help="Override BROWSER_TYPE from settings")
@click.option("--base-url", type=str, default=None, help="Override BASE_URL from settings")
@click.option("-k", "keyword", type=str, default=None, help="Only run scenarios matching this pytest expression")
def cmd_run(
    targets: List[str],
    headed: Optional[bool],
    browser_type: Optional[str],
    base_url: Optional[str],
    keyword: Optional[str],
):
    """
    Run gateway scenario suites through pytest.

    Examples:
      storefront-e2e run tests/acceptance
      storefront-e2e run tests/acceptance/test_acme.py --headed -k tokenization
    """
    if headed is not None:
        os.environ["HEADLESS"] = "false" if headed else "true"
    if browser_type:
        os.environ["BROWSER_TYPE"] = browser_type
    if base_url:
        os.environ["BASE_URL"] = base_url
    # pick up the overrides above
    get_settings.cache_clear()
    settings = get_settings()
    log = get_logger(__name__)

    args = list(targets) or ["."]
    if keyword:
        args += ["-k", keyword]

    run_id = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    bind(run_id=run_id)
    run_log = attach_file_logger(settings.OUTPUT_DIR / "runs" / f"{run_id}.log")
    log.info(f"Running scenarios against {settings.BASE_URL} ({settings.BROWSER_TYPE.value})")
    try:
        code = int(pytest.main(args))
    finally:
        detach_file_logger(run_log)
        unbind("run_id")
    click.echo(f"Done. exit={code}")
    sys.exit(code)


def main() -> None:
    cli(prog_name="storefront-e2e")


if __name__ == "__main__":
    main()
