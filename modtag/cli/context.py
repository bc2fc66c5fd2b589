from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import typer

from modtag.core.config import Config, load_config_or_default
from modtag.core.errors import ErrorCode
from modtag.core.result import Err
from modtag.output.console import ConsoleProtocol, RichConsole

REPO_ROOT_ENV = "MODTAG_REPO_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    config: Config
    console: ConsoleProtocol
    env: Mapping[str, str]


def detect_repo_root(env: Mapping[str, str]) -> Path:
    """--repo-root (via env), then the Actions checkout, then the current directory."""
    for key in (REPO_ROOT_ENV, "GITHUB_WORKSPACE"):
        value = env.get(key)
        if value:
            return Path(value).expanduser().resolve()
    return Path.cwd().resolve()


def build_context() -> CLIContext:
    env = dict(os.environ)
    repo_root = detect_repo_root(env)
    if not repo_root.is_dir():
        typer.echo(f"error: repository root not found: {repo_root}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config_result = load_config_or_default(repo_root)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        repo_root=repo_root,
        config=config_result.value,
        console=RichConsole(),
        env=env,
    )
