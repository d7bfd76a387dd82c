"""Invoke tasks for local development of wpassets.

Every task shells out to ``uv`` so the virtual environment, test run, and
lint configuration match what CI uses.
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from invoke import Collection, Context, task


def _uv(ctx: Context, args: Sequence[str], *, dry_run: bool = False) -> None:
    """Run ``uv`` with ``args``, or only print the command when ``dry_run`` is set."""
    command = shlex.join(("uv", *args))
    if dry_run:
        print(f"[dry-run] {command}")
        return
    ctx.run(command, echo=True, pty=True)


@task
def sync(ctx: Context) -> None:
    """Install the project with test and development extras."""
    _uv(ctx, ["sync", "--extra", "dev"])


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "path": "Path or module to test (defaults to tests/).",
        "options": "Additional CLI flags forwarded verbatim to pytest.",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests", options: str = "") -> None:
    """Run the pytest suite."""
    args: list[str] = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    if options:
        args.extend(shlex.split(options))
    args.append(path)
    _uv(ctx, args)


@task(help={"fix": "Apply Ruff auto-fixes."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _uv(ctx, ["run", "ruff", "format", "--check", "src", "tests"])
    args = ["run", "ruff", "check", "src", "tests"]
    if fix:
        args.append("--fix")
    _uv(ctx, args)


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _uv(ctx, ["run", "mypy", "src"])


@task(help={"port": "Port for the development server.", "dry_run": "Print the command only."})
def serve(ctx: Context, port: int = 8000, dry_run: bool = False) -> None:
    """Start the redirect app with uvicorn for manual testing."""
    _uv(
        ctx,
        [
            "run",
            "uvicorn",
            "--factory",
            "wpassets.redirect.middleware:create_app",
            "--port",
            str(port),
            "--reload",
        ],
        dry_run=dry_run,
    )


@task
def build(ctx: Context) -> None:
    """Build sdist and wheel into dist/."""
    _uv(ctx, ["build"])


@task
def ci(ctx: Context) -> None:
    """Run lint, type checks, and tests in CI order."""
    ctx.invoke(lint)
    ctx.invoke(mypy)
    ctx.invoke(tests)


namespace = Collection(sync, tests, lint, mypy, serve, build, ci)
