# type: ignore
import os

from invoke import task


@task
def venv(ctx):
    """Initialize development environment with uv."""
    print("Initializing development environment with uv...")
    ctx.run("uv sync --all-extras")
    print("Development environment initialization complete!")


@task
def lint(ctx):
    """
    Static analysis: ruff for style and imports, mypy for types.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=src --cov-report=term-missing", pty=True)


@task
def session(ctx, catalog=None):
    """Start an interactive control session."""
    option = f" --catalog {catalog}" if catalog else ""
    ctx.run(f"accessihome session{option}", pty=True)


@task
def build_package(ctx):
    """
    Build package using uv.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")


@task
def release(ctx):
    """Run CI, build package, and publish to PyPI using uv."""
    token = os.getenv("PYPI_TOKEN")
    if not token:
        raise ValueError("PYPI_TOKEN environment variable is not set")

    ctx.run("invoke lint test")
    ctx.run("invoke build-package")
    ctx.run(f"uv publish --token {token}")
