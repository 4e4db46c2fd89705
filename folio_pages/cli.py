"""Cyclopts CLI entrypoint for building and previewing folio sites.

The ``folio`` console script defined here renders a content tree of Markdown
files into a static site, serves a preview build locally, and removes the
generated output. Typical usage involves running ``folio build`` in CI to
publish the site and ``folio serve`` while writing.

Examples
--------
Build the site described by ``config.yaml`` in the current directory:

>>> from folio_pages.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory mounted under ``/blog``:

>>> from folio_pages.cli import app
>>> app.run(
...     ["build", "--output-dir", "dist", "--base-path", "/blog"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import shutil
import sys
import tempfile
import typing as typ
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import SiteConfigError, load_site_config
from .generator import SiteBuilder
from .server import make_server, site_url

if typ.TYPE_CHECKING:
    from .generator.models import BuildResult

DEFAULT_CONFIG = Path("config.yaml")
DEFAULT_PORT = 8080
DISTRIBUTION_NAME = "folio-pages"


def _package_version() -> str:
    """Return the installed distribution version shown by ``folio --version``."""
    try:
        return distribution_version(DISTRIBUTION_NAME)
    except PackageNotFoundError:  # pragma: no cover - uninstalled source tree
        return "0+unknown"


app = App(
    name="folio",
    version=_package_version,
    config=cyclopts.config.Env("FOLIO_", command=False),  # type: ignore[unknown-argument]
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _report(result: BuildResult) -> None:
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)


@app.command(help="Render every content file into the output directory.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="FOLIO_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="FOLIO_OUTPUT_DIR"),
    ] = None,
    base_path: typ.Annotated[
        str | None,
        Parameter(help="Override the mount prefix", env_var="FOLIO_BASE_PATH"),
    ] = None,
) -> None:
    """Build the site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``config.yaml`` file (overridable via ``FOLIO_CONFIG``).
    output_dir : Path or None, optional
        Write the site here instead of the configured ``build.output_dir``.
    base_path : str or None, optional
        Mount the site under this prefix instead of ``website.basePath``.

    Returns
    -------
    None
        Writes the site and prints every generated path.
    """
    site_config = (
        load_site_config(config).with_output_dir(output_dir).with_base_path(base_path)
    )
    _report(SiteBuilder(site_config).run())


@app.command(help="Build into a temporary directory and serve it locally.")
def serve(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="FOLIO_CONFIG")
    ] = DEFAULT_CONFIG,
    port: typ.Annotated[
        int, Parameter(help="Port to listen on", env_var="FOLIO_PORT")
    ] = DEFAULT_PORT,
) -> None:
    """Serve a preview build mounted at ``website.devPath`` until interrupted."""
    site_config = load_site_config(config)
    dev_path = site_config.website.dev_path
    tmp_dir = Path(tempfile.mkdtemp(prefix="folio-serve-"))
    print(f"Using temporary directory for build: {tmp_dir}")
    try:
        preview = site_config.with_base_path(dev_path).with_output_dir(tmp_dir)
        result = SiteBuilder(preview).run()
        for warning in result.warnings:
            print(f"warning: {warning}", file=sys.stderr)
        with make_server(tmp_dir, port=port, base_path=dev_path) as server:
            print(f"Serving {site_url(port, dev_path)} (press Ctrl+C to stop)")
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                print("\nServer stopped.")
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)


@app.command(help="Remove the generated output directory.")
def clean(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="FOLIO_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Delete ``build.output_dir`` after checking it lies inside the project.

    Raises
    ------
    SiteConfigError
        If the output directory is the project root or lies outside it.
    """
    site_config = load_site_config(config)
    project_root = config.resolve().parent
    output_dir = site_config.output_dir.resolve()
    if output_dir == project_root or not output_dir.is_relative_to(project_root):
        msg = f"Refusing to remove '{output_dir}': not inside '{project_root}'."
        raise SiteConfigError(msg)
    if not output_dir.exists():
        print(f"nothing to clean at {_format_path(output_dir)}")
        return
    shutil.rmtree(output_dir)
    print(f"removed {_format_path(output_dir)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``folio`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
