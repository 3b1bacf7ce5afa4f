"""purl CLI: fetch one URL privately and print it.

Usage:
    purl wttr.in
    purl -H https://example.com/?utm_source=news
    purl -u http://neverssl.com
    purl -p socks5h://127.0.0.1:9050 example.com

Exit codes:
    0  success
    1  plain HTTP blocked (pass --unsecured to allow it)
    2  invalid URL
    3  transport failure (client setup or request)
    4  response body is not valid text
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import typer

from purl import __version__
from purl.errors import PurlError
from purl.fetcher import check_transport, fetch_url
from purl.sanitizer import sanitize_url

app = typer.Typer(
    name="purl",
    help="Private URL fetcher.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"purl {__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------
@app.command()
def fetch(
    url: str = typer.Argument(..., help="The URL to fetch (e.g. wttr.in or https://example.com)."),
    unsecured: bool = typer.Option(False, "--unsecured", "-u", help="Allow insecure HTTP URLs."),
    proxy: Optional[str] = typer.Option(
        None, "--proxy", "-p", help="Optional proxy (e.g. socks5h://127.0.0.1:9050)."
    ),
    show_headers: bool = typer.Option(False, "--show-headers", "-H", help="Show response headers."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Fetch URL over HTTPS (unless --unsecured) and print the body."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        clean_url = sanitize_url(url)

        if check_transport(clean_url, unsecured).insecure:
            typer.echo(
                "⚠️ Warning: Insecure HTTP request. Your traffic may be visible to attackers.",
                err=True,
            )

        result = fetch_url(clean_url, allow_insecure=unsecured, proxy=proxy)
    except PurlError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=exc.exit_code)

    if show_headers:
        for name, value in result.headers:
            typer.echo(f"{name}: {value}")
        typer.echo("")

    typer.echo(result.text)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
