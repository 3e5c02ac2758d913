"""Command-line interface for webdav_backup."""

from __future__ import annotations

import base64
import logging
import sys
from pathlib import Path
from urllib.parse import unquote, urlparse

import click
from dotenv import load_dotenv

from webdav_backup import client
from webdav_backup.models import Failure, OperationResult
from webdav_backup.paths import DEFAULT_SERVER_URL, build_url, normalize_path


def _exit_on_failure(result: OperationResult) -> None:
    """Print a failed result to stderr and exit with status 1."""
    if isinstance(result, Failure):
        click.echo(click.style(f"Error: {result}", fg="red"), err=True)
        sys.exit(1)


def _server_options(func):  # type: ignore[no-untyped-def]
    """Shared --url/--username/--password options, read from the environment."""
    func = click.option(
        "--password", "-p", envvar="WEBDAV_PASSWORD", default="", help="WebDAV password"
    )(func)
    func = click.option(
        "--username", "-u", envvar="WEBDAV_USERNAME", default="", help="WebDAV user name"
    )(func)
    func = click.option(
        "--url",
        envvar="WEBDAV_URL",
        default=DEFAULT_SERVER_URL,
        help=f"WebDAV server URL (default: {DEFAULT_SERVER_URL})",
    )(func)
    return func


@click.group()
@click.version_option(package_name="webdav-backup")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """WebDAV Backup CLI - Sync backup files with a WebDAV server."""
    load_dotenv()
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", "-n", default=None, help="Remote file name (default: local name)")
@_server_options
def upload(file: Path, name: str | None, url: str, username: str, password: str) -> None:
    """Upload a file to the backup folder.

    Examples:

        webdav-backup upload backup.zip

        webdav-backup upload backup.zip --name 2024/backup.zip
    """
    payload = base64.b64encode(file.read_bytes()).decode("ascii")
    remote_name = name or file.name
    result = client.upload(url, username, password, remote_name, payload)
    _exit_on_failure(result)
    click.echo(click.style("✓ ", fg="green") + f"{file.name} -> {remote_name}")


@main.command()
@click.argument("name")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Local file to write (default: remote file name)",
)
@_server_options
def download(name: str, output: Path | None, url: str, username: str, password: str) -> None:
    """Download a file from the backup folder."""
    result = client.download(url, username, password, name)
    _exit_on_failure(result)
    target = output or Path(name.rstrip("/").rsplit("/", 1)[-1])
    target.write_bytes(base64.b64decode(result.payload["base64"]))  # type: ignore[union-attr,index]
    click.echo(click.style("✓ ", fg="green") + f"{name} -> {target}")


@main.command("ls")
@click.argument("path", default="")
@_server_options
def list_folder(path: str, url: str, username: str, password: str) -> None:
    """List a folder (default: the backup folder itself).

    Examples:

        webdav-backup ls

        webdav-backup ls 2024
    """
    result = client.list_resources(url, username, password, path)
    _exit_on_failure(result)
    folder = _folder_path(url, path)
    items = [
        item
        for item in result.payload["items"]  # type: ignore[union-attr,index]
        if item["path"].rstrip("/") != folder
    ]
    if not items:
        click.echo(f"(empty folder: {path or '/'})")
        return
    for item in items:
        if item["isDirectory"]:
            click.echo(click.style(f"  {item['name']}/", fg="blue"))
        else:
            click.echo(f"  {item['name']}  ({_format_size(item['size'])})")


@main.command()
@click.argument("name")
@_server_options
def exists(name: str, url: str, username: str, password: str) -> None:
    """Check if a file exists; exits with status 2 when it does not."""
    result = client.exists(url, username, password, name)
    _exit_on_failure(result)
    if result.payload["exists"]:  # type: ignore[index]
        click.echo(f"{name}: exists")
    else:
        click.echo(f"{name}: not found")
        sys.exit(2)


@main.command("rm")
@click.argument("name")
@_server_options
def remove(name: str, url: str, username: str, password: str) -> None:
    """Delete a file from the backup folder."""
    result = client.delete(url, username, password, name)
    _exit_on_failure(result)
    click.echo(click.style(f"Deleted: {name}", fg="green"))


def _folder_path(url: str, path: str) -> str:
    """Server-side path of a listed folder, as reported in PROPFIND hrefs."""
    normalized = normalize_path(path).rstrip("/") + "/"
    return unquote(urlparse(build_url(url, normalized)).path).rstrip("/")


def _format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    if size_bytes < 0:
        return "unknown size"
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}" if unit != "B" else f"{size_bytes} {unit}"
        size_bytes /= 1024  # type: ignore[assignment]
    return f"{size_bytes:.1f} TB"


if __name__ == "__main__":
    main()
