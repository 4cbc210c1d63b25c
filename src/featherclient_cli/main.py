"""CLI entry point for the featherclient tool.

This module is the composition root of the application.  It is the only
place that picks concrete implementations (JsonFileTokenStore, the
environment-backed ClientConfig).  All other layers receive their
collaborators by injection.
"""

import json
import logging
import sys
from typing import Any

# Ensure UTF-8 output on Windows where stdout may default to cp1252.
# reconfigure() is a no-op when encoding is already utf-8.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import typer
from rich.console import Console
from rich.logging import RichHandler

from featherclient.auth.credentials import JsonFileTokenStore
from featherclient.config import ClientConfig, token_path_from_env
from featherclient.core.exceptions import ErrorKind, FeatherError
from featherclient.core.models import FileUpload
from featherclient.rest.client import RestClient

app = typer.Typer(help="Talk to a Feathers REST backend.")
auth_app = typer.Typer(help="Manage authentication.")
service_app = typer.Typer(help="Call service methods.")

app.add_typer(auth_app, name="auth")
app.add_typer(service_app, name="service")

console = Console(legacy_windows=False)

_state: dict[str, Any] = {"base_url": None, "debug": False}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_client() -> RestClient:
    """Build a RestClient from the environment and global options.

    Returns:
        A :class:`~featherclient.rest.client.RestClient` backed by a
        :class:`~featherclient.auth.credentials.JsonFileTokenStore`.
    """
    try:
        config = ClientConfig.from_env(
            base_url=_state["base_url"], debug=_state["debug"] or None
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return RestClient.from_config(config)


def _get_store() -> JsonFileTokenStore:
    """Return the token store used by :func:`_get_client`."""
    return JsonFileTokenStore(token_path_from_env())


def _fail(error: FeatherError) -> None:
    """Print *error* and exit with status 1."""
    console.print(f"[red]✗ {error.kind.value}:[/red] {error.message}")
    raise typer.Exit(1)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _parse_data(data: str) -> dict:
    """Parse the ``--data`` option as a JSON object."""
    try:
        value = json.loads(data)
    except json.JSONDecodeError as e:
        console.print(f"[red]--data is not valid JSON:[/red] {e}")
        raise typer.Exit(1)
    if not isinstance(value, dict):
        console.print("[red]--data must be a JSON object.[/red]")
        raise typer.Exit(1)
    return value


def _parse_query(pairs: list[str]) -> dict[str, str]:
    """Turn ``key=value`` pairs into a query mapping."""
    query: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            console.print(f"[red]Invalid query parameter:[/red] {pair}")
            raise typer.Exit(1)
        query[key] = value
    return query


def _uploads(files: list[str]) -> list[FileUpload]:
    return [FileUpload.from_path(path) for path in files]


@app.callback()
def main(
    base_url: str = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Backend root URL (defaults to FEATHERS_BASE_URL).",
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Log every request and response."
    ),
):
    """Configure options shared by every command."""
    _state["base_url"] = base_url
    _state["debug"] = debug
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True))],
        )


# ---------------------------------------------------------------------------
# auth commands
# ---------------------------------------------------------------------------


@auth_app.command()
def login(
    username: str,
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, help="Account password."
    ),
    strategy: str = typer.Option("local", help="Authentication strategy."),
    field: str = typer.Option(
        "email", "--field", help="Body field carrying the username."
    ),
):
    """Log in and store the access token."""
    client = _get_client()
    try:
        user = client.authenticate(
            username, password, strategy=strategy, username_field=field
        )
    except FeatherError as e:
        _fail(e)
    console.print("[green]✓ Logged in.[/green]")
    _print_json(user)


@auth_app.command()
def status(
    service: str = typer.Option(
        "users", help="Service that rejects anonymous callers."
    ),
):
    """Check whether the stored token is still accepted."""
    client = _get_client()
    if client.token_store.get_access_token(client.pipeline.client_tag) is None:
        console.print("[yellow]No token stored.[/yellow]")
        console.print("Run [bold]featherclient auth login[/bold].")
        raise typer.Exit(1)

    console.print("[dim]Validating token...[/dim]")
    try:
        client.re_authenticate(service)
    except FeatherError as e:
        if e.kind is ErrorKind.JWT_EXPIRED:
            console.print("[red]✗ Token expired or invalid.[/red]")
            console.print("Run [bold]featherclient auth login[/bold] to renew.")
            raise typer.Exit(1)
        _fail(e)
    console.print("[green]✓ Token is valid.[/green]")


@auth_app.command()
def clear():
    """Remove the stored access token."""
    store = _get_store()
    if store.clear_access_token():
        console.print("[green]✓ Token removed.[/green]")
    else:
        console.print("[yellow]No saved token found.[/yellow]")


# ---------------------------------------------------------------------------
# service commands
# ---------------------------------------------------------------------------


@service_app.command()
def find(
    name: str,
    query: list[str] = typer.Option(
        [], "--query", "-q", help="Query parameter as key=value."
    ),
):
    """GET /NAME with optional query parameters."""
    client = _get_client()
    try:
        _print_json(client.find(name, _parse_query(query)))
    except FeatherError as e:
        _fail(e)


@service_app.command()
def get(name: str, object_id: str):
    """GET /NAME/ID."""
    client = _get_client()
    try:
        _print_json(client.get(name, object_id))
    except FeatherError as e:
        _fail(e)


@service_app.command()
def create(
    name: str,
    data: str = typer.Option("{}", "--data", "-d", help="JSON object."),
    file: list[str] = typer.Option(
        [], "--file", "-f", help="File to upload (repeatable)."
    ),
    field: str = typer.Option("file", "--field", help="File form field."),
):
    """POST /NAME, as multipart when files are given."""
    client = _get_client()
    try:
        result = client.create(
            name,
            _parse_data(data),
            contains_file=bool(file),
            file_field_name=field,
            files=_uploads(file),
        )
    except FeatherError as e:
        _fail(e)
    _print_json(result)


@service_app.command()
def update(
    name: str,
    object_id: str,
    data: str = typer.Option("{}", "--data", "-d", help="JSON object."),
    file: list[str] = typer.Option(
        [], "--file", "-f", help="File to upload (repeatable)."
    ),
    field: str = typer.Option("file", "--field", help="File form field."),
):
    """PUT /NAME/ID (PATCH when files are given)."""
    client = _get_client()
    try:
        result = client.update(
            name,
            object_id,
            _parse_data(data),
            contains_file=bool(file),
            file_field_name=field,
            files=_uploads(file),
        )
    except FeatherError as e:
        _fail(e)
    _print_json(result)


@service_app.command()
def patch(
    name: str,
    object_id: str,
    data: str = typer.Option("{}", "--data", "-d", help="JSON object."),
    file: list[str] = typer.Option(
        [], "--file", "-f", help="File to upload (repeatable)."
    ),
    field: str = typer.Option("file", "--field", help="File form field."),
):
    """PATCH /NAME/ID."""
    client = _get_client()
    try:
        result = client.patch(
            name,
            object_id,
            _parse_data(data),
            contains_file=bool(file),
            file_field_name=field,
            files=_uploads(file),
        )
    except FeatherError as e:
        _fail(e)
    _print_json(result)


@service_app.command()
def remove(name: str, object_id: str):
    """DELETE /NAME/ID."""
    client = _get_client()
    try:
        _print_json(client.remove(name, object_id))
    except FeatherError as e:
        _fail(e)
