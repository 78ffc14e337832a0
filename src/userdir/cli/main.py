"""User Directory CLI — talk to a running user directory service.

Usage:
    userdir login martina@test.it                  # Print a bearer token
    userdir add --first-name Martina --last-name Luciani \\
        --email martina@test.it --phone +393331112233
    userdir update GUID --first-name ... (same options as add)
    userdir users --query mar --order BY_FIRSTNAME --offset 0 --limit 10

The token for protected commands comes from --token or USERDIR_TOKEN.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from userdir import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"
ORDER_CHOICES = ["BY_FIRSTNAME", "BY_FIRSTNAME_DESC", "BY_LASTNAME", "BY_LASTNAME_DESC"]


def _api_url() -> str:
    return os.environ.get("USERDIR_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the user directory service."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _check_envelope(data: dict) -> dict:
    """Exit 1 when the envelope carries a non-200 code."""
    status = data.get("status")
    if status and status.get("code") != 200:
        click.secho(
            f"Error {status.get('code')}: {status.get('message')} "
            f"(trace {status.get('traceId')})",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return data


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _user_body(first_name, last_name, email, phone) -> dict:
    return {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "phoneNumber": phone,
    }


def _user_options(fn):
    for opt in reversed([
        click.option("--first-name", required=True),
        click.option("--last-name", required=True),
        click.option("--email", required=True),
        click.option("--phone", required=True, help="e.g. +393331112233"),
    ]):
        fn = opt(fn)
    return fn


_token_option = click.option(
    "--token", envvar="USERDIR_TOKEN", help="Bearer token (or set USERDIR_TOKEN)"
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="userdir")
def main():
    """User Directory — manage users over the REST API."""


@main.command()
@click.argument("email")
def login(email: str):
    """Log in as EMAIL and print the bearer token."""
    _run(_login_impl(email))


async def _login_impl(email: str):
    async with _client() as c:
        r = await c.post("/auth/login", json={"email": email})
        r.raise_for_status()
        data = _check_envelope(r.json())
        click.echo(data["status"]["message"])


@main.command()
@_user_options
def add(first_name: str, last_name: str, email: str, phone: str):
    """Create a user."""
    _run(_add_impl(_user_body(first_name, last_name, email, phone)))


async def _add_impl(body: dict):
    async with _client() as c:
        r = await c.post("/user/v1/user", json=body)
        r.raise_for_status()
        data = _check_envelope(r.json())
        click.secho(data["status"]["message"], fg="green")


@main.command()
@click.argument("guid")
@_user_options
@_token_option
def update(guid: str, first_name: str, last_name: str, email: str, phone: str,
           token: Optional[str]):
    """Update the user identified by GUID."""
    _run(_update_impl(guid, _user_body(first_name, last_name, email, phone), token))


async def _update_impl(guid: str, body: dict, token: Optional[str]):
    async with _client(token) as c:
        r = await c.put(f"/user/v1/user/{guid}", json=body)
        r.raise_for_status()
        data = _check_envelope(r.json())
        click.secho(data["status"]["message"], fg="green")


@main.command()
@click.option("--query", "-q", default=None, help="Substring of name or email")
@click.option("--order", type=click.Choice(ORDER_CHOICES), default=None)
@click.option("--offset", type=int, default=0, show_default=True)
@click.option("--limit", type=int, default=None)
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
@_token_option
def users(query: Optional[str], order: Optional[str], offset: int,
          limit: Optional[int], as_json: bool, token: Optional[str]):
    """List users."""
    _run(_users_impl(query, order, offset, limit, as_json, token))


async def _users_impl(query, order, offset, limit, as_json, token):
    params: dict = {"offset": offset}
    if query is not None:
        params["query"] = query
    if order:
        params["order"] = order
    if limit is not None:
        params["limit"] = limit

    async with _client(token) as c:
        r = await c.get("/user/v1/user", params=params)
        r.raise_for_status()
        data = _check_envelope(r.json())

    if as_json:
        click.echo(_pretty_json(data))
        return

    _print_table(data.get("users", []), [
        ("ID", "id", 36),
        ("First name", "firstName", 20),
        ("Last name", "lastName", 20),
        ("Email", "email", 30),
        ("Phone", "phoneNumber", 15),
    ])
    click.echo(f"\n{data.get('total', 0)} user(s)")


if __name__ == "__main__":
    main()
