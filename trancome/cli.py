"""Command-line interface for managing the configuration, databases and users."""

from __future__ import annotations

import os
import secrets
import sqlite3
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import click

from .config import Config, load, write_config
from .database import DatabaseError, DatabaseManager, with_database
from .paths import expand_path

_SUCCESS_COLOUR = (0x04, 0xB5, 0x75)
_DEFAULT_MIGRATIONS = Path(__file__).parent / "migrations" / "shared"
_INSERT_USER = "INSERT INTO users (id, name, email) VALUES (?, ?, ?)"

_uuid_lock = threading.Lock()
_last_v7_stamp = 0


def uuid7() -> uuid.UUID:
    """Return a time-ordered version 7 UUID.

    The first 48 bits hold the Unix time in milliseconds and the next 12 bits
    a sub-millisecond fraction that is kept strictly increasing between calls.
    """
    global _last_v7_stamp
    with _uuid_lock:
        millis, sub = divmod(time.time_ns(), 1_000_000)
        stamp = (millis << 12) | (sub * 4096 // 1_000_000)
        if stamp <= _last_v7_stamp:
            stamp = _last_v7_stamp + 1
        _last_v7_stamp = stamp

    millis, sequence = stamp >> 12, stamp & 0xFFF
    tail = bytearray(secrets.token_bytes(8))
    tail[0] = (tail[0] & 0x3F) | 0x80
    raw = (
        (millis & 0xFFFF_FFFF_FFFF).to_bytes(6, "big")
        + ((0x7 << 12) | sequence).to_bytes(2, "big")
        + bytes(tail)
    )
    return uuid.UUID(bytes=raw)


@dataclass
class _State:
    config: Config
    manager: DatabaseManager


@contextmanager
def _database_errors() -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        raise click.ClickException(str(exc)) from exc


def _success(message: str) -> str:
    return click.style(message, fg=_SUCCESS_COLOUR, bold=True)


def _shared_db_path(config: Config, message: str) -> Path:
    if not config.shared_db:
        raise click.ClickException(message)
    return Path(config.database_dir) / config.shared_db


def _user_db_dir(config: Config) -> Path:
    return Path(config.database_dir) / config.user_db_dir


@click.group(
    invoke_without_command=True,
    help=(
        "Tranco is a service that provides financial control and management "
        "tools for individuals.\n\nIt offers features such as expense tracking, "
        "budget management, and financial insights to help users make informed "
        "decisions about their finances."
    ),
)
@click.option(
    "--migrations-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="TRANCOME_MIGRATIONS_DIR",
    default=None,
    help="Directory holding the shared database migrations.",
)
@click.pass_context
def _cli(ctx: click.Context, migrations_dir: Path | None) -> None:
    if migrations_dir is None and _DEFAULT_MIGRATIONS.is_dir():
        migrations_dir = _DEFAULT_MIGRATIONS
    ctx.obj = _State(config=load(None), manager=DatabaseManager(migrations_dir))
    if ctx.invoked_subcommand is None:
        click.echo("Welcome to Tranco!")


@_cli.command(
    "init",
    short_help="Set up the initial configuration for the application",
    help=(
        "The init command initializes the application by setting up the "
        "necessary configuration.\n\nSet username and other required parameters "
        "to get started with the application."
    ),
)
@click.option("-n", "--name", required=True, help="Name for the root user (required)")
@click.option("-e", "--email", default="", help="Email address for the root user (optional)")
@click.pass_obj
def _init(state: _State, name: str, email: str) -> None:
    config = state.config
    shared_path = _shared_db_path(config, "Shared database path is not configured.")

    with _database_errors():
        state.manager.initialize_database(config)

        user_id = uuid7()
        with with_database(state.manager, shared_path) as connection:
            try:
                cursor = connection.execute(_INSERT_USER, (str(user_id), name, email))
            except sqlite3.Error as exc:
                raise click.ClickException(f"Error inserting user: {exc}") from exc

            click.echo(f"User '{name}' created with ID {cursor.lastrowid}")
            click.echo(_success("Application initialized successfully."))

            state.manager.create_user_database(_user_db_dir(config), str(user_id), name)


@_cli.group("user", help="The user command allows you to manage users in the application.")
def _user() -> None:
    """Manage users in the application."""


@_user.command("add", help="Add a new user to the database with a unique ID and name.")
@click.option("-n", "--name", required=True, help="Name of the user to add")
@click.option("-e", "--email", default="", help="Email of the user to add")
@click.pass_obj
def _add_user(state: _State, name: str, email: str) -> None:
    config = state.config
    shared_path = _shared_db_path(config, "shared database path is not configured")

    with _database_errors():
        with with_database(state.manager, shared_path) as connection:
            user_id = uuid7()
            try:
                connection.execute(_INSERT_USER, (str(user_id), name, email or None))
            except sqlite3.Error as exc:
                raise click.ClickException(
                    f"failed to insert user into database: {exc}"
                ) from exc

            state.manager.create_user_database(_user_db_dir(config), str(user_id), name)

            click.echo(_success(f"User '{name}' created successfully with ID {user_id}"))


@_cli.group("config", help="Inspect and change the application configuration.")
def _config() -> None:
    """Inspect and change the application configuration."""


@_config.command("show", help="Print the current configuration.")
@click.pass_obj
def _show(state: _State) -> None:
    config = state.config
    click.echo("Current Configuration:")
    click.echo(f"  Database Directory: {config.database_dir}")
    click.echo(f"  Shared Database: {config.shared_db}")
    click.echo(f"  User Database Directory: {config.user_db_dir}")
    click.echo(f"  Config File: {config.config_file}")


@_config.command("set-dir", help="Set the directory that holds the databases.")
@click.argument("directory")
@click.pass_obj
def _set_dir(state: _State, directory: str) -> None:
    try:
        directory = expand_path(directory)
    except OSError:
        pass

    absolute = os.path.abspath(directory)

    config = state.config
    if not config.config_file:
        click.echo("Error writing configuration: no configuration file in use")
        return

    values = config.to_dict()
    values["database_dir"] = absolute
    try:
        write_config(config.config_file, values)
    except OSError as exc:
        click.echo(f"Error writing configuration: {exc}")
        return

    click.echo(f"Database directory set to: {absolute}")
    click.echo("Run 'myapp init' to initialize the new directory.")


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return its exit status."""
    try:
        _cli.main(args=argv, prog_name="trancome", standalone_mode=False)
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except DatabaseError as exc:
        click.echo(f"Error: {exc}", err=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())