# trancome

A small command-line tool that prepares the storage for personal financial
control. It keeps one shared SQLite database for all users, plus a separate
SQLite database for each user.

## Installation

```
pip install .
```

This installs the `trancome` command. The same interface can be run with
`python -m trancome.cli`.

## Configuration

Settings are read from `~/.trancome.yaml`. Three keys are used:

```yaml
database_dir: /home/you/.trancome/databases
shared_db: shared.db
user_db_dir: users
```

The defaults are the values above, with `database_dir` under your home
directory. When the file can be read, the command prints
`Using config file: <path>`. When it cannot be read, a new
`~/.trancome.yaml` holding the settings in effect is written.

Environment variables named after the keys in upper case (`DATABASE_DIR`,
`SHARED_DB`, `USER_DB_DIR`) override the file. A `database_dir` starting with
`~` is expanded to your home directory.

To see the current settings and the file they came from:

```
trancome config show
```

To move the database directory (the path is expanded and made absolute, then
written to the configuration file):

```
trancome config set-dir ~/finance/databases
```

## Migrations

`trancome init` applies SQL migration files to the shared database. The
package does not ship any migration files, so you point it at a directory of
your own:

```
trancome --migrations-dir ./migrations/shared init --name alice
```

or set `TRANCOME_MIGRATIONS_DIR`. If neither is given, a `migrations/shared`
directory inside the installed package is used when it exists.

Files are run in name order. The part of the name after the first dot must
be `up` for the file to run, e.g. `0001_users.up.sql`; other files are
skipped, subdirectories are ignored, and a file name without a dot is an
error. The shared database needs a `users` table with `id`, `name` and
`email` columns for the user commands to work, for example:

```sql
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT
);
```

## Getting started

Create the directories, apply the migrations and create the first user:

```
trancome --migrations-dir ./migrations/shared init --name alice --email alice@example.com
```

This records the user in the shared database and creates the user's own
database, `<user_db_dir>/<id>_<name>.db`, holding its own `users` table.
`--name` is required; `--email` is optional.

To add more users to an initialised shared database:

```
trancome user add --name bob
trancome user add -n carol -e carol@example.com
```

A user added without an e-mail address is stored with a NULL email. Each user
gets a time-ordered version 7 UUID as their identifier
(`trancome.cli.uuid7()`).

Running `trancome` with no command prints a welcome line.

## Library use

The helpers in `trancome.database` can be used on their own:

```python
from trancome.config import load
from trancome.database import DatabaseManager, with_transaction

config = load(None)
manager = DatabaseManager("migrations/shared")
manager.initialize_database(config)

with with_transaction(manager, "/path/to/shared.db") as conn:
    conn.execute("INSERT INTO users (id, name, email) VALUES (?, ?, ?)",
                 ("some-id", "alice", None))
```

If the block raises, the transaction is rolled back and the exception is
raised again; if it finishes, the transaction is committed.
`with_database(manager, path)` yields a plain connection that is closed
afterwards. `TransactionManager(manager, path)` gives manual control with
`commit()`, `rollback()` and `close()`, and rolls back on leaving a `with`
block if nothing was committed. Failures are raised as `DatabaseError`.

Connections are opened with WAL journaling, full synchronous writes and
foreign keys enabled.

## What it does not do

The package only sets up configuration, databases and users. It has no
commands for recording expenses, budgets or other financial data, and it
ships no migrations for the shared database.

## Running the tests

```
pip install .[test]
pytest
```