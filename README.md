# toolnotif

`toolnotif` keeps a list of repositories whose tool status files (JSON) you
want to track. It can run a background daemon. Every 5 seconds the daemon
reads every watched status file and adds a `"project"` key with the repository
name to each one. It then posts all of them together, as one JSON array, to a
dashboard URL.

## Installation

```
pip install .
```

The daemon detaches with `fork`, and it is stopped with the `kill` command.
Because of that, `start` and `stop` work on POSIX systems only.

## Usage

Add a status file, or a repository folder, to the watch list:

```
toolnotif watch path/to/repo
toolnotif watch path/to/repo/status_run.json --repo-name my-project
```

- A path with a file extension is stored as the status file as it is.
- For a folder, the first `*.json` entry whose name contains `status_` is used, with entries in sorted order. If there is none, the command fails with "No Status file found".
- Without `-r`/`--repo-name`, the repository name comes from the path. For a `.json` file it is the name of the folder that holds the file. Otherwise it is the last part of the path.
- The path must exist. It is resolved to an absolute path before it is stored.

List the watched repositories:

```
toolnotif list-all
```

Stop watching one:

```
toolnotif remove my-project
```

Start the background daemon. Set the dashboard URL in the `TOOL_DASHBOARD`
environment variable first:

```
export TOOL_DASHBOARD=http://localhost:8000/updates
toolnotif start
```

Stop it again:

```
toolnotif stop
```

`start` does nothing if a daemon is already running. `stop` does nothing if no
daemon is running. A PID file that names a process which no longer exists is
removed.

## What the daemon sends

On each round the daemon re-reads the watch list. It then does the following:

- Each status file must hold a JSON object, or `null`, which is sent as an empty object.
- Each object gets a `"project"` key holding the repository name.
- All the objects are posted in one request, with a 10 second timeout.

A round fails if any of these happens:

- the watch list is empty
- a status file cannot be read, or is not a JSON object
- the dashboard answers with a status outside 2xx

When a round fails, the error is written to the error log and the daemon keeps
going. SIGTERM, SIGINT or SIGQUIT make it remove its PID file and exit.

## Library use

- `toolnotif.config.Config` manages the watch list. Its methods are `create_or_load`, `watch_file`, `list_all`, `remove` and `reload`. Problems raise `ConfigError`.
- `toolnotif.server.Server` has the methods `start`, `stop`, `is_running` and `post_updates`. Problems raise `ServerError`.
- `toolnotif.status_types.PrIntent` describes a PR-intent progress report. It has `from_dict`, which validates every field, and `to_dict`.

## Files

- `~/jp_tool_status.toml`: the watch list, one table for each repository with its `status_file`.
- `~/rs-notifier.pid`: the PID of the running daemon.
- `~/jp_tools_daemon.out` and `~/jp_tools_daemon.err`: the daemon's output and error logs.