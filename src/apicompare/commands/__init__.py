"""Built-in CLI sub-commands for apicompare.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~apicompare.commands.compare` -- diff two versions of a spec.
* :mod:`~apicompare.commands.inspect` -- list the paths and models one
  version defines.
* :mod:`~apicompare.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for ``compare``).
"""
