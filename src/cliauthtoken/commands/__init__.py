"""Built-in CLI sub-commands for cliauthtoken.

* :mod:`~cliauthtoken.commands.token` -- ``redirect`` and ``paste``, the
  two ways of obtaining a token. Registered directly on the root app.
* :mod:`~cliauthtoken.commands.config` -- view and modify saved defaults,
  exported as the ``config`` :class:`typer.Typer` sub-application.
"""
