# topmark:header:start
#
#   project      : Plugline
#   file         : __main__.py
#   file_relpath : src/plugline/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running Plugline via ``python -m plugline``.

It delegates directly to :func:`plugline.cli.main.cli`, ensuring a single,
authoritative CLI entry point regardless of how Plugline is launched.

Examples:
    List the routes of the bundled demo application::

        python -m plugline routes
"""

from __future__ import annotations

from plugline.cli.main import cli

if __name__ == "__main__":
    # We call the Click group directly
    cli()
