# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click subcommands of the ``plugline`` CLI."""
