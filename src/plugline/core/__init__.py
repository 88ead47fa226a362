# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core primitives shared across Plugline.

The ``plugline.core`` package provides small building blocks that are safe to
import from anywhere in the codebase (CLI, config, pipeline, routing, tests):

- ``errors``
  The exception hierarchy rooted at `PluglineError`.

- ``diagnostics``
  Diagnostic types and helpers (levels, messages, aggregation) used to collect
  and report build-time findings such as unreachable routes.

- ``exit_codes``
  Centralized CLI exit codes, aligned with BSD-style ``sysexits``.

- ``colored_enum``
  A string enum that carries a colorizer for human-facing listings.
"""

from __future__ import annotations
