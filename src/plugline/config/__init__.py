# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for Plugline.

The configuration model lives in [`plugline.config.model`][], TOML helpers in
[`plugline.config.io`][] and logging setup in [`plugline.config.logging`][].
Supports the bundled defaults, discovery of ``plugline.toml`` /
``pyproject.toml`` ``[tool.plugline]``, explicit ``--config`` files and CLI
overrides.
"""

from __future__ import annotations

from plugline.config.model import ArgsLike, Config, MutableConfig

__all__: list[str] = [
    "ArgsLike",
    "Config",
    "MutableConfig",
]
