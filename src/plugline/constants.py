# topmark:header:start
#
#   project      : Plugline
#   file         : constants.py
#   file_relpath : src/plugline/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    PLUGLINE_VERSION: str = get_version("plugline")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    PLUGLINE_VERSION = "0.0.0"

# Config discovery
PLUGLINE_TOML_NAME: str = "plugline.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "plugline"

# Application factory used by the CLI when none is configured
DEFAULT_APP_FACTORY: str = "plugline.demo.app:build_endpoint"

# Locale negotiation defaults
DEFAULT_LOCALE: str = "en"
DEFAULT_LOCALES: tuple[str, ...] = ("en", "fr", "de")

# Rendering defaults
DEFAULT_LAYOUT_VIEW: str = "LayoutView"
DEFAULT_LAYOUT: str = "app.html"
ERROR_VIEW: str = "ErrorView"

# Where authentication/authorization failures redirect to
DEFAULT_LOGIN_PATH: str = "/"

# Default assigns key used for the 3-arity action "actor" argument
DEFAULT_ACTOR_KEY: str = "current_user"

VALUE_NOT_SET: str = "<not set>"
