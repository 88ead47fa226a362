# topmark:header:start
#
#   project      : Plugline
#   file         : exit_codes.py
#   file_relpath : src/plugline/core/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the Plugline CLI.

Plugline aligns with the BSD `sysexits` convention where practical, so that other
tooling can interpret failures consistently.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the Plugline CLI.

    Attributes:
        SUCCESS: Successful execution with no errors.
        FAILURE: Generic failure (non-specific error).
        USAGE_ERROR: Command-line invocation error (invalid flags/args). Mirrors
            BSD ``EX_USAGE (64)``.
        ROUTE_CONFLICT: The route table contains unreachable duplicate routes.
            Mirrors BSD ``EX_DATAERR (65)``.
        APP_NOT_FOUND: The application factory could not be imported. Mirrors BSD
            ``EX_UNAVAILABLE (69)``.
        PIPELINE_ERROR: Internal pipeline failure (step/contract violation while
            building the application). Mirrors BSD ``EX_SOFTWARE (70)``.
        CONFIG_ERROR: Configuration error (missing/invalid/malformed config).
            Mirrors BSD ``EX_CONFIG (78)``.
    """

    SUCCESS = 0
    FAILURE = 1

    USAGE_ERROR = 64  # EX_USAGE
    ROUTE_CONFLICT = 65  # EX_DATAERR
    APP_NOT_FOUND = 69  # EX_UNAVAILABLE
    PIPELINE_ERROR = 70  # EX_SOFTWARE
    CONFIG_ERROR = 78  # EX_CONFIG
