# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/dispatch/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Action dispatch: tagged results, the dispatcher, fallback tables and controllers.

Import the concrete modules (`plugline.dispatch.controller`, ...) directly;
this package does not re-export them so that the reference steps can depend on
`plugline.dispatch.results` without importing the controller machinery.
"""
