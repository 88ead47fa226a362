# topmark:header:start
#
#   project      : Plugline
#   file         : __init__.py
#   file_relpath : src/plugline/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plugline request pipeline package.

This package contains the components that thread a connection through ordered
steps, including:

- The connection context model and its update helpers
- The step contract, base classes and reference steps
- Pipeline assembly (build, composition, registry)
- The runner enforcing the halt short-circuit

The public API is composed of the assembly helpers in
[`plugline.pipeline.pipelines`][plugline.pipeline.pipelines], the execution helper in
[`plugline.pipeline.runner`][plugline.pipeline.runner], and the connection model in
[`plugline.pipeline.context`][plugline.pipeline.context].
"""
