# topmark:header:start
#
#   project      : Plugline
#   file         : model.py
#   file_relpath : src/plugline/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable, runtime snapshot handed to application factories.
    - `MutableConfig`: a mutable builder used during discovery/merge; it
      can be frozen into `Config` and thawed back for edits.

Layers (lowest → highest precedence):
    1. the bundled ``plugline-default.toml``;
    2. project files discovered upwards from the working directory
       (``pyproject.toml`` ``[tool.plugline]``, then ``plugline.toml``);
    3. files passed explicitly with ``--config``;
    4. CLI overrides (`MutableConfig.apply_args`).

Invalid values never abort loading: they are reported as diagnostics and the
previous layer's value is kept. Only unreadable or malformed files raise
`ConfigError`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from plugline.config.io import (
    get_bool_value_or_none,
    get_list_value,
    get_string_value_or_none,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
)
from plugline.config.logging import get_logger
from plugline.constants import (
    DEFAULT_APP_FACTORY,
    DEFAULT_LAYOUT,
    DEFAULT_LOCALE,
    DEFAULT_LOCALES,
    DEFAULT_LOGIN_PATH,
    PLUGLINE_TOML_NAME,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
)
from plugline.core.diagnostics import Diagnostic, DiagnosticLog

if TYPE_CHECKING:
    from plugline.config.io import TomlTable
    from plugline.config.logging import PluglineLogger

# ArgsLike: generic mapping accepted by `apply_args` (CLI namespaces and API dicts).
ArgsLike = Mapping[str, Any]

logger: PluglineLogger = get_logger(__name__)


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration.

    Attributes:
        app_factory (str): ``"module:attr"`` of the application factory.
        default_locale (str): Locale used when a request selects none (or an unknown one).
        locales (tuple[str, ...]): Allowed locales.
        strict_routes (bool): Raise on duplicate routes instead of warning.
        login_path (str): Redirect target for authentication failures.
        layout (str | bool): Layout template key, or False for no layout.
        config_files (tuple[str, ...]): Files that contributed to this config.
        diagnostics (tuple[Diagnostic, ...]): Findings collected while loading.
    """

    app_factory: str = DEFAULT_APP_FACTORY
    default_locale: str = DEFAULT_LOCALE
    locales: tuple[str, ...] = DEFAULT_LOCALES
    strict_routes: bool = False
    login_path: str = DEFAULT_LOGIN_PATH
    layout: str | bool = DEFAULT_LAYOUT
    config_files: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def to_toml_dict(self) -> TomlTable:
        """Convert this config into a TOML-serializable dict (export only)."""
        return {
            "app": {"factory": self.app_factory},
            "locale": {"default": self.default_locale, "available": list(self.locales)},
            "router": {"strict": self.strict_routes},
            "auth": {"login_path": self.login_path},
            "render": {"layout": self.layout},
        }

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen config."""
        return MutableConfig(
            app_factory=self.app_factory,
            default_locale=self.default_locale,
            locales=list(self.locales),
            strict_routes=self.strict_routes,
            login_path=self.login_path,
            layout=self.layout,
            config_files=list(self.config_files),
            diagnostics=DiagnosticLog(items=list(self.diagnostics)),
        )


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableConfig:
    """Mutable configuration used during discovery and merging.

    Fields set to ``None`` (or empty lists) are "not set" and inherit the value
    of the layer below when merged.
    """

    app_factory: str | None = None
    default_locale: str | None = None
    locales: list[str] = field(default_factory=lambda: [])
    strict_routes: bool | None = None
    login_path: str | None = None
    layout: str | bool | None = None
    config_files: list[str] = field(default_factory=lambda: [])
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

    # ---------------------------- Build/freeze ----------------------------

    def freeze(self) -> Config:
        """Sanitize this builder and freeze it into an immutable `Config`."""
        self.sanitize()
        return Config(
            app_factory=self.app_factory or DEFAULT_APP_FACTORY,
            default_locale=self.default_locale or DEFAULT_LOCALE,
            locales=tuple(self.locales) or DEFAULT_LOCALES,
            strict_routes=bool(self.strict_routes),
            login_path=self.login_path or DEFAULT_LOGIN_PATH,
            layout=DEFAULT_LAYOUT if self.layout is None else self.layout,
            config_files=tuple(self.config_files),
            diagnostics=self.diagnostics.freeze(),
        )

    def sanitize(self) -> None:
        """Validate cross-field invariants in place, recording diagnostics.

        Rules:
            - the default locale must be one of the allowed locales (else the
              first allowed locale is used);
            - ``login_path`` must be a local path (else ``"/"``);
            - ``app.factory`` must look like ``"module:attr"``.
        """
        locales = self.locales or list(DEFAULT_LOCALES)
        default = self.default_locale or DEFAULT_LOCALE
        if default not in locales:
            msg = f"locale.default {default!r} is not in locale.available {locales}; using {locales[0]!r}"
            logger.warning(msg)
            self.diagnostics.add_error(msg)
            self.default_locale = locales[0]

        if self.login_path is not None and (
            not self.login_path.startswith("/") or self.login_path.startswith("//")
        ):
            msg = f"auth.login_path must be a local path, got {self.login_path!r}; using '/'"
            logger.warning(msg)
            self.diagnostics.add_warning(msg)
            self.login_path = DEFAULT_LOGIN_PATH

        if self.app_factory is not None and ":" not in self.app_factory:
            msg = f"app.factory must be 'module:attr', got {self.app_factory!r}; using the default"
            logger.warning(msg)
            self.diagnostics.add_warning(msg)
            self.app_factory = None

    # --------------------------- Loaders/parsers --------------------------

    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Load the bundled default configuration."""
        return cls.from_toml_dict(load_defaults_dict())

    @classmethod
    def from_toml_dict(cls, data: TomlTable, config_file: Path | None = None) -> MutableConfig:
        """Create a draft config from a parsed TOML dict.

        Args:
            data (TomlTable): Parsed TOML data (the ``[tool.plugline]`` table for
                pyproject files).
            config_file (Path | None): Source file, recorded in ``config_files``.

        Returns:
            MutableConfig: The draft; invalid values are left unset and reported
            in ``diagnostics``.
        """
        draft = cls(config_files=[str(config_file)] if config_file else [])
        source = str(config_file) if config_file else "defaults"

        app_tbl: TomlTable = get_table_value(data, "app")
        locale_tbl: TomlTable = get_table_value(data, "locale")
        router_tbl: TomlTable = get_table_value(data, "router")
        auth_tbl: TomlTable = get_table_value(data, "auth")
        render_tbl: TomlTable = get_table_value(data, "render")
        logger.trace("TOML tables from %s: %s", source, data)

        def _invalid(key: str, value: Any, expected: str) -> None:
            msg = f"{source}: ignoring {key} = {value!r} (expected {expected})"
            logger.warning(msg)
            draft.diagnostics.add_warning(msg)

        draft.app_factory = get_string_value_or_none(app_tbl, "factory")
        if "factory" in app_tbl and draft.app_factory is None:
            _invalid("app.factory", app_tbl["factory"], "a string")

        draft.default_locale = get_string_value_or_none(locale_tbl, "default")
        if "default" in locale_tbl and draft.default_locale is None:
            _invalid("locale.default", locale_tbl["default"], "a string")
        if "available" in locale_tbl:
            available = get_list_value(locale_tbl, "available")
            if available and all(isinstance(loc, str) for loc in available):
                draft.locales = list(available)
            else:
                _invalid("locale.available", locale_tbl["available"], "a non-empty list of strings")

        draft.strict_routes = get_bool_value_or_none(router_tbl, "strict")
        if "strict" in router_tbl and draft.strict_routes is None:
            _invalid("router.strict", router_tbl["strict"], "a boolean")

        draft.login_path = get_string_value_or_none(auth_tbl, "login_path")
        if "login_path" in auth_tbl and draft.login_path is None:
            _invalid("auth.login_path", auth_tbl["login_path"], "a string")

        layout = render_tbl.get("layout")
        if layout is False or isinstance(layout, str):
            draft.layout = layout
        elif layout is not None:
            _invalid("render.layout", layout, "a template key or false")

        unknown = sorted(set(data) - {"app", "locale", "router", "auth", "render", "root"})
        for name in unknown:
            msg = f"{source}: unknown configuration section {name!r}"
            logger.info(msg)
            draft.diagnostics.add_info(msg)
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load configuration from a single TOML file.

        ``pyproject.toml`` files contribute their ``[tool.plugline]`` table and
        are skipped (None) when they have none.

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)
        data: TomlTable = load_toml_dict(path)
        if path.name == PYPROJECT_TOML_NAME:
            data = get_table_value(get_table_value(data, "tool"), PYPROJECT_TOOL_SECTION)
            if not data:
                logger.debug("No [tool.%s] table in %s", PYPROJECT_TOOL_SECTION, path)
                return None
        return cls.from_toml_dict(data, config_file=path)

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return config files found walking upward from ``start``.

        Files are ordered root-most first, nearest last; within one directory
        ``pyproject.toml`` comes before ``plugline.toml``. A file setting
        ``root = true`` stops the walk after its directory.
        """
        per_dir: list[list[Path]] = []
        cur: Path = start.resolve()
        if cur.is_file():
            cur = cur.parent

        while True:
            stop_here = False
            entries: list[Path] = []
            for name in (PYPROJECT_TOML_NAME, PLUGLINE_TOML_NAME):
                candidate = cur / name
                if not candidate.is_file():
                    continue
                data = load_toml_dict(candidate)
                if name == PYPROJECT_TOML_NAME:
                    data = get_table_value(get_table_value(data, "tool"), PYPROJECT_TOOL_SECTION)
                    if not data:
                        continue
                entries.append(candidate)
                logger.debug("Discovered config file: %s", candidate)
                if data.get("root") is True:
                    stop_here = True
            if entries:
                per_dir.append(entries)

            parent = cur.parent
            if parent == cur or stop_here:
                break
            cur = parent

        ordered: list[Path] = []
        for entries in reversed(per_dir):
            ordered.extend(entries)
        return ordered

    @classmethod
    def load_merged(
        cls,
        *,
        anchor: Path | None = None,
        extra_config_files: Iterable[Path] = (),
        no_config: bool = False,
    ) -> MutableConfig:
        """Discover and merge configuration layers into a draft.

        Args:
            anchor (Path | None): Discovery start directory (CWD when None).
            extra_config_files (Iterable[Path]): Explicit files merged last, in order.
            no_config (bool): Skip discovery (defaults and explicit files only).

        Returns:
            MutableConfig: The merged draft, ready to be frozen.

        Raises:
            ConfigError: If a file cannot be read or parsed.
        """
        draft = cls.from_defaults()
        draft.config_files = []
        if not no_config:
            for path in cls.discover_local_config_files(anchor or Path.cwd()):
                layer = cls.from_toml_file(path)
                if layer is not None:
                    draft = draft.merge_with(layer)
        for extra in extra_config_files:
            layer = cls.from_toml_file(Path(extra))
            if layer is not None:
                draft = draft.merge_with(layer)
        return draft

    # ------------------------------- Merging -------------------------------

    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where values set in ``other`` override this draft."""
        merged = MutableConfig(
            app_factory=other.app_factory if other.app_factory is not None else self.app_factory,
            default_locale=(
                other.default_locale if other.default_locale is not None else self.default_locale
            ),
            locales=list(other.locales or self.locales),
            strict_routes=(
                other.strict_routes if other.strict_routes is not None else self.strict_routes
            ),
            login_path=other.login_path if other.login_path is not None else self.login_path,
            layout=other.layout if other.layout is not None else self.layout,
            config_files=self.config_files + other.config_files,
        )
        merged.diagnostics.extend(self.diagnostics.items)
        merged.diagnostics.extend(other.diagnostics.items)
        return merged

    def apply_args(self, args: ArgsLike) -> MutableConfig:
        """Apply overrides from an arguments mapping (CLI or API).

        Recognized keys: ``strict`` (bool), ``locale`` (str), ``layout``
        (str or False), ``app`` (``"module:attr"``). ``None`` values are ignored.

        Returns:
            MutableConfig: ``self``, for chaining.
        """
        if args.get("strict") is not None:
            self.strict_routes = bool(args["strict"])
        if args.get("locale") is not None:
            self.default_locale = str(args["locale"])
        if args.get("layout") is not None:
            self.layout = args["layout"]
        if args.get("app") is not None:
            self.app_factory = str(args["app"])
        logger.debug("Applied overrides to MutableConfig: %s", {k: v for k, v in args.items() if v is not None})
        return self
