"""
Metacmd driver registry.

A driver names a third-party database client library and the few capabilities the
shell needs to know about it. Drivers live in a Registry object owned by the
application root; nothing is registered as an import side effect. Built-in drivers
are added by calling register_builtins(registry) during startup.

Overview
- Driver: read-only capability descriptor. A driver with no special capabilities is
  just Driver(module=...); everything else falls back to the client library's defaults.
- Registry: name/alias → Driver mapping with duplicate detection.
- register_builtins(registry): explicit startup routine for the built-in drivers.

Quick example:
    >>> registry = Registry()
    >>> register_builtins(registry)
    >>> registry["cm"].module
    'azure.cosmos'
"""
import difflib
import importlib
import re

from .faults import *
from .utils import *

_NAME = re.compile(r"[a-z][a-z0-9_+-]*")


class Driver:
    """
    Capability descriptor of a database driver.

    Attributes (read-only)
    - module: str, importable name of the client library.
    - allow_dollar / allow_multiline_comments / allow_c_comments / allow_hash_comments:
      lexer switches for statement splitting.
    - lexer_name: str | None, syntax highlighting lexer.
    - force_params: mapping of connection parameters always applied.
    - process / version / change_password: optional callables overriding the
      library's default statement processing, version query and password change.
    """
    __slots__ = (
        "_module",
        "_allow_dollar",
        "_allow_multiline_comments",
        "_allow_c_comments",
        "_allow_hash_comments",
        "_lexer_name",
        "_force_params",
        "_process",
        "_version",
        "_change_password",
    )

    module = mirror("module")
    allow_dollar = mirror("allow_dollar")
    allow_multiline_comments = mirror("allow_multiline_comments")
    allow_c_comments = mirror("allow_c_comments")
    allow_hash_comments = mirror("allow_hash_comments")
    lexer_name = mirror("lexer_name")
    force_params = mirror("force_params")
    process = mirror("process")
    version = mirror("version")
    change_password = mirror("change_password")

    def __init__(
            self,
            *,
            module,
            allow_dollar=False,
            allow_multiline_comments=False,
            allow_c_comments=False,
            allow_hash_comments=False,
            lexer_name=Unset,
            force_params=Unset,
            process=Unset,
            version=Unset,
            change_password=Unset,
    ):
        if not isinstance(module, str) or not module.strip():
            raise TypeError("Driver() module must be a non-empty string")
        for name, value in (
                ("allow_dollar", allow_dollar),
                ("allow_multiline_comments", allow_multiline_comments),
                ("allow_c_comments", allow_c_comments),
                ("allow_hash_comments", allow_hash_comments),
        ):
            if not isinstance(value, bool):
                raise TypeError("Driver() %s must be a boolean" % name)
        for name, value in (("process", process), ("version", version), ("change_password", change_password)):
            if value is not Unset and not callable(value):
                raise TypeError("Driver() %s must be callable" % name)
        self._module = module.strip()
        self._allow_dollar = allow_dollar
        self._allow_multiline_comments = allow_multiline_comments
        self._allow_c_comments = allow_c_comments
        self._allow_hash_comments = allow_hash_comments
        self._lexer_name = coalesce(lexer_name)
        self._force_params = dict(coalesce(force_params, {}))
        self._process = coalesce(process)
        self._version = coalesce(version)
        self._change_password = coalesce(change_password)

    def load(self):
        """
        Import and return the client library module.
        """
        return importlib.import_module(self._module)

    def __repr__(self):
        return "driver(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "module", self._module
        # only the capabilities that differ from the library defaults
        for name in self.__slots__[1:]:
            value = getattr(self, name)
            if value:
                yield name[1:], value


class Registry:
    """
    Explicit driver registry (one per application).

    - register(name, driver, *aliases): add a driver under a primary name and aliases.
    - registry[name]: lookup by name or alias; UnknownDriverError when missing.
    - name in registry / registry.get(name, default): tolerant lookups.
    - iteration yields primary names in registration order; len() counts drivers.
    """
    __slots__ = ("_drivers", "_aliases")

    def __init__(self):
        self._drivers = {}
        self._aliases = {}

    def register(self, name, driver, /, *aliases):
        """
        Register `driver` under `name` and every alias.

        Raises
        - TypeError / ValueError: bad driver object or badly formed name.
        - DuplicateDriverError: the name or an alias is already taken; nothing is
          registered in that case.
        """
        if not isinstance(driver, Driver):
            raise TypeError("register() second argument must be a Driver")
        names = (name, *aliases)
        for index, candidate in enumerate(names, 1):
            if not isinstance(candidate, str):
                raise TypeError("register() driver names must be strings")
            if not _NAME.fullmatch(candidate):
                raise ValueError("register() invalid driver name %r" % candidate)
            if candidate in self._aliases or candidate in names[:index - 1]:
                raise DuplicateDriverError(
                    "driver name %r is already registered" % candidate,
                    title="duplicate driver",
                    code=FaultCode.DUPLICATE_DRIVER,
                    hint="pick another name or alias for the driver",
                    token=candidate,
                    index=index,
                )
        self._drivers[name] = driver
        for candidate in names:
            self._aliases[candidate] = name
        return driver

    def __getitem__(self, name):
        try:
            return self._drivers[self._aliases[name]]
        except (KeyError, TypeError):
            suggestions = difflib.get_close_matches(str(name), self._aliases.keys(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "available drivers: %s" % (", ".join(self._drivers) or "none")
            raise UnknownDriverError(
                "unknown driver %r" % (name,),
                title="unknown driver",
                code=FaultCode.UNKNOWN_DRIVER,
                hint=hint,
                token=name,
                suggestions=suggestions,
            ) from None

    def get(self, name, default=None, /):
        try:
            return self[name]
        except UnknownDriverError:
            return default

    def resolve(self, name, /):
        """
        Return the primary name of a registered name or alias.
        """
        self[name]  # raises UnknownDriverError
        return self._aliases[name]

    def aliases(self, name, /):
        """
        Return every alias registered for the driver called `name` (primary excluded).
        """
        primary = self.resolve(name)
        return tuple(alias for alias, target in self._aliases.items() if target == primary and alias != primary)

    def __contains__(self, name):
        return isinstance(name, str) and name in self._aliases

    def __iter__(self):
        return iter(tuple(self._drivers))

    def __len__(self):
        return len(self._drivers)

    def __repr__(self):
        return "registry(%s)" % ", ".join(self._drivers)

    def __rich_repr__(self):
        for name, driver in self._drivers.items():
            yield name, driver


# Built-in drivers: (name, aliases, descriptor).
# These rely entirely on the client library defaults.
_BUILTINS = (
    ("cosmos", ("cm",), Driver(module="azure.cosmos")),
)


def register_builtins(registry, /):
    """
    Register the built-in drivers on `registry` (call once at startup).

    Returns the registry for chaining.
    """
    if not isinstance(registry, Registry):
        raise TypeError("register_builtins() argument must be a Registry")
    for name, aliases, driver in _BUILTINS:
        registry.register(name, driver, *aliases)
    return registry


__all__ = (
    "Driver",
    "Registry",
    "register_builtins",
)
