from __future__ import annotations

import io

from collections import ChainMap
from os import PathLike
from typing import Any, Callable, Iterable, Iterator

from bufscan.errors import ConfigError


class Enum:
    """Variants enumeration.

    Restricts an option to a fixed set of values.
    """

    def __init__(self, *variants: str | int | bool | None):
        self.variants = variants

    def match(self, value: Any) -> bool:
        return value in self.variants

    def convert(self, value: str) -> Any:
        for variant in self.variants:
            if str(variant) == value:
                return variant
        raise ConfigError(f"{value!r} is not one of {self}")

    def __repr__(self):
        variants = ', '.join(str(v) for v in self.variants)
        return f"Enum({variants})"

    def __str__(self):
        variants = ' | '.join(str(v) for v in self.variants)
        return f"({variants})"


class Option:
    """Config option.

    Used to define the schema. Immutable.

    Parameters:
        type: Option's type or an `Enum` of allowed values.
        default: Option's default value.
        required: If the option is required and not assigned,
                  `Config.validate` raises an error.
    """

    type: type | Enum
    default: Any
    required: bool

    def __init__(self, type, default=None, required=False):
        super().__setattr__('type', type)
        super().__setattr__('default', default)
        super().__setattr__('required', required)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError

    def __delattr__(self, name: str):
        raise AttributeError

    def __repr__(self):
        tp = self.type.__name__ if type(self.type) is type else self.type
        return (f"Option({tp}, default={self.default!r}, "
                f"required={self.required})")


def to_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    raise ConfigError(f"not a boolean: {value!r}")


def to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"not an integer: {value!r}") from e


SCANNER_OPTIONS = {
    "delimiter": Option(str, default=r"\s+"),
    "literal": Option(bool, default=False),
    "radix": Option(int, default=10),
    "width": Option(Enum(8, 16, 32, 64), default=32),
    "encoding": Option(str, default="utf-8"),
    "buffer_size": Option(int, default=io.DEFAULT_BUFFER_SIZE),
}


class Config:
    def __init__(self, schema: dict[str, Option], strict=False):
        """Initialize Config instance.

        Args:
            schema: Schema mapping.
            strict: If true, adding options that are not in schema
                    is not allowed.
        """
        self._config = ChainMap(schema)
        self._types: dict[type, Callable[[str], Any]] = {}

        register = self.register_type
        register(int, to_int)
        register(bool, to_bool)
        register(str, str)

        self.strict = strict

    @property
    def schema(self) -> dict[str, Option]:
        """Return the schema mapping."""
        return self._config.maps[-1]

    def register_type(self, type_: type, convert_fn: Callable[[str], Any]):
        """Add a string conversion function for `type_`."""
        self._types[type_] = convert_fn

    def override(self, options: dict[str, Any]):
        """Assign options to config.

        Each call to `override` adds new option values on the top
        of old values.

        Raises:
            ConfigError
        """
        self._try_insert_map(self._override, options, False)

    def parse(self, it: Iterable[str]):
        """Parse and override options.

        Option strings have the format `<option_name>=<value>`. Values are
        converted to the option's type.

        Raises:
            ConfigError
        """
        options = {}
        for s in it:
            name, sep, value = s.partition('=')
            if not sep or not name:
                raise ConfigError(f"expected <name>=<value>, got {s!r}")
            options[name.strip()] = value
        self._try_insert_map(self._override, options, True)

    def validate(self) -> None:
        """Check that every required option is assigned.

        Raises:
            ConfigError
        """
        required_options = [name for name, value in self._config.items()
                            if isinstance(value, Option) and value.required]
        if required_options:
            opts = ', '.join(repr(n) for n in required_options)
            raise ConfigError(f"required options: {opts}")

    def _try_insert_map(self, fn: Callable, *args: Any):
        self._config.maps.insert(0, {})
        try:
            fn(*args)
        except Exception:
            self._config.maps.pop(0)
            raise

    def _override(self, options: dict[str, Any], convert: bool):
        schema = self.schema

        for name, value in options.items():
            if name not in schema:
                if self.strict:
                    msg = f"cannot add name {name!r} that is not in config"
                    raise ConfigError(msg)
                self._config[name] = value
                continue

            option = schema[name]
            if convert:
                value = self._convert(name, value, option)
            self._check_value(name, value, option)
            self._config[name] = value

    def _convert(self, name: str, value: str, option: Option) -> Any:
        if isinstance(option.type, Enum):
            return option.type.convert(value)
        convert_fn = self._types.get(option.type)
        if not convert_fn:
            raise ConfigError(f"option {name!r}: no conversion from string "
                              f"to {option.type}")
        return convert_fn(value)

    def _check_value(self, name: str, value: Any, option: Option):
        tp = option.type
        if isinstance(tp, Enum):
            if not tp.match(value):
                raise ConfigError(f"option {name!r} must be one of the "
                                  f"following: {tp}, got {value!r}")
        elif not isinstance(value, tp):
            raise ConfigError(f"option {name!r} must be of type "
                              f"{tp.__name__}, got {type(value).__name__}: "
                              f"{value!r}")

    def items(self) -> Iterator[tuple[str, Any]]:
        for name in self._config:
            yield name, getattr(self, name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        if name in self._config:
            value = self._config[name]
            if isinstance(value, Option):
                return value.default
            return value

        raise AttributeError(f"no such config value: {name!r}")

    def __getitem__(self, name: str) -> Any:
        return getattr(self, name)

    def __contains__(self, name: str) -> bool:
        return name in self._config

    def __iter__(self) -> Iterator[str]:
        yield from self._config

    def __repr__(self):
        lines = ["Config({"]
        for name, val in self.items():
            lines.append(f"  {name!r}: {val!r},")
        lines.append("})")
        return '\n'.join(lines)


def read_file(schema: dict[str, Option],
              filename: str | PathLike[str]) -> Config:
    """Create Config object from a Python configuration file.

    Module-level names not starting with `__` become options.
    """
    namespace = eval_config_file(filename)

    options = {attr: val for attr, val in namespace.items()
               if not attr.startswith('__')}

    cfg = Config(schema, strict=True)
    cfg.override(options)
    cfg.validate()
    return cfg


def eval_config_file(filename: str | PathLike[str]) -> dict[str, Any]:
    namespace: dict[str, Any] = {}

    try:
        with open(filename, 'rb') as fin:
            code = compile(fin.read(), filename, 'exec')
            exec(code, namespace)
    except SyntaxError as e:
        raise ConfigError(f'syntax error in the config file: {e}') from e
    except SystemExit as e:
        raise ConfigError('the configuration file called sys.exit()') from e
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f'an exception in the config file: {e}') from e

    return namespace
