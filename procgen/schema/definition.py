"""Generator schemas: declare a node type, then invoke it to build instances."""
from __future__ import annotations

import keyword
import threading
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Mapping, Optional, Union

from procgen.engine.logger import ProceduralLogger, default_logger
from procgen.engine.settings import GeneratorSettings
from procgen.errors import (
    ArityError,
    DuplicateFieldError,
    InvalidNameError,
    ReservedNameError,
    SchemaFinalizedError,
    ValidationError,
)
from procgen.math.hashing import canonical_json
from procgen.schema.instance import RESERVED_NAMES, Instance

Validator = Callable[[Instance, Any], bool]

HASH_SEPARATOR = "\x00"


class FieldKind(Enum):
    PARAMETER = auto()
    COMPUTED = auto()
    METHOD = auto()


class SchemaState(Enum):
    OPEN = auto()
    FINALIZED = auto()


@dataclass(frozen=True)
class Parameter:
    kind: ClassVar[FieldKind] = FieldKind.PARAMETER

    name: str
    validator: Optional[Validator] = None
    hashed: bool = True


@dataclass(frozen=True)
class Computed:
    kind: ClassVar[FieldKind] = FieldKind.COMPUTED

    name: str
    fn: Optional[Callable[[Instance], Any]] = None
    constant: Any = None

    def evaluate(self, instance: Instance) -> Any:
        if self.fn is not None:
            return self.fn(instance)
        return self.constant


@dataclass(frozen=True)
class Method:
    kind: ClassVar[FieldKind] = FieldKind.METHOD

    name: str
    fn: Callable[..., Any]


Field = Union[Parameter, Computed, Method]


def _check_identifier(name: object) -> None:
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidNameError(f"Invalid name {name!r}: expected a Python identifier")
    if name.startswith("_"):
        raise InvalidNameError(f"Invalid name {name!r}: names may not start with '_'")


class Schema:
    """A named generator node type.

    Declarations are chainable and only allowed while the schema is open; the
    first invocation finalizes it for good::

        universe = procedural("universe").takes("seed")
        sector = universe.generates("sector").takes("x", "y").provides(
            "density", lambda s: s.rng().next_float() ** 3
        )
        sector.done() is universe
    """

    def __init__(
        self,
        name: str,
        parent: Optional["Schema"] = None,
        *,
        settings: Optional[GeneratorSettings] = None,
        logger: Optional[ProceduralLogger] = None,
    ) -> None:
        _check_identifier(name)
        self._name = name
        self._parent = parent
        if settings is None:
            settings = parent.settings if parent is not None else GeneratorSettings()
        if logger is None:
            logger = parent.logger if parent is not None else default_logger()
        self._settings = settings
        self._logger = logger
        self._fields: List[Field] = []
        self._children: Dict[str, Schema] = {}
        self._state = SchemaState.OPEN
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional["Schema"]:
        return self._parent

    @property
    def settings(self) -> GeneratorSettings:
        return self._settings

    @property
    def logger(self) -> ProceduralLogger:
        return self._logger

    @property
    def state(self) -> SchemaState:
        return self._state

    @property
    def is_finalized(self) -> bool:
        return self._state is SchemaState.FINALIZED

    @property
    def fields(self) -> List[Field]:
        return list(self._fields)

    @property
    def children(self) -> Mapping[str, "Schema"]:
        return MappingProxyType(self._children)

    @property
    def method_table(self) -> Mapping[str, Method]:
        return MappingProxyType(
            {field.name: field for field in self._fields if field.kind is FieldKind.METHOD}
        )

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------
    def _check_available(self, name: str, taken: Iterable[str]) -> None:
        _check_identifier(name)
        if name in RESERVED_NAMES:
            raise ReservedNameError(f"'{name}' is reserved by the instance surface ({self})")
        if self._parent is not None and name == self._parent.name:
            raise ReservedNameError(f"'{name}' is reserved for the parent reference of {self}")
        if name in taken:
            raise DuplicateFieldError(f"'{name}' is already declared on {self}")

    def _taken_names(self) -> set:
        return {field.name for field in self._fields} | set(self._children)

    def _declare(self, fields: List[Field]) -> "Schema":
        with self._lock:
            if self._state is SchemaState.FINALIZED:
                names = ", ".join(field.name for field in fields)
                raise SchemaFinalizedError(
                    f"Cannot declare {names} on {self}: instances of {self._name} exist"
                )
            taken = self._taken_names()
            for field in fields:
                self._check_available(field.name, taken)
                taken.add(field.name)
            self._fields.extend(fields)
        return self

    def declare_parameters(
        self,
        *names: Any,
        validator: Optional[Validator] = None,
        hashed: bool = True,
    ) -> "Schema":
        """Append parameters in order; a trailing callable is taken as the validator."""
        if names and callable(names[-1]) and validator is None:
            validator = names[-1]
            names = names[:-1]
        if not names:
            raise InvalidNameError(f"At least one parameter must be specified for {self}")
        if validator is not None and not callable(validator):
            raise TypeError(f"Validator for {self} must be callable")
        return self._declare([Parameter(name, validator, hashed) for name in names])

    def declare_computed(self, name: str, fn_or_constant: Any) -> "Schema":
        if callable(fn_or_constant):
            value = Computed(name, fn=fn_or_constant)
        else:
            value = Computed(name, constant=fn_or_constant)
        return self._declare([value])

    def declare_method(self, name: str, fn: Callable[..., Any]) -> "Schema":
        if not callable(fn):
            raise TypeError(f"Method {name!r} on {self} must be callable")
        return self._declare([Method(name, fn)])

    def declare_child(self, name: str) -> "Schema":
        with self._lock:
            if self._state is SchemaState.FINALIZED:
                raise SchemaFinalizedError(
                    f"Cannot define {self}.{name}: instances of {self._name} exist"
                )
            self._check_available(name, self._taken_names())
            if name in SCHEMA_SURFACE:
                raise ReservedNameError(f"'{name}' would be hidden by Schema.{name} on {self}")
            child = Schema(name, self, settings=self._settings, logger=self._logger)
            self._children[name] = child
        self._logger.channel("schema").debug("Declared child schema %s", child.path())
        return child

    takes = declare_parameters
    provides = declare_computed
    method = declare_method
    generates = declare_child

    def done(self) -> Optional["Schema"]:
        return self._parent

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def get_name(self) -> str:
        return self._name

    def get_parent(self) -> Optional["Schema"]:
        return self._parent

    def _names_of(self, kind: FieldKind) -> List[str]:
        return [field.name for field in self._fields if field.kind is kind]

    def get_parameters(self) -> List[str]:
        return self._names_of(FieldKind.PARAMETER)

    def get_computed(self) -> List[str]:
        return self._names_of(FieldKind.COMPUTED)

    def get_methods(self) -> List[str]:
        return self._names_of(FieldKind.METHOD)

    def get_children(self) -> List[str]:
        return list(self._children)

    def child(self, name: str) -> "Schema":
        if name not in self._children:
            raise KeyError(f"Schema '{self.path()}' has no child '{name}'")
        return self._children[name]

    def root(self) -> "Schema":
        schema = self
        while schema._parent is not None:
            schema = schema._parent
        return schema

    def path(self) -> str:
        pieces = []
        schema: Optional[Schema] = self
        while schema is not None:
            pieces.append(schema._name)
            schema = schema._parent
        return ".".join(reversed(pieces))

    def __getattr__(self, name: str) -> "Schema":
        # Children are reachable as attributes, e.g. ``universe.sector``.
        if name.startswith("_"):
            raise AttributeError(name)
        children = self.__dict__.get("_children", {})
        if name in children:
            return children[name]
        raise AttributeError(f"Schema '{self._name}' has no attribute or child '{name}'")

    def __str__(self) -> str:
        return f"{self.path()}({', '.join(self.get_parameters())})"

    def __repr__(self) -> str:
        return f"<Schema {self} {self._state.name.lower()}>"

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------
    def _finalize_for(self, args: tuple) -> List[Parameter]:
        with self._lock:
            parameters = [field for field in self._fields if field.kind is FieldKind.PARAMETER]
            if len(args) != len(parameters):
                raise ArityError(
                    f"Wrong number of parameters for {self}: expected {len(parameters)}, got {len(args)}"
                )
            transitioned = self._state is SchemaState.OPEN
            self._state = SchemaState.FINALIZED
        if transitioned:
            self._logger.channel("schema").info("Finalized schema %s", self)
        return parameters

    def _bind_parent(self, candidate: Optional[Instance]) -> Optional[Instance]:
        if (
            candidate is not None
            and self._parent is not None
            and isinstance(candidate, Instance)
            and candidate.get_schema() is self._parent
        ):
            return candidate
        channel = self._logger.channel("instance")
        if self._parent is not None:
            channel.warning(
                "Creating detached instance of %s (expected parent %s)", self, self._parent
            )
        elif candidate is not None:
            channel.warning("Ignoring parent %r for root schema %s", candidate, self)
        return None

    def invoke(self, parent_instance: Optional[Instance], *args: Any) -> Instance:
        """Build an instance, optionally bound to an instance of the parent schema."""
        parameters = self._finalize_for(args)
        parent = self._bind_parent(parent_instance)
        instance = Instance(self, parent)

        hash_pieces = [self._name]
        for parameter, value in zip(parameters, args):
            if parameter.validator is not None and not parameter.validator(instance, value):
                raise ValidationError(self._name, parameter.name, value)
            instance._bind_value(parameter.name, value)
            if parameter.hashed:
                try:
                    hash_pieces.append(canonical_json(value))
                except (TypeError, ValueError) as exc:
                    # Hashed values must be JSON data: numbers, strings, lists, dicts.
                    raise ValidationError(self._name, parameter.name, value) from exc

        seed = parent.hash if parent is not None else self._settings.resolved_root_seed()
        instance._stamp(self._settings.hash(HASH_SEPARATOR.join(hash_pieces), seed))

        for field in self._fields:
            if field.kind is FieldKind.COMPUTED:
                instance._bind_value(field.name, field.evaluate(instance))
            elif field.kind in (FieldKind.PARAMETER, FieldKind.METHOD):
                continue
            else:
                raise AssertionError(f"Unhandled field kind {field.kind}")
        return instance

    def __call__(self, *args: Any) -> Instance:
        return self.invoke(None, *args)


SCHEMA_SURFACE = frozenset(name for name in dir(Schema) if not name.startswith("_"))


def procedural(
    name: str,
    *,
    settings: Optional[GeneratorSettings] = None,
    logger: Optional[ProceduralLogger] = None,
) -> Schema:
    """Create the root schema of a new generator tree."""
    return Schema(name, settings=settings, logger=logger)


__all__ = [
    "Computed",
    "Field",
    "FieldKind",
    "Method",
    "Parameter",
    "Schema",
    "SCHEMA_SURFACE",
    "SchemaState",
    "procedural",
]
