"""Frozen, hash-stamped values produced by invoking a schema."""
from __future__ import annotations

import functools
from collections.abc import Mapping
from dataclasses import FrozenInstanceError
from typing import TYPE_CHECKING, Any, List, Optional

from procgen.errors import KeyPathError
from procgen.math.hashing import canonical_json
from procgen.math.prng import DeterministicRandom

if TYPE_CHECKING:
    from procgen.schema.definition import Schema


def _display(value: Any) -> str:
    try:
        return canonical_json(value)
    except (TypeError, ValueError):
        # Unhashed parameters may hold values JSON cannot express.
        return repr(value)


class Instance:
    """A generated node: parameters, computed values and a 32-bit ``hash``.

    Instances are built by :meth:`Schema.invoke` and are read-only afterwards.
    Declared fields, the parent back-reference, child schemas and declared
    methods are all reachable as attributes::

        star = cluster.star(4)
        star.num_planets          # computed value
        star.cluster              # parent instance
        star.planet(2)            # child bound to ``star``
    """

    __slots__ = ("_schema", "_parent", "_values", "_hash")

    def __init__(self, schema: "Schema", parent: Optional["Instance"]) -> None:
        object.__setattr__(self, "_schema", schema)
        object.__setattr__(self, "_parent", parent)
        object.__setattr__(self, "_values", {})
        object.__setattr__(self, "_hash", None)

    # ------------------------------------------------------------------
    # Construction hooks (used by Schema.invoke only)
    # ------------------------------------------------------------------
    def _bind_value(self, name: str, value: Any) -> None:
        self._values[name] = value

    def _stamp(self, value: int) -> None:
        object.__setattr__(self, "_hash", value)

    # ------------------------------------------------------------------
    # Immutability
    # ------------------------------------------------------------------
    def __setattr__(self, name: str, value: Any) -> None:
        raise FrozenInstanceError(f"cannot assign to field '{name}' of {self._schema.name}")

    def __delattr__(self, name: str) -> None:
        raise FrozenInstanceError(f"cannot delete field '{name}' of {self._schema.name}")

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------
    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._lookup(name)

    def _lookup(self, name: str) -> Any:
        values = self._values
        if name in values:
            return values[name]
        schema = self._schema
        parent_schema = schema.parent
        if parent_schema is not None and name == parent_schema.name:
            if self._parent is None:
                raise AttributeError(f"Detached {schema.name} instance has no '{name}' parent")
            return self._parent
        if name in schema.children:
            return functools.partial(schema.children[name].invoke, self)
        method = schema.method_table.get(name)
        if method is not None:
            return functools.partial(method.fn, self)
        if name == "hash":
            return self._hash
        raise AttributeError(f"'{schema.name}' instance has no field '{name}'")

    @property
    def hash(self) -> int:
        return self._hash

    def get(self, path: str) -> Any:
        """Resolve a dotted key path relative to this instance.

        ``"x"`` and ``".x"`` read ``x`` here, every further leading dot walks one
        parent up (``"..x"`` is the parent's ``x``), and a leading ``/`` starts
        from the root of the tree (``"/seed"``).
        """
        node: Any = self
        remaining = path
        if remaining.startswith("/"):
            node = self._root()
            remaining = remaining[1:]
            if not remaining:
                return node

        segments = remaining.split(".")
        empties = 0
        while empties < len(segments) and segments[empties] == "":
            empties += 1
        keys = segments[empties:]
        dots = empties if keys else empties - 1
        for _ in range(max(0, dots - 1)):
            parent = node.get_parent()
            if parent is None:
                raise KeyPathError(path, f"walks above the root '{node.get_name()}'")
            node = parent

        for key in keys:
            if not key:
                raise KeyPathError(path, "empty segment")
            node = self._resolve_segment(node, key, path)
        return node

    @staticmethod
    def _resolve_segment(node: Any, key: str, path: str) -> Any:
        if isinstance(node, Instance):
            if key.startswith("_"):
                raise KeyPathError(path, f"'{key}' is private")
            try:
                return node._lookup(key)
            except AttributeError:
                raise KeyPathError(path, f"'{key}' not found on {node.get_name()}") from None
        if isinstance(node, Mapping):
            try:
                return node[key]
            except KeyError:
                raise KeyPathError(path, f"key '{key}' not found") from None
        try:
            return getattr(node, key)
        except AttributeError:
            raise KeyPathError(path, f"'{key}' not found on {type(node).__name__}") from None

    def _root(self) -> "Instance":
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def get_parent(self) -> Optional["Instance"]:
        return self._parent

    def get_name(self) -> str:
        return self._schema.name

    def get_schema(self) -> "Schema":
        return self._schema

    def get_parameters(self) -> List[str]:
        return self._schema.get_parameters()

    def get_computed(self) -> List[str]:
        return self._schema.get_computed()

    def get_methods(self) -> List[str]:
        return self._schema.get_methods()

    def get_random_generator(self, discriminator: Optional[str] = None) -> DeterministicRandom:
        """Return a fresh PRNG seeded from this instance.

        Each discriminator (``"planets"``, ``"moons"``...) yields its own
        independent stream; the instance itself is never touched.
        """
        settings = self._schema.settings
        if discriminator is None:
            seed = self._hash
        else:
            seed = settings.hash(discriminator, self._hash)
        self._schema.logger.channel("random").debug(
            "Stream %r of %s seeded with %#010x", discriminator, self, seed
        )
        return settings.create_random(seed)

    rng = get_random_generator

    def __dir__(self) -> List[str]:
        names = set(super().__dir__())
        names.update(self._values)
        names.update(self._schema.children)
        names.update(self._schema.method_table)
        if self._parent is not None:
            names.add(self._parent.get_name())
        return sorted(name for name in names if not name.startswith("_"))

    def __str__(self) -> str:
        pieces = []
        node: Optional[Instance] = self
        while node is not None:
            args = ", ".join(
                f"{name}: {_display(node._values.get(name))}" for name in node.get_parameters()
            )
            pieces.append(f"{node.get_name()}({args})")
            node = node.get_parent()
        return ".".join(reversed(pieces))

    def __repr__(self) -> str:
        if self._hash is None:
            return f"<Instance {self} (under construction)>"
        return f"<Instance {self} hash={self._hash:#010x}>"


RESERVED_NAMES = frozenset(
    name for name in dir(Instance) if not name.startswith("_")
)


__all__ = ["Instance", "RESERVED_NAMES"]
