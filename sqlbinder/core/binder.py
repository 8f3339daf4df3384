"""Parameter binding for parsed SQL templates.

A binder accumulates named and positional values for one ``ParsedTemplate``
and resolves them into the ordered parameter list that matches the ``?``
placeholders of the normalized SQL.

Positional values are accepted in two layouts:

- one value per placeholder of any kind, aligned by occurrence index
- one value per ``?`` placeholder only, for templates whose named
  placeholders are bound by name

The most recent call decides. A value bound by name replaces an aligned
positional value bound before it, and an aligned positional binding
replaces the values bound by name before it. Under the ``?``-only layout
named placeholders always take their values by name.

Binders are single-owner builders. Use ``copy`` to give each concurrent
caller its own instance.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, Optional, Union

from typing_extensions import Self

from sqlbinder.core.cache import get_template_cache
from sqlbinder.core.config import get_global_config
from sqlbinder.core.parameters import ParsedTemplate, PlaceholderParser
from sqlbinder.exceptions import ArityMismatchError, UnboundPlaceholderError
from sqlbinder.loader import load_sql_resource, load_sql_text

if TYPE_CHECKING:
    from sqlbinder.core.cache import TemplateCache

__all__ = ("BindingState", "PlainSql", "TemplateBinder")


class BindingState(str, Enum):
    """Progress of a binder towards a resolvable parameter list."""

    UNBOUND = "unbound"
    PARTIALLY_BOUND = "partially_bound"
    RESOLVED = "resolved"

    def __str__(self) -> str:
        return self.value


class TemplateBinder:
    """Builder that binds values to the placeholders of a parsed template."""

    __slots__ = ("_named", "_positional", "_superseded", "_template")

    def __init__(self, template: ParsedTemplate) -> None:
        self._template = template
        self._named: dict[str, Any] = {}
        self._positional: Optional[tuple[Any, ...]] = None
        self._superseded: frozenset[str] = frozenset()

    @property
    def template(self) -> ParsedTemplate:
        return self._template

    @property
    def named_parameters(self) -> "dict[str, Any]":
        """Copy of the values bound by name."""
        return dict(self._named)

    @property
    def positional_parameters(self) -> "Optional[tuple[Any, ...]]":
        return self._positional

    @property
    def state(self) -> BindingState:
        """Current binding state, derived from the bound values."""
        if not self._named and self._positional is None:
            return BindingState.RESOLVED if not self._template.placeholders else BindingState.UNBOUND
        if self._first_unresolved() is None:
            return BindingState.RESOLVED
        return BindingState.PARTIALLY_BOUND

    @property
    def is_resolvable(self) -> bool:
        return self._first_unresolved() is None

    def bind_positional(self, values: "Sequence[Any]") -> Self:
        """Bind positional values, replacing any earlier positional binding.

        Args:
            values: One value per placeholder, or one value per ``?`` placeholder

        Raises:
            ArityMismatchError: If the count matches neither layout.

        Returns:
            This binder
        """
        count = len(values)
        total = self._template.placeholder_count
        if count != total and count != self._template.positional_count:
            positional = self._template.positional_count
            message = None
            if positional != total:
                message = (
                    f"SQL expects {total} parameters ({positional} for '?' placeholders alone) "
                    f"but {count} were provided"
                )
            raise ArityMismatchError(total, count, self._template.source_sql, message)
        self._positional = tuple(values)
        # Aligned values replace names bound so far; slot values never do.
        self._superseded = frozenset(self._named) if count == total else frozenset()
        return self

    def bind_named(self, name: str, value: Any) -> Self:
        """Bind ``value`` to every occurrence of ``:name``.

        Binding the same name again replaces the earlier value. It also
        replaces the aligned positional value of its occurrences. Names that
        do not occur in the template are kept and ignored at resolve time.

        Args:
            name: Placeholder name without the leading colon
            value: Value to bind

        Returns:
            This binder
        """
        self._named[name] = value
        self._superseded -= {name}
        return self

    def bind_all(self, parameters: "Optional[Mapping[str, Any]]" = None, /, **kwargs: Any) -> Self:
        """Bind several names at once."""
        if parameters:
            self._named.update(parameters)
            self._superseded = self._superseded.difference(parameters)
        if kwargs:
            self._named.update(kwargs)
            self._superseded = self._superseded.difference(kwargs)
        return self

    def resolve(self) -> "tuple[Any, ...]":
        """Compute the parameter values in placeholder order.

        Does not modify the binder and may be called any number of times.

        Raises:
            UnboundPlaceholderError: If a named placeholder has no value.
            ArityMismatchError: If a ``?`` placeholder has no positional value.

        Returns:
            One value per placeholder of the normalized SQL
        """
        template = self._template
        named = self._named
        positional = self._positional
        aligned = positional is not None and len(positional) == template.placeholder_count
        if aligned and self._superseded.issuperset(named):
            return positional  # type: ignore[return-value]

        values: list[Any] = []
        slot = 0
        for placeholder in template.placeholders:
            name = placeholder.name
            if name is not None:
                if name in named and name not in self._superseded:
                    values.append(named[name])
                elif aligned:
                    values.append(positional[placeholder.occurrence_index])  # type: ignore[index]
                else:
                    raise UnboundPlaceholderError(name, placeholder.occurrence_index, template.source_sql)
                continue

            if positional is None:
                raise ArityMismatchError(
                    template.positional_count,
                    0,
                    template.source_sql,
                    f"No positional parameters bound for '?' placeholder at occurrence {placeholder.occurrence_index}",
                )
            values.append(positional[placeholder.occurrence_index] if aligned else positional[slot])
            slot += 1
        return tuple(values)

    def get_normalized_sql(self) -> str:
        return self._template.normalized_sql

    def unbound_names(self) -> "tuple[str, ...]":
        """Placeholder names that would be unresolved at resolve time."""
        positional = self._positional
        if positional is not None and len(positional) == self._template.placeholder_count:
            return ()
        return tuple(name for name in self._template.parameter_names if name not in self._named)

    def copy(self) -> Self:
        """Return an independent binder with the same bindings."""
        duplicate = type(self)(self._template)
        duplicate._named = dict(self._named)
        duplicate._positional = self._positional
        duplicate._superseded = self._superseded
        return duplicate

    def _first_unresolved(self) -> "Optional[int]":
        positional = self._positional
        if positional is not None and len(positional) == self._template.placeholder_count:
            return None
        for placeholder in self._template.placeholders:
            name = placeholder.name
            if name is not None:
                if name not in self._named:
                    return placeholder.occurrence_index
            elif positional is None:
                return placeholder.occurrence_index
        return None

    # Builder aliases
    def set(self, name: str, value: Any) -> Self:
        """Alias for :meth:`bind_named`."""
        return self.bind_named(name, value)

    def with_(self, *values: Any) -> Self:
        """Variadic alias for :meth:`bind_positional`."""
        return self.bind_positional(values)

    def get_sql(self) -> str:
        """Alias for :meth:`get_normalized_sql`."""
        return self.get_normalized_sql()

    @property
    def sql(self) -> str:
        return self._template.normalized_sql

    def merged_parameters(self) -> "tuple[Any, ...]":
        """Alias for :meth:`resolve`."""
        return self.resolve()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self._template.normalized_sql!r}, state={self.state.value!r})"


class PlainSql(TemplateBinder):
    """Binder constructed directly from SQL text, a file or a package resource.

    Parsing goes through the process-wide template cache unless caching is
    disabled in the global configuration or an explicit cache is given.
    """

    __slots__ = ()

    @classmethod
    def parse(cls, sql: str, *, cache: "Optional[TemplateCache]" = None) -> Self:
        """Create a binder for ``sql``.

        Args:
            sql: SQL template text
            cache: Template cache to use instead of the default one

        Returns:
            New binder
        """
        if cache is not None:
            return cls(cache.get_or_parse(sql))
        config = get_global_config()
        if config.cache_config.enable_caching:
            return cls(get_template_cache().get_or_parse(sql))
        return cls(PlaceholderParser(config.parser_config).parse(sql))

    @classmethod
    def from_file(cls, path: Union[str, Path], *, cache: "Optional[TemplateCache]" = None) -> Self:
        """Create a binder from a SQL file."""
        return cls.parse(load_sql_text(path), cache=cache)

    @classmethod
    def from_resource(
        cls, package: Union[str, ModuleType], resource: str, *, cache: "Optional[TemplateCache]" = None
    ) -> Self:
        """Create a binder from a SQL file shipped inside ``package``."""
        return cls.parse(load_sql_resource(package, resource), cache=cache)
