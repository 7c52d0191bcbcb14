"""Option collection for select components.

Options come from two sources, collected in this order:
- Declarative entries (e.g. ``<ak-option>`` children of a template tag)
- A record source: any sequence of objects or mappings, read through an
  accessor that returns ``(value, text)`` for each record

Usage:
    from alpinekit.options import OptionCollector, field_accessor

    collector = OptionCollector()
    collector.add("", "Choose a country")
    collector.add_records(
        countries,
        accessor=field_accessor("code", "name"),
        current="ca",
    )
    options = collector.collect()
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from . import log


class Option(BaseModel):
    """A single selectable option.

    ``value`` falls back to an empty string when missing and ``text``
    falls back to the value. Duplicate values are allowed.
    """

    model_config = ConfigDict(frozen=True)

    value: str = ""
    text: str | None = None
    selected: bool = False
    disabled: bool = False

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> str:
        """Accept any value and use its string form (None becomes '')."""
        return "" if v is None else str(v)

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        """Use the string form of non-string text."""
        return None if v is None else str(v)

    @model_validator(mode="after")
    def set_text_from_value(self) -> Option:
        """If text is not provided, use value as text."""
        if self.text is None:
            # Can't modify frozen model, so we use object.__setattr__
            object.__setattr__(self, "text", self.value)
        return self

    def to_client(self) -> dict[str, Any]:
        """The record embedded in the client-side options list."""
        return {"value": self.value, "text": self.text, "disabled": self.disabled}


Accessor = Callable[[Any], tuple[Any, Any]]


def _read_field(record: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or attribute; None when absent."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def field_accessor(value_field: str = "Value", text_field: str = "Text") -> Accessor:
    """Build an accessor that reads two named fields from each record.

    Parameters
    ----------
    value_field : str
        Field holding the option value (default "Value").
    text_field : str
        Field holding the display text (default "Text").

    Returns
    -------
    Callable
        ``accessor(record) -> (value, text)``; a missing field reads as None.
    """

    def accessor(record: Any) -> tuple[Any, Any]:
        return _read_field(record, value_field), _read_field(record, text_field)

    accessor.__name__ = f"field_accessor({value_field!r}, {text_field!r})"
    return accessor


def is_current(value: str, current: Any, multiple: bool = False) -> bool:
    """Decide whether an option value matches the bound current value.

    With ``multiple`` and a non-string collection, the value must equal the
    string form of one of its items; otherwise the string form of
    ``current`` must equal ``value`` exactly.
    No case or whitespace normalisation is applied.
    """
    if current is None:
        return False
    if multiple and isinstance(current, Iterable) and not isinstance(current, (str, bytes)):
        return any(str(item) == value for item in current)
    return str(current) == value


class OptionCollector:
    """Accumulates options in order from declarative entries and records."""

    def __init__(self) -> None:
        self._declared: list[Option] = []
        self._records: list[Option] = []

    def add(
        self,
        value: Any,
        text: Any = None,
        selected: bool = False,
        disabled: bool = False,
    ) -> Option:
        """Add a declarative option and return it."""
        option = Option(value=value, text=text, selected=selected, disabled=disabled)
        self._declared.append(option)
        return option

    def add_records(
        self,
        records: Iterable[Any] | None,
        accessor: Accessor | None = None,
        current: Any = None,
        multiple: bool = False,
    ) -> list[Option]:
        """Append one option per non-None record.

        Parameters
        ----------
        records : iterable or None
            Arbitrary records (objects or mappings). None entries are skipped.
        accessor : callable, optional
            ``accessor(record) -> (value, text)``. Defaults to reading the
            ``Value`` and ``Text`` fields.
        current : Any
            The bound current value (a string, or a collection of strings
            for multi-select) used to mark options as selected.
        multiple : bool
            Whether the select allows several values.

        Returns
        -------
        list[Option]
            The options added by this call.
        """
        if records is None:
            return []
        accessor = accessor or field_accessor()

        added = []
        for index, record in enumerate(records):
            if record is None:
                continue
            value, text = _safe_access(accessor, record, index)
            value = "" if value is None else str(value)
            option = Option(
                value=value,
                text=value if text is None else text,
                selected=is_current(value, current, multiple),
            )
            added.append(option)

        self._records.extend(added)
        return added

    def collect(self) -> list[Option]:
        """Return the collected options: declarative first, then records."""
        return [*self._declared, *self._records]

    def __len__(self) -> int:
        return len(self._declared) + len(self._records)


def _safe_access(accessor: Accessor, record: Any, index: int) -> tuple[Any, Any]:
    """Run the accessor, treating a failure as unresolved fields."""
    try:
        value, text = accessor(record)
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
        log.debug(f"Option record {index} could not be read ({exc}); using empty value")
        return None, None
    return value, text


def collect_options(
    declared: Sequence[Option | Mapping[str, Any] | str] = (),
    records: Iterable[Any] | None = None,
    accessor: Accessor | None = None,
    current: Any = None,
    multiple: bool = False,
) -> list[Option]:
    """Collect options from declarative entries and an optional record source.

    Declarative entries may be ``Option`` objects, dicts of Option fields
    or plain strings (used as both value and text).
    """
    collector = OptionCollector()
    for entry in declared:
        if isinstance(entry, Option):
            collector.add(entry.value, entry.text, entry.selected, entry.disabled)
        elif isinstance(entry, Mapping):
            collector.add(**entry)
        elif isinstance(entry, str):
            collector.add(entry)
        else:
            raise TypeError(f"Invalid option type: {type(entry)}")
    collector.add_records(records, accessor=accessor, current=current, multiple=multiple)
    return collector.collect()
