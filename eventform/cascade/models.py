"""Cascade definitions."""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field

from eventform.data.models import Option

Values = Mapping[str, str]
EdgeLoader = Callable[[str, Values], Awaitable[list[Option]]]
SourceLoader = Callable[[Values], Awaitable[list[Option]]]
OptionFilter = Callable[[list[Option], Values], list[Option]]
Activation = Callable[[str], bool]


@dataclass
class DependencyEdge:
    """A parent field whose value derives the options of its children.

    ``children[0]`` receives the derived options. The remaining children
    are descendants further down the chain; they are reset together with
    the first one whenever the parent changes.

    Attributes:
        parent: Key of the controlling field
        children: Ordered keys of the controlled fields
        loader: Fetches the raw options for a parent value
        config_filter: Allow-list filter; should return the input unchanged
            when nothing is configured
        when: Activation predicate; an inactive parent value behaves like
            an empty one
        collapse_if_single: Auto-select and hide a lone option
        priority: Label substrings sorted first
    """

    parent: str
    children: Sequence[str]
    loader: EdgeLoader
    config_filter: OptionFilter | None = None
    when: Activation | None = None
    collapse_if_single: bool = True
    priority: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.children:
            raise ValueError(f"Edge from '{self.parent}' has no children")
        self.children = tuple(self.children)
        self.priority = tuple(self.priority)

    @property
    def target(self) -> str:
        return self.children[0]

    def is_active(self, value: str) -> bool:
        if not value.strip():
            return False
        return self.when(value) if self.when is not None else True


@dataclass
class OptionSource:
    """Options for a field that has no parent (country, phone prefix)."""

    field: str
    loader: SourceLoader
    config_filter: OptionFilter | None = None
    collapse_if_single: bool = False
    priority: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.priority = tuple(self.priority)
