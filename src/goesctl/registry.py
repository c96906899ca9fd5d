"""Name-based registry of interchangeable implementations.

Used by goesctl to select progress reporters from the command line.

Example:
    >>> from goesctl.registry import Registry
    >>> from goesctl.progress import ProgressReporter, SimpleProgressReporter
    >>>
    >>> reporters = Registry[ProgressReporter]("reporter")
    >>> reporters.register("simple", SimpleProgressReporter)
    >>> reporter = reporters.create("simple")
"""

from typing import Generic, TypeVar

T = TypeVar("T")


class Registry(Generic[T]):
    """Maps names to implementation classes of a common interface."""

    def __init__(self, name: str):
        self.registry_name = name
        self._items: dict[str, type[T]] = {}

    def get(self, name: str) -> type[T] | None:
        return self._items.get(name)

    def register(self, name: str, item_class: type[T]) -> None:
        if name in self._items:
            raise ValueError(f"{self.registry_name.capitalize()} '{name}' is already registered")
        self._items[name] = item_class

    def create(self, name: str, **kwargs) -> T:
        if name not in self._items:
            raise ValueError(
                f"{self.registry_name.capitalize()} '{name}' not found. "
                f"Specify one of the following: {self.list()}."
            )
        return self._items[name](**kwargs)

    def list(self) -> list[str]:
        return list(self._items.keys())

    def is_registered(self, name: str) -> bool:
        return name in self._items
