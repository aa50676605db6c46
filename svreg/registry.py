"""Look up tree sources and renderers by the name given on the command line.

Each implementation adds itself to a :class:`Registry` with a class
decorator, so the CLI builds its ``--source`` and ``--format`` choices
from :meth:`Registry.keys` and never names a concrete class::

    tree_source_registry = Registry("tree source")

    @tree_source_registry.register("verible")
    class VeribleTreeSource(TreeSource):
        ...

    source = tree_source_registry.create("verible", config=config)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Type, TypeVar

T = TypeVar("T")


class Registry:
    """Name-to-class table filled in by a class decorator."""

    def __init__(self, kind: str = "implementation") -> None:
        # ``kind`` is what the table holds, e.g. "renderer"
        self.kind = kind
        self._classes: Dict[str, Type[Any]] = {}

    def register(self, key: str) -> Callable[[Type[T]], Type[T]]:
        """Decorate a class to make it available as ``key``.

        A key can only be claimed once; a second claim raises
        :class:`ValueError` naming the class that holds it.
        """
        def add(cls: Type[T]) -> Type[T]:
            holder = self._classes.get(key)
            if holder is not None:
                raise ValueError(
                    f"Cannot register {cls.__name__} as {self.kind} '{key}': "
                    f"already taken by {holder.__name__}"
                )
            self._classes[key] = cls
            return cls
        return add

    def get(self, key: str) -> Type[Any]:
        try:
            return self._classes[key]
        except KeyError:
            raise KeyError(
                f"Unknown {self.kind} '{key}'; choose one of: {', '.join(self._classes)}"
            ) from None

    def create(self, key: str, **kwargs: Any) -> Any:
        """Build the ``key`` implementation, passing ``kwargs`` to its constructor."""
        return self.get(key)(**kwargs)

    def keys(self) -> List[str]:
        return list(self._classes)

    def __contains__(self, key: str) -> bool:
        return key in self._classes

    def __len__(self) -> int:
        return len(self._classes)
