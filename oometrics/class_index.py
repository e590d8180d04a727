"""Name resolution across the class model."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import ClassNode


class ClassIndex:
    """Index of all classes for cross-class lookups.

    Two resolution rules are supported:

    * :meth:`resolve` (class metrics): exact full name, else the first class
      in model order whose simple name equals the target or whose full name
      ends with ``"." + target``.
    * :meth:`resolve_for_package` (package metrics): exact full name, then
      simple name, then the first class whose simple name is a dotted suffix
      of the target.

    Every name referenced by the model is resolved once when the index is
    built; lookups afterwards never mutate the index.
    """

    def __init__(self, classes: Iterable[ClassNode]):
        self.classes: List[ClassNode] = list(classes)
        self.by_full_name: Dict[str, ClassNode] = {}
        self.by_simple_name: Dict[str, ClassNode] = {}
        for cls in self.classes:
            self.by_full_name.setdefault(cls.full_name, cls)
            self.by_simple_name.setdefault(cls.name, cls)

        self._resolved: Dict[str, Optional[ClassNode]] = {}
        self._package_resolved: Dict[str, Optional[ClassNode]] = {}
        for cls in self.classes:
            for name in _referenced_names(cls):
                if name not in self._resolved:
                    self._resolved[name] = self._lookup(name)
                if name not in self._package_resolved:
                    self._package_resolved[name] = self._lookup_for_package(name)

    def resolve(self, name: Optional[str]) -> Optional[ClassNode]:
        if not name:
            return None
        if name in self._resolved:
            return self._resolved[name]
        return self._lookup(name)

    def resolve_for_package(self, name: Optional[str]) -> Optional[ClassNode]:
        if not name:
            return None
        if name in self._package_resolved:
            return self._package_resolved[name]
        return self._lookup_for_package(name)

    # -- lookups -----------------------------------------------------------

    def _lookup(self, name: str) -> Optional[ClassNode]:
        exact = self.by_full_name.get(name)
        if exact is not None:
            return exact
        suffix = "." + name
        for cls in self.classes:
            if cls.name == name or cls.full_name.endswith(suffix):
                return cls
        return None

    def _lookup_for_package(self, name: str) -> Optional[ClassNode]:
        exact = self.by_full_name.get(name)
        if exact is not None:
            return exact
        simple = self.by_simple_name.get(name)
        if simple is not None:
            return simple
        for cls in self.classes:
            if name.endswith("." + cls.name):
                return cls
        return None


def _referenced_names(cls: ClassNode) -> List[str]:
    names = []
    if cls.base_class_name:
        names.append(cls.base_class_name)
    names.extend(cls.interfaces)
    names.extend(sorted(cls.referenced_type_names))
    return names
