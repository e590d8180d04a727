"""Class model loading: interchange documents -> merged ClassNode list.

A model document is YAML or JSON holding one *source unit* or a list of
them. A unit describes the classes found in one source file::

    namespace: Shop.Orders
    file: src/Orders/Order.cs
    classes:
      - name: Order
        base: Entity
        interfaces: [IOrder]
        access: public
        loc: 40
        sloc: 31
        comment_lines: 4
        coupled_types: [Customer, "List<OrderLine>"]
        fields:
          - {name: _lines, type: "List<OrderLine>", access: private}
        properties:
          - {name: Id, type: int, access: public, get: true, set: true}
        methods:
          - name: Total
            access: public
            parameters: 0
            accessed_fields: [_lines]
            external_calls: [OrderLine.Amount]
            halstead: {n1: 12, n2: 15, eta1: 6, eta2: 8}
            flow:
              - kind: foreach
                body: {kind: if, condition: {kind: bool, ops: ["&&"]}}

Method ``flow`` trees use the shapes in ``models``: ``block`` (or a plain
list), ``if``, ``for``/``while``/``foreach``/``do`` (or ``loop``), ``switch``
with ``cases``, ``try`` with ``catches``, ``catch``, ``ternary``,
``goto``/``break``/``continue`` (or ``jump``), ``lambda``, ``bool`` and
``call``.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Optional, Set

import yaml

from .metrics.structural_complexity import (
    compute_cognitive_complexity,
    compute_cyclomatic_complexity,
)
from .models import (
    AccessModifier, Block, BoolChain, BoolOp, Call, Catch, ClassNode, FieldNode,
    FlowNode, HalsteadData, If, Jump, Lambda, Loop, LoopKind, MethodNode,
    PropertyNode, Switch, SwitchCase, Ternary,
)


MODEL_EXTENSIONS = (".yaml", ".yml", ".json")


# ---------------------------------------------------------------------------
# Types excluded from coupling
# ---------------------------------------------------------------------------

_PRIMITIVE_TYPES = frozenset({
    "void", "int", "string", "bool", "double", "float", "decimal", "long",
    "short", "byte", "char", "object", "var", "dynamic", "uint", "ulong",
    "ushort", "sbyte", "nint", "nuint",
})

_SYSTEM_TYPES = frozenset({
    "List", "Dictionary", "HashSet", "Queue", "Stack", "Array",
    "Task", "Action", "Func", "Predicate", "IEnumerable", "IList",
    "ICollection", "IDictionary", "ISet", "String", "Object",
    "Exception", "EventArgs", "EventHandler", "Nullable",
})


def is_ignored_type(type_name: str) -> bool:
    """Primitives (any case), well-known containers and ``System.*`` types."""
    return (
        type_name.lower() in _PRIMITIVE_TYPES
        or type_name in _SYSTEM_TYPES
        or type_name.startswith("System.")
    )


def normalize_type_names(type_name: str) -> List[str]:
    """Project-relevant type names inside one type expression.

    Arrays are unwrapped, generic types yield their base name and every
    argument, nullable markers are dropped and ignored types are filtered.
    """
    name = type_name.strip().rstrip("?").strip()
    if not name:
        return []
    if name.endswith("[]"):
        return normalize_type_names(name[:-2])
    if is_ignored_type(name):
        return []

    start = name.find("<")
    if start >= 0:
        end = name.rfind(">")
        if end < start:
            end = len(name)
        result = []
        base = name[:start].strip()
        if base and not is_ignored_type(base):
            result.append(base)
        for arg in _split_generic_arguments(name[start + 1:end]):
            result.extend(normalize_type_names(arg))
        return result

    return [name]


def _split_generic_arguments(args: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current = []
    for ch in args:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return [p for p in (s.strip() for s in parts) if p]


def _type_set(values: Any, where: str) -> Set[str]:
    names: Set[str] = set()
    for value in _as_list(values, where):
        names.update(normalize_type_names(str(value)))
    return names


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_model(source_units: Iterable[dict]) -> List[ClassNode]:
    """Build the merged class model from source units.

    Raises:
        ValueError: a unit or one of its records is malformed.
    """
    fragments: List[ClassNode] = []
    for i, unit in enumerate(source_units):
        fragments.extend(decode_unit(unit, where=f"unit[{i}]"))
    return assemble_model(fragments)


def decode_unit(unit: dict, where: str = "unit") -> List[ClassNode]:
    """Class fragments declared by one source unit (not yet merged)."""
    if not isinstance(unit, dict):
        raise ValueError(f"{where}: expected a mapping, got {type(unit).__name__}")
    namespace = str(unit.get("namespace") or "")
    file_path = str(unit.get("file") or "")
    return [
        _decode_class(record, namespace, file_path, f"{where}.classes[{i}]")
        for i, record in enumerate(_as_list(unit.get("classes"), f"{where}.classes"))
    ]


def assemble_model(fragments: Iterable[ClassNode]) -> List[ClassNode]:
    """Merge split definitions, add inherited members and drop self-coupling."""
    classes: List[ClassNode] = []
    by_full_name: Dict[str, ClassNode] = {}
    for fragment in fragments:
        existing = by_full_name.get(fragment.full_name)
        if existing is None:
            classes.append(fragment)
            by_full_name[fragment.full_name] = fragment
        else:
            merge_class(existing, fragment)

    _resolve_inheritance(classes)

    for cls in classes:
        cls.coupled_types.discard(cls.name)
        cls.coupled_types.discard(cls.full_name)
    return classes


def load_source_units(paths: Iterable[str]) -> List[dict]:
    """Read source units from model files or directories of model files.

    Raises:
        FileNotFoundError: a path does not exist.
        ValueError: a document is not a unit or list of units.
    """
    units: List[dict] = []
    for path in paths:
        for file_path in discover_model_files(path):
            units.extend(load_model_file(file_path))
    return units


def discover_model_files(path: str) -> List[str]:
    """*path* itself, or every model document below it in sorted order."""
    if os.path.isfile(path):
        return [path]
    if not os.path.isdir(path):
        raise FileNotFoundError(f"model path not found: {path}")
    found = []
    for dirpath, dirnames, filenames in os.walk(path):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            if name.endswith(MODEL_EXTENSIONS):
                found.append(os.path.join(dirpath, name))
    return found


def load_model_file(file_path: str) -> List[dict]:
    """Source units from one YAML or JSON document."""
    with open(file_path, "r", encoding="utf-8") as fh:
        if file_path.endswith(".json"):
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{file_path}: invalid JSON: {exc}") from exc
        else:
            try:
                data = yaml.safe_load(fh)
            except yaml.YAMLError as exc:
                raise ValueError(f"{file_path}: invalid YAML: {exc}") from exc

    if data is None:
        return []
    if isinstance(data, dict) and "units" in data:
        data = data["units"]
    units = data if isinstance(data, list) else [data]
    for i, unit in enumerate(units):
        if not isinstance(unit, dict):
            raise ValueError(f"{file_path}: unit {i} is not a mapping")
        unit.setdefault("file", file_path)
    return units


# ---------------------------------------------------------------------------
# Merging and inheritance
# ---------------------------------------------------------------------------

def merge_class(target: ClassNode, source: ClassNode):
    """Fold a split definition of the same class into *target*."""
    for iface in source.interfaces:
        if iface not in target.interfaces:
            target.interfaces.append(iface)
    target.methods.extend(source.methods)
    target.fields.extend(source.fields)
    target.properties.extend(source.properties)
    target.coupled_types |= source.coupled_types

    target.loc += source.loc
    target.sloc += source.sloc
    target.comment_lines += source.comment_lines
    target.method_declaration_count += source.method_declaration_count
    target.constructor_count += source.constructor_count
    target.property_accessor_count += source.property_accessor_count
    target.indexer_accessor_count += source.indexer_accessor_count
    target.event_accessor_count += source.event_accessor_count

    if not target.base_class_name and source.base_class_name:
        target.base_class_name = source.base_class_name
    target.is_abstract |= source.is_abstract
    target.is_sealed |= source.is_sealed
    target.is_static |= source.is_static
    target.is_interface |= source.is_interface


def _find_base(classes: List[ClassNode], base_name: str) -> Optional[ClassNode]:
    suffix = "." + base_name
    for cls in classes:
        if cls.name == base_name or cls.full_name == base_name or cls.full_name.endswith(suffix):
            return cls
    return None


def _resolve_inheritance(classes: List[ClassNode]):
    """Copy visible instance members of each resolvable base into its subclasses.

    Bases are completed before their subclasses so members propagate down
    the whole chain; cyclic chains stop at the first repeat.
    """
    done: Set[str] = set()

    def complete(cls: ClassNode, visiting: Set[str]):
        if cls.full_name in done or cls.full_name in visiting:
            return
        visiting.add(cls.full_name)
        parent = _find_base(classes, cls.base_class_name) if cls.base_class_name else None
        if parent is not None and parent is not cls:
            complete(parent, visiting)
            _inherit_members(cls, parent)
        visiting.discard(cls.full_name)
        done.add(cls.full_name)

    for cls in classes:
        complete(cls, set())


def _inherit_members(cls: ClassNode, parent: ClassNode):
    declared = {(m.name, m.parameter_count) for m in cls.methods}
    for method in parent.methods:
        if method.is_static or method.access is AccessModifier.PRIVATE:
            continue
        if (method.name, method.parameter_count) in declared:
            continue
        cls.methods.append(MethodNode(
            name=method.name,
            signature=method.signature,
            return_type=method.return_type,
            parameter_count=method.parameter_count,
            access=method.access,
            is_virtual=method.is_virtual,
            is_inherited=True,
        ))
        declared.add((method.name, method.parameter_count))

    field_names = {f.name for f in cls.fields}
    for fld in parent.fields:
        if fld.is_static or fld.access is AccessModifier.PRIVATE:
            continue
        if fld.name in field_names:
            continue
        cls.fields.append(FieldNode(
            name=fld.name,
            type_name=fld.type_name,
            access=fld.access,
            is_inherited=True,
        ))
        field_names.add(fld.name)


# ---------------------------------------------------------------------------
# Record decoding
# ---------------------------------------------------------------------------

def _decode_class(record: Any, namespace: str, file_path: str, where: str) -> ClassNode:
    if not isinstance(record, dict):
        raise ValueError(f"{where}: expected a mapping, got {type(record).__name__}")
    name = record.get("name")
    if not name or not isinstance(name, str):
        raise ValueError(f"{where}: class record needs a 'name'")
    where = f"{where} ({name})"

    ns = str(record.get("namespace", namespace) or "")
    full_name = str(record.get("full_name") or (f"{ns}.{name}" if ns else name))
    is_interface = bool(record.get("interface", False))

    methods = [
        _decode_method(m, is_interface, f"{where}.methods[{i}]")
        for i, m in enumerate(_as_list(record.get("methods"), f"{where}.methods"))
    ]
    fields = [
        _decode_field(f, f"{where}.fields[{i}]")
        for i, f in enumerate(_as_list(record.get("fields"), f"{where}.fields"))
    ]
    properties = [
        _decode_property(p, is_interface, f"{where}.properties[{i}]")
        for i, p in enumerate(_as_list(record.get("properties"), f"{where}.properties"))
    ]

    cls = ClassNode(
        name=name,
        full_name=full_name,
        namespace=ns,
        file_path=str(record.get("file", file_path) or ""),
        base_class_name=record.get("base") or None,
        interfaces=[str(i) for i in _as_list(record.get("interfaces"), f"{where}.interfaces")],
        access=_access(record.get("access"), AccessModifier.INTERNAL, where),
        is_abstract=bool(record.get("abstract", False)),
        is_sealed=bool(record.get("sealed", False)),
        is_static=bool(record.get("static", False)),
        is_interface=is_interface,
        methods=methods,
        fields=fields,
        properties=properties,
        coupled_types=_type_set(record.get("coupled_types"), f"{where}.coupled_types"),
        loc=_int(record, "loc", 0, where),
        sloc=_int(record, "sloc", 0, where),
        comment_lines=_int(record, "comment_lines", 0, where),
        line_start=_int(record, "line_start", 0, where),
        line_end=_int(record, "line_end", 0, where),
    )

    counts = record.get("counts")
    if counts is None:
        constructors = sum(1 for m in _as_list(record.get("methods"), where)
                           if isinstance(m, dict) and m.get("constructor"))
        cls.method_declaration_count = len(methods) - constructors
        cls.constructor_count = constructors
        cls.property_accessor_count = sum(
            int(p.has_getter) + int(p.has_setter) for p in properties
        )
    elif isinstance(counts, dict):
        cls.method_declaration_count = _int(counts, "methods", 0, where)
        cls.constructor_count = _int(counts, "constructors", 0, where)
        cls.property_accessor_count = _int(counts, "property_accessors", 0, where)
        cls.indexer_accessor_count = _int(counts, "indexer_accessors", 0, where)
        cls.event_accessor_count = _int(counts, "event_accessors", 0, where)
    else:
        raise ValueError(f"{where}: 'counts' must be a mapping")

    return cls


def _decode_method(record: Any, in_interface: bool, where: str) -> MethodNode:
    if not isinstance(record, dict):
        raise ValueError(f"{where}: expected a mapping, got {type(record).__name__}")
    name = record.get("name")
    if not name or not isinstance(name, str):
        raise ValueError(f"{where}: method record needs a 'name'")
    where = f"{where} ({name})"

    default_access = AccessModifier.PUBLIC if in_interface else AccessModifier.PRIVATE
    method = MethodNode(
        name=name,
        signature=str(record.get("signature") or ""),
        return_type=str(record.get("return_type") or ""),
        parameter_count=_int(record, "parameters", 0, where),
        access=_access(record.get("access"), default_access, where),
        is_static=bool(record.get("static", False)),
        is_virtual=bool(record.get("virtual", False)),
        is_abstract=bool(record.get("abstract", in_interface)),
        is_override=bool(record.get("override", False)),
        loc=_int(record, "loc", 0, where),
        accessed_fields={str(v) for v in _as_list(record.get("accessed_fields"), where)},
        called_methods={str(v) for v in _as_list(record.get("called_methods"), where)},
        external_method_calls={str(v) for v in _as_list(record.get("external_calls"), where)},
        used_types=_type_set(record.get("used_types"), f"{where}.used_types"),
        halstead=_decode_halstead(record.get("halstead"), where),
    )

    if "flow" in record:
        tree = decode_flow(record["flow"], f"{where}.flow")
        method.cyclomatic_complexity = compute_cyclomatic_complexity(tree)
        method.cognitive_complexity = compute_cognitive_complexity(tree, name)
    else:
        method.cyclomatic_complexity = max(1, _int(record, "cyclomatic", 1, where))
        method.cognitive_complexity = max(0, _int(record, "cognitive", 0, where))
    return method


def _decode_field(record: Any, where: str) -> FieldNode:
    if not isinstance(record, dict) or not record.get("name"):
        raise ValueError(f"{where}: field record needs a 'name'")
    return FieldNode(
        name=str(record["name"]),
        type_name=str(record.get("type") or ""),
        access=_access(record.get("access"), AccessModifier.PRIVATE, where),
        is_static=bool(record.get("static", False)),
        is_read_only=bool(record.get("readonly", False)),
        is_const=bool(record.get("const", False)),
    )


def _decode_property(record: Any, in_interface: bool, where: str) -> PropertyNode:
    if not isinstance(record, dict) or not record.get("name"):
        raise ValueError(f"{where}: property record needs a 'name'")
    default_access = AccessModifier.PUBLIC if in_interface else AccessModifier.PRIVATE
    return PropertyNode(
        name=str(record["name"]),
        type_name=str(record.get("type") or ""),
        access=_access(record.get("access"), default_access, where),
        has_getter=bool(record.get("get", False)),
        has_setter=bool(record.get("set", False)),
        is_static=bool(record.get("static", False)),
        is_virtual=bool(record.get("virtual", False)),
        is_override=bool(record.get("override", False)),
    )


def _decode_halstead(record: Any, where: str) -> Optional[HalsteadData]:
    if record is None:
        return None
    if not isinstance(record, dict):
        raise ValueError(f"{where}: 'halstead' must be a mapping")
    return HalsteadData(
        n1=_int(record, "n1", 0, where),
        n2=_int(record, "n2", 0, where),
        eta1=_int(record, "eta1", 0, where),
        eta2=_int(record, "eta2", 0, where),
    )


# ---------------------------------------------------------------------------
# Flow decoding
# ---------------------------------------------------------------------------

_LOOP_KINDS = {k.value: k for k in LoopKind}
_JUMP_KINDS = frozenset({"jump", "goto", "break", "continue"})
_BOOL_OPS = {op.value: op for op in BoolOp}
_BOOL_OPS.update({"and": BoolOp.AND, "or": BoolOp.OR, "coalesce": BoolOp.COALESCE})


def decode_flow(data: Any, where: str = "flow") -> Optional[FlowNode]:
    """Control-flow shape tree from its document form."""
    if data is None:
        return None
    if isinstance(data, list):
        return Block([decode_flow(item, f"{where}[{i}]") for i, item in enumerate(data)])
    if not isinstance(data, dict):
        raise ValueError(f"{where}: flow node must be a mapping or list")

    kind = str(data.get("kind", "")).lower()
    if kind == "block":
        return Block(_flow_list(data.get("body"), where))
    if kind == "if":
        return If(
            condition=decode_flow(data.get("condition"), f"{where}.condition"),
            then=decode_flow(data.get("then"), f"{where}.then"),
            orelse=decode_flow(data.get("else"), f"{where}.else"),
        )
    if kind in _LOOP_KINDS or kind == "loop":
        loop_kind = _LOOP_KINDS.get(kind) or _LOOP_KINDS.get(str(data.get("loop", "while")))
        if loop_kind is None:
            raise ValueError(f"{where}: unknown loop kind {data.get('loop')!r}")
        return Loop(
            kind=loop_kind,
            condition=decode_flow(data.get("condition"), f"{where}.condition"),
            body=decode_flow(data.get("body"), f"{where}.body"),
        )
    if kind == "switch":
        cases = []
        for i, case in enumerate(_as_list(data.get("cases"), f"{where}.cases")):
            if not isinstance(case, dict):
                raise ValueError(f"{where}.cases[{i}]: case must be a mapping")
            cases.append(SwitchCase(
                is_default=bool(case.get("default", False)),
                body=decode_flow(case.get("body"), f"{where}.cases[{i}].body"),
            ))
        return Switch(subject=decode_flow(data.get("subject"), f"{where}.subject"), cases=cases)
    if kind == "try":
        children = _flow_list(data.get("body"), f"{where}.body")
        for i, catch in enumerate(_as_list(data.get("catches"), f"{where}.catches")):
            children.append(_catch(catch, f"{where}.catches[{i}]"))
        children.extend(_flow_list(data.get("finally"), f"{where}.finally"))
        return Block(children)
    if kind == "catch":
        return _catch(data, where)
    if kind == "ternary":
        return Ternary(
            condition=decode_flow(data.get("condition"), f"{where}.condition"),
            when_true=decode_flow(data.get("then"), f"{where}.then"),
            when_false=decode_flow(data.get("else"), f"{where}.else"),
        )
    if kind in _JUMP_KINDS:
        return Jump(label=data.get("label"))
    if kind == "lambda":
        return Lambda(body=decode_flow(data.get("body"), f"{where}.body"))
    if kind == "bool":
        ops = []
        for op in _as_list(data.get("ops"), f"{where}.ops"):
            parsed = _BOOL_OPS.get(str(op).lower())
            if parsed is None:
                raise ValueError(f"{where}: unknown boolean operator {op!r}")
            ops.append(parsed)
        return BoolChain(ops)
    if kind == "call":
        return Call(
            target=str(data.get("target") or ""),
            arguments=_flow_list(data.get("args"), f"{where}.args"),
        )
    raise ValueError(f"{where}: unknown flow node kind {data.get('kind')!r}")


def _catch(data: Any, where: str) -> Catch:
    if not isinstance(data, dict):
        raise ValueError(f"{where}: catch must be a mapping")
    return Catch(
        filter=decode_flow(data.get("filter"), f"{where}.filter"),
        body=decode_flow(data.get("body"), f"{where}.body"),
    )


def _flow_list(data: Any, where: str) -> List[FlowNode]:
    if data is None:
        return []
    if isinstance(data, list):
        return [decode_flow(item, f"{where}[{i}]") for i, item in enumerate(data)]
    return [decode_flow(data, where)]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _as_list(value: Any, where: str) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    raise ValueError(f"{where}: expected a list, got {type(value).__name__}")


def _int(record: dict, key: str, default: int, where: str) -> int:
    value = record.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"{where}: '{key}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{where}: '{key}' must be an integer, got {value!r}")


def _access(value: Any, default: AccessModifier, where: str) -> AccessModifier:
    try:
        return AccessModifier.parse(value, default)
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from exc
