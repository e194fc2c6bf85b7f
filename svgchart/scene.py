"""Retained scene graph with keyed reconciliation.

A ``Node`` tree is the chart's graphical state between renders. ``reconcile``
partitions incoming data against the keys already present into enter, update
and exit sets; ``Node.join`` applies that partition to a parent's children so
retained elements keep their identity across renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Callable, Iterable, Iterator
import xml.etree.ElementTree as ET

from svgchart.errors import ChartDataError


LOGGER = logging.getLogger(__name__)
SVG_NS = "http://www.w3.org/2000/svg"

_UNSET: Any = object()

EventHandler = Callable[["Node", Any], None]


@dataclass(frozen=True)
class Reconciliation:
    enter: tuple[tuple[str, Any], ...]
    update: tuple[tuple[str, Any], ...]
    exit: tuple[str, ...]
    order: tuple[str, ...]


def reconcile(
    previous_keys: Iterable[str],
    data: Iterable[Any],
    key: Callable[[Any], Any],
    *,
    unique: bool = False,
) -> Reconciliation:
    """Partition ``data`` against ``previous_keys`` by ``key``.

    Keys are compared as strings. With ``unique`` a repeated key raises
    ``ChartDataError``; otherwise later duplicates are dropped.
    """
    previous = list(previous_keys)
    known = set(previous)
    seen: set[str] = set()
    enter: list[tuple[str, Any]] = []
    update: list[tuple[str, Any]] = []
    order: list[str] = []
    for datum in data:
        k = str(key(datum))
        if k in seen:
            if unique:
                raise ChartDataError(f"duplicate key in join: {k!r}")
            LOGGER.debug("dropping datum with duplicate key %r", k)
            continue
        seen.add(k)
        order.append(k)
        if k in known:
            update.append((k, datum))
        else:
            enter.append((k, datum))
    exit_keys = tuple(k for k in previous if k not in seen)
    return Reconciliation(enter=tuple(enter), update=tuple(update), exit=exit_keys, order=tuple(order))


@dataclass
class Join:
    enter: list["Node"]
    update: list["Node"]
    exit: list["Node"]
    nodes: list["Node"]


@dataclass(eq=False)
class Node:
    tag: str
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)
    text: str | None = None
    key: str | None = None
    datum: Any = None
    parent: "Node | None" = field(default=None, repr=False)
    handlers: dict[str, EventHandler] = field(default_factory=dict, repr=False)

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple(str(self.attrs.get("class", "")).split())

    def matches(self, tag: str, cls: str | None = None, *, id: str | None = None) -> bool:
        if self.tag != tag:
            return False
        if cls is not None and cls not in self.classes:
            return False
        if id is not None and self.attrs.get("id") != id:
            return False
        return True

    def attr(self, name: str, value: Any = _UNSET) -> Any:
        if value is _UNSET:
            return self.attrs.get(name)
        if value is None:
            self.attrs.pop(name, None)
        else:
            self.attrs[name] = value
        return self

    def set_text(self, text: str | None) -> "Node":
        self.text = text
        return self

    def append(self, tag: str, cls: str | None = None) -> "Node":
        child = Node(tag=tag, parent=self)
        if cls:
            child.attrs["class"] = cls
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is None:
            return
        self.parent.children = [c for c in self.parent.children if c is not self]
        self.parent = None

    def select(self, tag: str, cls: str | None = None, *, id: str | None = None) -> "Node | None":
        for child in self.children:
            if child.matches(tag, cls, id=id):
                return child
        return None

    def select_all(self, tag: str, cls: str | None = None) -> list["Node"]:
        return [child for child in self.children if child.matches(tag, cls)]

    def select_or_append(self, tag: str, cls: str | None = None, *, id: str | None = None) -> "Node":
        found = self.select(tag, cls, id=id)
        if found is not None:
            return found
        created = self.append(tag, cls)
        if id is not None:
            created.attrs["id"] = id
        return created

    def find_all(self, tag: str, cls: str | None = None) -> list["Node"]:
        return [node for node in self.walk() if node is not self and node.matches(tag, cls)]

    def walk(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def join(
        self,
        data: Iterable[Any],
        *,
        key: Callable[[Any], Any],
        tag: str,
        cls: str | None = None,
        unique: bool = False,
    ) -> Join:
        """Reconcile the ``tag.cls`` children of this node with ``data``.

        Entered nodes are appended, exited nodes removed, and updated nodes
        keep their identity with ``datum`` rebound. ``Join.nodes`` lists the
        current nodes in data order.
        """
        existing = {child.key: child for child in self.select_all(tag, cls) if child.key is not None}
        plan = reconcile(existing.keys(), data, key, unique=unique)

        exited = [existing[k] for k in plan.exit]
        for node in exited:
            node.remove()
        updated: list[Node] = []
        for k, datum in plan.update:
            node = existing[k]
            node.datum = datum
            updated.append(node)
        entered: list[Node] = []
        for k, datum in plan.enter:
            node = self.append(tag, cls)
            node.key = k
            node.datum = datum
            entered.append(node)

        by_key = {node.key: node for node in updated + entered}
        nodes = [by_key[k] for k in plan.order]
        return Join(enter=entered, update=updated, exit=exited, nodes=nodes)

    def on(self, event: str, handler: EventHandler | None = _UNSET) -> Any:
        if handler is _UNSET:
            return self.handlers.get(event)
        if handler is None:
            self.handlers.pop(event, None)
        else:
            self.handlers[event] = handler
        return self

    def dispatch(self, event: str) -> bool:
        handler = self.handlers.get(event)
        if handler is None:
            return False
        handler(self, self.datum)
        return True

    def to_element(self) -> ET.Element:
        elem = ET.Element(self.tag, {name: _format_attr(value) for name, value in self.attrs.items()})
        if self.text is not None:
            elem.text = self.text
        for child in self.children:
            elem.append(child.to_element())
        return elem

    def to_svg(self) -> str:
        elem = self.to_element()
        if self.tag == "svg":
            elem.set("xmlns", SVG_NS)
        return ET.tostring(elem, encoding="unicode")


def _format_attr(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def format_number(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    out = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out
