"""Element — minimal host UI node.

A DOM-like tree node the overlay renders into and the translator styles.
Hosts either use it directly (tests, headless hosts) or mirror it into a
real toolkit.
"""

from __future__ import annotations

import itertools
from typing import Any, Callable, Iterator

_ids = itertools.count(1)


class Element:
    """Tree node with attributes, classes, inline style and event handlers."""

    def __init__(self, tag: str = 'div', class_name: str = '', text: str = ''):
        self.tag = tag
        self.id = ''
        self.classes: list[str] = class_name.split()
        self.attributes: dict[str, str] = {}
        self.style: dict[str, str] = {}
        self.children: list[Element] = []
        self.parent: Element | None = None
        self.inner_html = text
        self._handlers: dict[str, Callable[[Any], Any]] = {}
        self._uid = next(_ids)
        self.focused = False
        self.scrolled_into_view = 0

    def __repr__(self) -> str:
        cls = '.'.join(self.classes)
        return f"<Element {self.tag}{'.' + cls if cls else ''}#{self._uid}>"

    # -- attributes --------------------------------------------------------

    def set_attribute(self, name: str, value: str) -> None:
        if name == 'style':
            self.style = {}
        self.attributes[name] = str(value)

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def remove_attribute(self, name: str) -> None:
        if name == 'style':
            self.style.clear()
        self.attributes.pop(name, None)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def remove_class(self, name: str) -> None:
        if name in self.classes:
            self.classes.remove(name)

    @property
    def text_content(self) -> str:
        parts = [self.inner_html] + [child.text_content for child in self.children]
        return ''.join(parts)

    @text_content.setter
    def text_content(self, value: str) -> None:
        for child in list(self.children):
            child.parent = None
        self.children = []
        self.inner_html = value

    # -- tree --------------------------------------------------------------

    def append(self, child: Element) -> Element:
        child.detach()
        child.parent = self
        self.children.append(child)
        return child

    def prepend(self, child: Element) -> Element:
        child.detach()
        child.parent = self
        self.children.insert(0, child)
        return child

    def detach(self) -> None:
        if self.parent is not None:
            try:
                self.parent.children.remove(self)
            except ValueError:
                pass
            self.parent = None

    def remove(self) -> None:
        """Remove from parent. Safe to call on an already detached node."""
        self.detach()

    @property
    def is_connected(self) -> bool:
        return self.parent is not None

    def root(self) -> Element:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def walk(self) -> Iterator[Element]:
        yield self
        for child in list(self.children):
            yield from child.walk()

    def query_all(self, role: str | None = None, class_name: str | None = None) -> list[Element]:
        found = []
        for node in self.walk():
            if role is not None and node.get_attribute('role') != role:
                continue
            if class_name is not None and not node.has_class(class_name):
                continue
            found.append(node)
        return found

    def query(self, role: str | None = None, class_name: str | None = None) -> Element | None:
        matches = self.query_all(role=role, class_name=class_name)
        return matches[0] if matches else None

    # -- behaviour ---------------------------------------------------------

    def on(self, event_name: str, handler: Callable[[Any], Any] | None) -> None:
        """Set (or clear with None) the single handler for *event_name*."""
        if handler is None:
            self._handlers.pop(event_name, None)
        else:
            self._handlers[event_name] = handler

    def has_handler(self, event_name: str) -> bool:
        return event_name in self._handlers

    def fire(self, event_name: str, payload: Any = None) -> bool:
        """Invoke the handler for *event_name*. Returns False if none is set."""
        handler = self._handlers.get(event_name)
        if handler is None:
            return False
        handler(payload)
        return True

    def click(self, payload: Any = None) -> bool:
        return self.fire('click', payload)

    def focus(self) -> None:
        for node in self.root().walk():
            node.focused = False
        self.focused = True

    def scroll_into_view(self) -> None:
        self.scrolled_into_view += 1
