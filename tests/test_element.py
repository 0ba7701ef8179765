"""Tests for the Element host primitive."""

from __future__ import annotations

from vkbd.ui.element import Element


def test_tree_operations():
    root = Element('body')
    a = root.append(Element('div', 'a'))
    b = root.prepend(Element('div', 'b'))
    assert root.children == [b, a]
    assert a.root() is root
    a.remove()
    assert root.children == [b]
    assert not a.is_connected
    a.remove()  # second removal is harmless


def test_append_moves_node():
    first, second = Element(), Element()
    node = first.append(Element())
    second.append(node)
    assert first.children == [] and second.children == [node]


def test_style_cleared_by_remove_attribute():
    el = Element()
    el.style['background'] = 'red'
    el.remove_attribute('style')
    assert el.style == {}


def test_classes():
    el = Element('div', 'x y')
    el.add_class('y')
    el.add_class('z')
    el.remove_class('x')
    el.remove_class('missing')
    assert el.classes == ['y', 'z']


def test_query_by_role_and_class():
    root = Element()
    opt = root.append(Element('li', 'item'))
    opt.set_attribute('role', 'option')
    root.append(Element('li', 'item'))
    assert root.query_all(role='option') == [opt]
    assert len(root.query_all(class_name='item')) == 2
    assert root.query(class_name='nothing') is None


def test_text_content():
    root = Element(text='a')
    root.append(Element(text='b'))
    assert root.text_content == 'ab'
    root.text_content = 'c'
    assert root.children == [] and root.text_content == 'c'


def test_handlers():
    el = Element()
    seen = []
    assert el.click() is False
    el.on('click', seen.append)
    assert el.click('evt') is True
    el.on('click', None)
    assert not el.has_handler('click')
    assert seen == ['evt']


def test_focus_is_exclusive_within_tree():
    root = Element()
    a = root.append(Element())
    b = root.append(Element())
    a.focus()
    b.focus()
    assert b.focused and not a.focused
