import pytest

from vkbd.config import validate_config
from vkbd.core.event_bus import EventBus
from vkbd.core.scheduler import ManualScheduler
from vkbd.ui.element import Element


class FakeKeyboard:
    """Stand-in for the main keyboard: named button elements + click log."""

    def __init__(self, names=()):
        self.buttons: dict[str, list[Element]] = {}
        self.clicked: list[tuple] = []
        for name in names:
            self.add(name)

    def add(self, name, count=1):
        elements = []
        for _ in range(count):
            el = Element('div', 'hg-button')
            el.set_attribute('data-skbtn', name)
            elements.append(el)
        self.buttons[name] = elements
        return elements

    def get_button_element(self, name):
        elements = self.buttons.get(name)
        if not elements:
            return None
        return elements[0] if len(elements) == 1 else list(elements)

    def handle_button_clicked(self, name, event=None):
        self.clicked.append((name, event))


@pytest.fixture
def options():
    return validate_config({})


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def document():
    return EventBus()


@pytest.fixture
def fake_keyboard():
    return FakeKeyboard()
