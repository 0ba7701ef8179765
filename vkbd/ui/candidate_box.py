"""CandidateBox — accessible picker for keys with several candidate outputs.

A ``CandidateBox`` splits a space separated candidate string into pages,
renders the current page as a listbox under an anchor element and owns
keyboard navigation while open. Only one box may be open per
``CandidateBoxManager``; opening another forces the current owner to close.

Closing is two-phase: ``destroy()`` detaches listeners and moves the box to
CLOSING, and a short timer later removes the rendered element and moves it
to CLOSED.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any, Callable, Mapping, Optional, Sequence

import vkbd.log  # registers TRACE level and logger.trace()
from vkbd.core.event_bus import EventBus
from vkbd.core.events import Event, EventType, KeyboardEvent, PointerEvent
from vkbd.core.scheduler import Scheduler
from vkbd.ui.element import Element

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 5
DEFAULT_CLOSE_DELAY = 0.15
LIVE_REGION_CLASS = 'hg-live-region'

OnSelect = Callable[[str, Any], None]


class CandidateBoxState(Enum):
    CLOSED = auto()
    OPEN = auto()
    CLOSING = auto()


def chunk_array(items: Sequence[str], size: int) -> list[list[str]]:
    """Split *items* into consecutive chunks of *size* (last may be shorter)."""
    size = max(1, int(size))
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class CandidateBoxManager:
    """Grants ownership of the single visible candidate box."""

    def __init__(self):
        self._owner: CandidateBox | None = None

    @property
    def owner(self) -> CandidateBox | None:
        return self._owner

    @property
    def is_open(self) -> bool:
        return self._owner is not None

    def acquire(self, box: CandidateBox) -> None:
        """Make *box* the owner, closing any previous owner first."""
        previous = self._owner
        if previous is not None and previous is not box:
            logger.debug("Candidate box ownership moves from %r to %r", previous, box)
            self._owner = None
            previous.destroy()
        self._owner = box

    def release(self, box: CandidateBox) -> None:
        if self._owner is box:
            self._owner = None


DEFAULT_MANAGER = CandidateBoxManager()


class CandidateBox:
    """Paginated, keyboard navigable candidate listbox."""

    def __init__(
        self,
        document: EventBus,
        get_options: Callable[[], Mapping],
        scheduler: Optional[Scheduler] = None,
        manager: Optional[CandidateBoxManager] = None,
        live_region: Optional[Element] = None,
    ):
        self.document = document
        self.get_options = get_options
        self.scheduler = scheduler
        self.manager = manager if manager is not None else DEFAULT_MANAGER
        self.live_region = live_region

        self.state = CandidateBoxState.CLOSED
        self.element: Element | None = None
        self.pages: list[list[str]] = []
        self.page_index = 0
        self.active_index = 0
        self.candidate_options: list[Element] = []
        self.listeners_attached = False

        self._listbox: Element | None = None
        self._anchor: Element | None = None
        self._on_item_selected: Callable[[str, Any], None] | None = None
        self._generation = 0

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def _options(self) -> Mapping:
        return self.get_options() or {}

    @property
    def page_size(self) -> int:
        return int(self._options().get('layout_candidates_page_size') or DEFAULT_PAGE_SIZE)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def option_count(self) -> int:
        return len(self.candidate_options)

    @property
    def is_open(self) -> bool:
        return self.state is CandidateBoxState.OPEN

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def show(self, candidates: str, anchor: Element, on_select: OnSelect) -> None:
        """Open the box for *candidates* under *anchor*."""
        tokens = (candidates or '').split()
        if not tokens:
            return

        self.manager.acquire(self)
        if self.element is not None:
            self.element.remove()
            self.element = None

        self._generation += 1
        generation = self._generation
        self.state = CandidateBoxState.OPEN
        self.pages = chunk_array(tokens, self.page_size)
        self.page_index = 0
        self._anchor = anchor

        def on_item_selected(token: str, event: Any) -> None:
            # Entries of an earlier show() stay rendered until removal fires
            if generation != self._generation or self.state is not CandidateBoxState.OPEN:
                return
            logger.debug("Candidate selected: %r", token)
            try:
                on_select(token, event)
            except Exception:
                logger.exception("Candidate on_select callback failed")
            self.document.publish(Event(type=EventType.CANDIDATE_SELECTED, data=token))
            self.destroy()

        self._on_item_selected = on_item_selected
        logger.debug("Candidate box opened: %d candidates, %d pages", len(tokens), len(self.pages))
        self.render_page(self.pages, anchor, 0, on_item_selected)

    def render_page(
        self,
        pages: list[list[str]],
        anchor: Element,
        page_index: int,
        on_item_selected: Callable[[str, Any], None],
    ) -> None:
        """Replace whatever is rendered with page *page_index*."""
        if not pages:
            return
        page_index = min(max(0, page_index), len(pages) - 1)
        self.page_index = page_index

        if self.element is not None:
            self.element.remove()

        options = self._options()
        display = options.get('display') or {}
        use_touch = bool(options.get('use_touch_events'))
        select_event = 'touchstart' if use_touch else 'click'

        container = Element('div', 'hg-candidate-box')
        container.set_attribute('role', 'dialog')
        container.set_attribute('aria-modal', 'true')
        container.set_attribute('aria-label', 'Candidates')

        listbox = Element('ul', 'hg-candidate-box-list')
        listbox.set_attribute('role', 'listbox')
        listbox.set_attribute('tabindex', '0')

        for i, token in enumerate(pages[page_index]):
            item = Element('li', 'hg-candidate-box-list-item', text=display.get(token) or token)
            item.id = f'candidate-{i}'
            item.set_attribute('role', 'option')
            item.set_attribute('tabindex', '-1')
            item.set_attribute('aria-selected', 'true' if i == 0 else 'false')

            def select(event: Any = None, token: str = token, item: Element = item) -> None:
                if event is None:
                    event = PointerEvent(type=select_event, target=item)
                on_item_selected(token, event)

            item.on(select_event, select)
            listbox.append(item)

        has_prev = page_index > 0
        has_next = page_index < len(pages) - 1
        prev_btn = self._page_button('hg-candidate-box-prev', 'Previous candidates', has_prev)
        next_btn = self._page_button('hg-candidate-box-next', 'Next candidates', has_next)
        generation = self._generation
        prev_btn.on('click', lambda _e=None: self._turn_page(page_index - 1, has_prev, generation))
        next_btn.on('click', lambda _e=None: self._turn_page(page_index + 1, has_next, generation))

        container.append(prev_btn)
        container.append(listbox)
        container.append(next_btn)

        anchor.prepend(container)
        self.element = container
        self._listbox = listbox

        listbox.focus()
        self._setup_keyboard_nav(listbox)
        logger.trace("Rendered candidate page %d/%d", page_index + 1, len(pages))  # type: ignore[attr-defined]

    def destroy(self) -> None:
        """Detach listeners now; remove the rendered box after a short delay."""
        self._detach_listeners()
        if self.state is not CandidateBoxState.OPEN:
            return

        self.state = CandidateBoxState.CLOSING
        element, self.element = self.element, None
        if element is not None:
            element.add_class('hg-candidate-box-closing')
        self._listbox = None
        self.candidate_options = []
        self.active_index = 0
        self.page_index = 0
        generation = self._generation

        delay = self._options().get('candidate_box_close_delay', DEFAULT_CLOSE_DELAY)
        if self.scheduler is not None:
            self.scheduler.call_later(delay, lambda: self._finalize_close(element, generation))
        else:
            self._finalize_close(element, generation)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _page_button(class_name: str, label: str, enabled: bool) -> Element:
        button = Element('div', class_name)
        button.set_attribute('role', 'button')
        button.set_attribute('aria-label', label)
        button.set_attribute('aria-disabled', 'false' if enabled else 'true')
        if enabled:
            button.add_class('hg-candidate-box-btn-active')
        return button

    def _turn_page(self, page_index: int, enabled: bool, generation: int) -> None:
        if not enabled or self.state is not CandidateBoxState.OPEN:
            return
        if generation != self._generation:
            return
        if self._anchor is None or self._on_item_selected is None:
            return
        self.render_page(self.pages, self._anchor, page_index, self._on_item_selected)

    def _finalize_close(self, element: Element | None, generation: int) -> None:
        if element is not None and element.is_connected:
            element.remove()
        if generation != self._generation or self.state is not CandidateBoxState.CLOSING:
            return
        self.state = CandidateBoxState.CLOSED
        self._anchor = None
        self._on_item_selected = None
        self.manager.release(self)
        logger.debug("Candidate box closed")
        self.document.publish(Event(type=EventType.CANDIDATE_BOX_CLOSED, data=self))

    def _attach_listeners(self) -> None:
        if self.listeners_attached:
            return
        self.document.subscribe(EventType.KEY_DOWN, self._on_document_key_down)
        self.listeners_attached = True

    def _detach_listeners(self) -> None:
        if not self.listeners_attached:
            return
        self.document.unsubscribe(EventType.KEY_DOWN, self._on_document_key_down)
        self.listeners_attached = False

    def _setup_keyboard_nav(self, listbox: Element) -> None:
        self.candidate_options = listbox.query_all(role='option')
        for i, option in enumerate(self.candidate_options):
            if not option.id:
                option.id = f'candidate-{i}'
        self.active_index = 0
        self.update_active_index(0)
        self._attach_listeners()

    def _announce(self, message: str) -> None:
        region = self.live_region
        if region is None and self._anchor is not None:
            region = self._anchor.root().query(class_name=LIVE_REGION_CLASS)
        if region is None:
            return
        region.text_content = message

    @staticmethod
    def _label(option: Element) -> str:
        return option.text_content.strip()

    def update_active_index(self, new_index: int) -> None:
        """Move the active marker to *new_index* and announce it."""
        if not self.candidate_options:
            return
        new_index %= len(self.candidate_options)
        prev = self.candidate_options[self.active_index] if self.active_index < len(self.candidate_options) else None
        nxt = self.candidate_options[new_index]

        if prev is not None:
            prev.set_attribute('aria-selected', 'false')
            prev.remove_class('active')

        self.active_index = new_index
        nxt.set_attribute('aria-selected', 'true')
        nxt.add_class('active')
        nxt.scroll_into_view()

        total = len(self.candidate_options)
        self._announce(f'{new_index + 1} of {total}: {self._label(nxt)}')

        if self._listbox is not None:
            self._listbox.set_attribute('aria-activedescendant', nxt.id)

    def advance(self) -> None:
        if not self.candidate_options:
            return
        self.update_active_index((self.active_index + 1) % self.option_count)

    def retreat(self) -> None:
        if not self.candidate_options:
            return
        self.update_active_index((self.active_index - 1 + self.option_count) % self.option_count)

    def activate_selected_option(self) -> None:
        if not self.candidate_options:
            return
        option = self.candidate_options[self.active_index]
        self._announce(f'Inserted: {self._label(option)}')
        event_name = 'touchstart' if self._options().get('use_touch_events') else 'click'
        option.fire(event_name, PointerEvent(type=event_name, target=option))

    def _focused_option_index(self) -> int | None:
        for i, option in enumerate(self.candidate_options):
            if option.focused:
                return i
        return None

    def _trap_focus(self, event: KeyboardEvent) -> None:
        focused = self._focused_option_index()
        last = self.option_count - 1
        if focused == 0 and event.shift_key:
            target = last
        elif focused == last and not event.shift_key:
            target = 0
        else:
            return
        event.prevent_default()
        self.candidate_options[target].focus()
        self.update_active_index(target)

    def _on_document_key_down(self, event: Event) -> None:
        key_event = event.data
        if self.state is not CandidateBoxState.OPEN or not isinstance(key_event, KeyboardEvent):
            return
        if not self.candidate_options:
            return

        key = key_event.key
        if key == 'ArrowDown':
            key_event.prevent_default()
            self.advance()
        elif key == 'ArrowUp':
            key_event.prevent_default()
            self.retreat()
        elif key in ('Enter', ' '):
            key_event.prevent_default()
            self.activate_selected_option()
        elif key == 'Escape':
            key_event.prevent_default()
            self.destroy()
        elif key == 'Tab':
            self._trap_focus(key_event)
        elif key in ('ArrowLeft', 'ArrowRight'):
            key_event.prevent_default()
            key_event.stop_immediate_propagation()
        else:
            return
        logger.trace("Candidate box handled %r (active=%d)", key, self.active_index)  # type: ignore[attr-defined]
