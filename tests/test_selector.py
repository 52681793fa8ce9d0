from unittest.mock import MagicMock

from kattlog.core.models import InteractiveCapture
from kattlog.interactive.capture import CaptureResolver
from kattlog.interactive.dom import Rect
from kattlog.interactive.messages import (
    CaptureMessage,
    FrameChannel,
    ReadyMessage,
    SelectorMode,
    SetModeMessage,
    parse_message,
)
from kattlog.interactive.selector import OVERLAY_ID, VisualSelector


class TestParseMessage:
    def test_set_mode(self):
        assert parse_message({'type': 'SET_MODE', 'mode': 'capture'}) == SetModeMessage(mode=SelectorMode.CAPTURE)

    def test_ready(self):
        assert parse_message({'type': 'READY', 'url': 'https://shop.test/'}) == ReadyMessage(url='https://shop.test/')

    def test_unknown_or_malformed(self):
        assert parse_message({'type': 'PING'}) is None
        assert parse_message({'type': 'SET_MODE', 'mode': 'zoom'}) is None
        assert parse_message({'type': 'READY'}) is None
        assert parse_message({'type': 'KATTLOG_CAPTURE', 'html': '<li></li>'}) is None
        assert parse_message("SET_MODE") is None

    def test_capture_wire_format(self):
        capture = InteractiveCapture(
            html='<li></li>',
            url='https://shop.test/sofas',
            product_url='https://shop.test/p/1',
            tag_name='LI',
            preview_image=None,
            text_snippet='Sofá',
            timestamp=1,
        )
        payload = CaptureMessage(capture=capture).to_dict()

        assert payload['type'] == 'KATTLOG_CAPTURE'
        assert payload['productUrl'] == 'https://shop.test/p/1'
        assert parse_message(payload) == CaptureMessage(capture=capture)


class TestFrameChannel:
    def test_post_notifies_listener_and_queues(self):
        listener = MagicMock()
        channel = FrameChannel(listener)

        channel.post(ReadyMessage(url='https://shop.test/'))

        listener.assert_called_once_with({'type': 'READY', 'url': 'https://shop.test/'})
        assert channel.drain() == [{'type': 'READY', 'url': 'https://shop.test/'}]
        assert channel.drain() == []


class TestHeartbeat:
    def setup_method(self):
        self.channel = FrameChannel()

    def test_start_announces_ready(self, interactive_view):
        selector = VisualSelector(interactive_view, self.channel)

        selector.start(now=0.0)

        assert self.channel.drain() == [{'type': 'READY', 'url': 'https://shop.test/sofas'}]

    def test_tick_waits_for_interval(self, interactive_view):
        selector = VisualSelector(interactive_view, self.channel, heartbeat_interval=5.0)
        selector.start(now=0.0)
        self.channel.drain()

        assert selector.tick(now=4.9) is False
        assert selector.tick(now=5.0) is True
        assert selector.tick(now=6.0) is False
        assert len(self.channel.drain()) == 1

    def test_mousedown_resyncs(self, interactive_view):
        clock = MagicMock(return_value=42.0)
        selector = VisualSelector(interactive_view, self.channel, clock=clock)

        selector.on_mousedown()

        assert selector.state.last_heartbeat == 42.0
        assert self.channel.drain()[0]['type'] == 'READY'


class TestPointerEvents:
    def setup_method(self):
        self.channel = FrameChannel()

    def make_selector(self, view):
        resolver = CaptureResolver(view, clock=lambda: 1700000000000)
        return VisualSelector(view, self.channel, resolver=resolver, clock=lambda: 10.0)

    def test_navigate_mode_ignores_pointer(self, interactive_view):
        selector = self.make_selector(interactive_view)

        assert selector.on_mouseover(interactive_view.select_one('#card-img')) is None
        assert selector.on_click(interactive_view.select_one('#card-img')) is None
        assert selector.state.overlay is None
        assert self.channel.drain() == []

    def test_set_mode_switches_cursor_and_overlay(self, interactive_view):
        selector = self.make_selector(interactive_view)

        selector.handle_message({'type': 'SET_MODE', 'mode': 'capture'})
        assert selector.state.cursor == 'crosshair'
        assert selector.state.overlay is not None
        assert not selector.state.overlay.visible

        selector.handle_message({'type': 'SET_MODE', 'mode': 'navigate'})
        assert selector.state.cursor == 'default'
        assert not selector.state.overlay.visible

    def test_unknown_message_changes_nothing(self, interactive_view):
        selector = self.make_selector(interactive_view)

        assert selector.handle_message({'type': 'SET_MODE', 'mode': 'zoom'}) is None
        assert selector.state.mode == SelectorMode.NAVIGATE

    def test_hover_highlights_best_container(self, interactive_view):
        selector = self.make_selector(interactive_view)
        selector.apply_mode(SelectorMode.CAPTURE)

        best = selector.on_mouseover(interactive_view.select_one('#card-img'))

        overlay = selector.state.overlay
        assert best.element is interactive_view.select_one('#card')
        assert overlay.visible
        assert overlay.rect == Rect(0, 300, 300, 420)

    def test_hover_over_chrome_hides_overlay(self, interactive_view):
        selector = self.make_selector(interactive_view)
        selector.apply_mode(SelectorMode.CAPTURE)
        selector.on_mouseover(interactive_view.select_one('#card-img'))

        assert selector.on_mouseover(interactive_view.select_one('#header-img')) is None
        assert not selector.state.overlay.visible
        assert selector.state.overlay.target is None

    def test_overlay_element_is_ignored(self, interactive_view):
        selector = self.make_selector(interactive_view)
        selector.apply_mode(SelectorMode.CAPTURE)
        overlay_tag = interactive_view.soup.new_tag('div', id=OVERLAY_ID)

        assert selector.on_mouseover(overlay_tag) is None

    def test_click_captures_highlighted_container(self, interactive_view):
        selector = self.make_selector(interactive_view)
        selector.apply_mode(SelectorMode.CAPTURE)
        selector.on_mouseover(interactive_view.select_one('#card-img'))

        capture = selector.on_click(interactive_view.select_one('#card-img'))

        messages = self.channel.drain()
        assert capture.product_url == "https://shop.test/p/sofa-oslo"
        assert messages[-1]['type'] == 'KATTLOG_CAPTURE'
        assert messages[-1]['productUrl'] == "https://shop.test/p/sofa-oslo"
        assert messages[-1]['timestamp'] == 1700000000000
        assert len(selector.state.flashes) == 1
        assert selector.state.flashes[0].timestamp == 10.0

    def test_click_without_hover_walks_from_target(self, interactive_view):
        selector = self.make_selector(interactive_view)
        selector.apply_mode(SelectorMode.CAPTURE)

        capture = selector.on_click(interactive_view.select_one('#card-img'))

        assert capture.tag_name == 'LI'

    def test_click_on_low_scoring_target_posts_nothing(self, interactive_view):
        selector = self.make_selector(interactive_view)
        selector.apply_mode(SelectorMode.CAPTURE)

        assert selector.on_click(interactive_view.select_one('#header-img')) is None
        assert self.channel.drain() == []
