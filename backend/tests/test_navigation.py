"""
Tests for a single navigation attempt.

The runner is exercised against a scripted fake page; each test checks the
sequence of page calls and how failures at each stage are classified.
"""

import pytest

from render_api.core.errors import NavigationError, SelectorTimeoutError
from render_api.services.navigation import AttemptFailure, AttemptSuccess, NavigationAttemptRunner
from render_api.services.render_request import RenderRequest
from render_api.services.strategies import WAIT_STRATEGY_SEQUENCE, WaitStrategy
from fakes import FakePage

URL = "https://example.com/app"


def test_strategy_sequence_order():
    assert WAIT_STRATEGY_SEQUENCE == (WaitStrategy.DOM_READY, WaitStrategy.NETWORK_QUIET)
    assert WaitStrategy.DOM_READY.value == "domcontentloaded"
    assert WaitStrategy.NETWORK_QUIET.value == "networkidle"
    assert WaitStrategy.DOM_READY.label == "dom-ready"
    assert WaitStrategy.NETWORK_QUIET.label == "network-quiet"


class TestNavigationAttemptRunner:

    @pytest.mark.asyncio
    async def test_successful_attempt_call_sequence(self):
        page = FakePage(html="<html>ok</html>")
        request = RenderRequest(url=URL, selector="#root", extra_wait_ms=500, nav_timeout_ms=45000)

        outcome = await NavigationAttemptRunner().run(page, request, WaitStrategy.DOM_READY, 1)

        assert isinstance(outcome, AttemptSuccess)
        assert outcome.html == "<html>ok</html>"
        assert outcome.strategy is WaitStrategy.DOM_READY
        assert outcome.attempt == 1
        assert outcome.quiescence.ok
        assert page.calls == [
            ("goto", URL, "domcontentloaded", 45000),
            ("wait_for_selector", "#root", 20000),
            ("wait_for_load_state", "networkidle", 15000),
            ("wait_for_timeout", 500),
            ("content",),
        ]

    @pytest.mark.asyncio
    async def test_sub_waits_bounded_by_short_timeout(self):
        page = FakePage()
        request = RenderRequest(url=URL, selector=".item", nav_timeout_ms=10000)

        await NavigationAttemptRunner().run(page, request, WaitStrategy.NETWORK_QUIET, 2)

        assert ("goto", URL, "networkidle", 10000) in page.calls
        assert ("wait_for_selector", ".item", 10000) in page.calls
        assert ("wait_for_load_state", "networkidle", 10000) in page.calls

    @pytest.mark.asyncio
    async def test_no_selector_and_no_extra_wait_skip_those_steps(self):
        page = FakePage()
        request = RenderRequest(url=URL)

        outcome = await NavigationAttemptRunner().run(page, request, WaitStrategy.DOM_READY, 1)

        assert isinstance(outcome, AttemptSuccess)
        assert page.call_names() == ["goto", "wait_for_load_state", "content"]

    @pytest.mark.asyncio
    async def test_navigation_error_ends_attempt(self):
        page = FakePage(goto_errors=[TimeoutError("Timeout 45000ms exceeded")])
        request = RenderRequest(url=URL, selector="#root")

        outcome = await NavigationAttemptRunner().run(page, request, WaitStrategy.DOM_READY, 1)

        assert isinstance(outcome, AttemptFailure)
        assert type(outcome.error) is NavigationError
        assert outcome.cause == "Timeout 45000ms exceeded"
        assert outcome.error.strategy == "dom-ready"
        assert outcome.error.attempt == 1
        assert page.call_names() == ["goto"]

    @pytest.mark.asyncio
    async def test_selector_timeout_ends_attempt(self):
        page = FakePage(selector_errors=[TimeoutError("waiting for locator('#missing')")])
        request = RenderRequest(url=URL, selector="#missing")

        outcome = await NavigationAttemptRunner().run(page, request, WaitStrategy.NETWORK_QUIET, 2)

        assert isinstance(outcome, AttemptFailure)
        assert isinstance(outcome.error, SelectorTimeoutError)
        assert isinstance(outcome.error, NavigationError)
        assert outcome.error.selector == "#missing"
        assert outcome.error.error_code == "SELECTOR_TIMEOUT"
        assert outcome.strategy is WaitStrategy.NETWORK_QUIET
        assert outcome.attempt == 2
        assert "content" not in page.call_names()

    @pytest.mark.asyncio
    async def test_quiescence_failure_is_swallowed(self):
        page = FakePage(load_state_error=TimeoutError("network never idle"))
        request = RenderRequest(url=URL, extra_wait_ms=100)

        outcome = await NavigationAttemptRunner().run(page, request, WaitStrategy.DOM_READY, 1)

        assert isinstance(outcome, AttemptSuccess)
        assert outcome.quiescence.ok is False
        assert outcome.quiescence.operation == "network-quiet settle"
        assert "network never idle" in outcome.quiescence.error
        assert page.call_names() == ["goto", "wait_for_load_state", "wait_for_timeout", "content"]

    @pytest.mark.asyncio
    async def test_capture_failure_is_an_attempt_failure(self):
        page = FakePage()

        async def broken_content():
            raise RuntimeError("Target page, context or browser has been closed")

        page.content = broken_content
        outcome = await NavigationAttemptRunner().run(page, RenderRequest(url=URL), WaitStrategy.DOM_READY, 1)

        assert isinstance(outcome, AttemptFailure)
        assert "has been closed" in outcome.cause
