import pytest

from timerclock.core.display_mode import DisplayModeSelector
from timerclock.core.models import DisplayMode
from timerclock.core.scheduling import ManualScheduler
from timerclock.core.settings import TimerClockSettings


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def settings():
    return TimerClockSettings(auto_switch_seconds=5)


@pytest.fixture
def selector(scheduler, settings):
    selector = DisplayModeSelector(scheduler, settings)
    yield selector
    selector.dispose()


def test_selector_starts_on_timer(selector):
    assert selector.mode == DisplayMode.TIMER
    assert selector.showing_clock is False
    assert not selector.is_alternating


def test_clock_mode_shows_clock_immediately(selector):
    events = []
    selector.subscribe(events.append)

    selector.set_mode(DisplayMode.CLOCK)

    assert selector.showing_clock is True
    assert events == ["mode", "showing_clock"]


def test_setting_the_current_mode_is_a_no_op(selector):
    selector.set_mode(DisplayMode.CLOCK)
    events = []
    selector.subscribe(events.append)

    selector.set_mode(DisplayMode.CLOCK)

    assert events == []


def test_entering_auto_keeps_what_is_visible(selector, scheduler):
    selector.set_mode(DisplayMode.CLOCK)
    events = []
    selector.subscribe(events.append)

    selector.set_mode(DisplayMode.AUTO)

    assert selector.showing_clock is True
    assert events == ["mode"]

    scheduler.advance(5000)
    assert selector.showing_clock is False
    assert events == ["mode", "showing_clock"]


def test_auto_alternates_every_interval(selector, scheduler):
    selector.set_mode(DisplayMode.AUTO)
    assert selector.showing_clock is False

    scheduler.advance(4999)
    assert selector.showing_clock is False

    scheduler.advance(1)
    assert selector.showing_clock is True

    scheduler.advance(5000)
    assert selector.showing_clock is False


def test_leaving_auto_stops_alternation(selector, scheduler):
    selector.set_mode(DisplayMode.AUTO)
    scheduler.advance(5000)
    assert selector.showing_clock is True

    selector.set_mode(DisplayMode.TIMER)
    scheduler.advance(20_000)

    assert selector.showing_clock is False
    assert not selector.is_alternating
    assert scheduler.pending_count == 0


def test_auto_to_clock_pins_clock(selector, scheduler):
    selector.set_mode(DisplayMode.AUTO)

    selector.set_mode(DisplayMode.CLOCK)
    scheduler.advance(10_000)

    assert selector.showing_clock is True


def test_interval_is_read_when_entering_auto(selector, scheduler, settings):
    selector.set_mode(DisplayMode.AUTO)
    selector.set_mode(DisplayMode.TIMER)

    settings.auto_switch_seconds = 7
    selector.set_mode(DisplayMode.AUTO)

    scheduler.advance(5000)
    assert selector.showing_clock is False

    scheduler.advance(2000)
    assert selector.showing_clock is True


def test_selector_can_start_in_auto(scheduler, settings):
    selector = DisplayModeSelector(scheduler, settings, initial_mode=DisplayMode.AUTO)

    assert selector.is_alternating
    scheduler.advance(5000)
    assert selector.showing_clock is True
    selector.dispose()


def test_string_mode_values_are_accepted(selector):
    selector.set_mode("Clock")

    assert selector.mode is DisplayMode.CLOCK


def test_dispose_is_idempotent_and_halts_alternation(selector, scheduler):
    selector.set_mode(DisplayMode.AUTO)

    selector.dispose()
    selector.dispose()
    scheduler.advance(15_000)

    assert selector.showing_clock is False
    assert scheduler.pending_count == 0


@pytest.mark.parametrize(
    "start,target,expected",
    [
        (DisplayMode.CLOCK, DisplayMode.TIMER, [("mode", DisplayMode.TIMER, False), ("showing_clock", DisplayMode.TIMER, False)]),
        (DisplayMode.TIMER, DisplayMode.CLOCK, [("mode", DisplayMode.CLOCK, True), ("showing_clock", DisplayMode.CLOCK, True)]),
        (DisplayMode.AUTO, DisplayMode.TIMER, [("mode", DisplayMode.TIMER, False)]),
    ],
)
def test_subscribers_see_consistent_mode_and_visibility(scheduler, settings, start, target, expected):
    selector = DisplayModeSelector(scheduler, settings, initial_mode=start)
    seen = []
    selector.subscribe(lambda name: seen.append((name, selector.mode, selector.showing_clock)))

    selector.set_mode(target)

    assert seen == expected
    selector.dispose()
