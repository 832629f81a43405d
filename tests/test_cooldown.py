from widget_router.config import RouterSettings
from widget_router.core.cooldown import BlockReason, WidgetCooldownTracker
from widget_router.models.widget import WidgetKind

CITY = WidgetKind.CITY_SELECTOR
DATES = WidgetKind.DATE_RANGE_PICKER


def test_never_shown_widget_can_be_shown(tracker):
    assert tracker.can_show(CITY)
    assert tracker.block_reason(CITY) is None
    assert tracker.get_record(CITY) is None


def test_attempts_are_monotonic(tracker, clock):
    counts = []
    for _ in range(4):
        tracker.record_shown(CITY)
        counts.append(tracker.attempt_count(CITY))
        clock.advance(61)
    assert counts == [1, 2, 3, 4]


def test_attempt_cap_blocks_after_two_shows(tracker, clock):
    tracker.record_shown(CITY)
    clock.advance(61)
    assert tracker.can_show(CITY)

    tracker.record_shown(CITY)
    clock.advance(1000)
    assert not tracker.can_show(CITY)
    assert tracker.block_reason(CITY) == BlockReason.MAX_ATTEMPTS


def test_standard_cooldown_window(tracker, clock):
    tracker.record_shown(DATES)
    clock.advance(59)
    assert tracker.block_reason(DATES) == BlockReason.COOLDOWN
    clock.advance(2)
    assert tracker.can_show(DATES)


def test_confirmed_is_permanent(tracker, clock):
    tracker.record_shown(CITY)
    assert tracker.record_confirmed(CITY)
    clock.advance(10_000)
    assert tracker.block_reason(CITY) == BlockReason.ALREADY_CONFIRMED


def test_confirming_never_shown_widget_is_a_no_op(tracker):
    assert not tracker.record_confirmed(CITY)
    assert not tracker.record_dismissed(CITY)
    assert tracker.get_record(CITY) is None
    assert tracker.can_show(CITY)


def test_typed_instead_inside_window_extends_block(tracker, clock):
    tracker.record_shown(DATES)
    clock.advance(10)
    assert tracker.record_typed_instead(DATES)

    clock.advance(60)
    assert tracker.block_reason(DATES) == BlockReason.USER_PREFERS_TYPING
    clock.advance(51)
    assert tracker.can_show(DATES)


def test_typed_instead_after_window_is_a_no_op(tracker, clock):
    tracker.record_shown(DATES)
    clock.advance(31)
    assert not tracker.record_typed_instead(DATES)
    assert not tracker.get_record(DATES).user_typed_instead


def test_typed_instead_for_other_than_last_shown_is_a_no_op(tracker, clock):
    tracker.record_shown(DATES)
    tracker.record_shown(CITY)
    assert not tracker.record_typed_instead(DATES)
    assert tracker.record_typed_instead(CITY)


def test_record_shown_resets_confirmed_and_typed_but_keeps_dismissed(clock):
    tracker = WidgetCooldownTracker(RouterSettings(max_attempts=10), clock=clock)
    tracker.record_shown(CITY)
    tracker.record_dismissed(CITY)
    tracker.record_typed_instead(CITY)
    tracker.record_confirmed(CITY)

    tracker.record_shown(CITY)
    record = tracker.get_record(CITY)
    assert record.dismissed
    assert not record.confirmed
    assert not record.user_typed_instead
    assert record.attempts == 2


def test_precedence_confirmed_beats_attempts_beats_typing_beats_cooldown(clock):
    tracker = WidgetCooldownTracker(RouterSettings(), clock=clock)
    tracker.record_shown(CITY)
    tracker.record_typed_instead(CITY)
    assert tracker.block_reason(CITY) == BlockReason.USER_PREFERS_TYPING

    tracker.record_shown(CITY)
    tracker.record_typed_instead(CITY)
    assert tracker.block_reason(CITY) == BlockReason.MAX_ATTEMPTS

    tracker.record_confirmed(CITY)
    assert tracker.block_reason(CITY) == BlockReason.ALREADY_CONFIRMED


def test_can_show_agrees_with_block_reason(tracker, clock):
    tracker.record_shown(CITY)
    tracker.record_shown(DATES)
    tracker.record_confirmed(DATES)
    for step in range(5):
        for kind in (CITY, DATES, WidgetKind.TRAVELERS_SELECTOR):
            assert tracker.can_show(kind) == (tracker.block_reason(kind) is None)
        clock.advance(20 * step)


def test_snapshot_does_not_leak_live_record(tracker):
    tracker.record_shown(CITY)
    snapshot = tracker.get_record(CITY)
    snapshot.confirmed = True
    assert tracker.can_show(CITY) is False
    assert tracker.block_reason(CITY) == BlockReason.COOLDOWN


def test_reset_clears_records_and_last_shown(tracker):
    tracker.record_shown(CITY)
    tracker.reset()
    assert tracker.can_show(CITY)
    assert tracker.attempt_count(CITY) == 0
    assert not tracker.record_typed_instead(CITY)


def test_context_for_llm_lists_blocked_widgets(tracker):
    assert tracker.context_for_llm() == ""

    tracker.record_shown(CITY)
    tracker.record_confirmed(CITY)
    tracker.record_shown(DATES)

    fr = tracker.context_for_llm("fr")
    assert fr.startswith("[WIDGETS BLOQUÉS - NE PAS RE-PROPOSER]")
    assert "citySelector (déjà confirmé)" in fr
    assert "dateRangePicker (cooldown)" in fr

    en = tracker.context_for_llm("en")
    assert en.startswith("[BLOCKED WIDGETS - DO NOT RE-OFFER]")
    assert "citySelector (already confirmed)" in en


def test_blocked_widgets(tracker, clock):
    tracker.record_shown(CITY)
    tracker.record_shown(DATES)
    clock.advance(61)
    tracker.record_shown(WidgetKind.TRAVELERS_SELECTOR)
    assert tracker.blocked_widgets() == [WidgetKind.TRAVELERS_SELECTOR]
