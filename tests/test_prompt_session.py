"""
Prompt session tests.

Cover the PRESENTING -> ACCEPTED / BLOCKED transitions, the record written
for each outcome, and the release of the blocker and surface on every path.
"""
from datetime import datetime, timezone

import pytest

from termsgate.core.errors import PresentationError
from termsgate.core.record import AcceptanceRecord
from termsgate.core.session import PromptSession, SessionState
from termsgate.ui.base import UserAction

from conftest import FIXED_NOW, SAMPLE_TERMS

EARLIER = datetime(2026, 1, 5, 7, 0, tzinfo=timezone.utc)


def make_session(app_config, store, surface, blocker, clock, **kwargs):
    return PromptSession(app_config, store, surface, blocker, clock=clock, identity='jdoe', **kwargs)


class TestAccept:

    def test_upgrade_from_previous_version(self, app_config, store, make_surface, blocker, fixed_clock):
        store.write(AcceptanceRecord.for_acceptance(None, '3.2.0', 'jdoe', now=EARLIER))
        surface = make_surface(UserAction.ACCEPT)

        result = make_session(app_config, store, surface, blocker, fixed_clock).run()

        assert result is True
        record = store.read()
        assert record.accepted is True
        assert record.accepted_terms_version == '3.3.0'
        assert record.acceptance_timestamp == FIXED_NOW
        assert record.accepted_by == 'jdoe'
        assert record.acceptance_count == 2
        assert record.reminder_count == 0
        assert record.last_reminder_timestamp is None

    def test_state_and_content(self, app_config, store, make_surface, blocker, fixed_clock):
        surface = make_surface(UserAction.ACCEPT)
        session = make_session(app_config, store, surface, blocker, fixed_clock)
        assert session.state is SessionState.IDLE

        session.run()

        assert session.state is SessionState.ACCEPTED
        assert surface.presented == [(SAMPLE_TERMS, True)]

    def test_side_effect_order(self, app_config, store, make_surface, blocker, fixed_clock, events):
        surface = make_surface(UserAction.ACCEPT)
        make_session(app_config, store, surface, blocker, fixed_clock).run()
        assert events == ['suspend', 'present', 'write', 'resume', 'release']

    def test_write_failure_is_not_acceptance(self, app_config, failing_store, make_surface, blocker,
                                             fixed_clock, events):
        surface = make_surface(UserAction.ACCEPT)
        session = make_session(app_config, failing_store, surface, blocker, fixed_clock)

        assert session.run() is False
        assert session.state is SessionState.BLOCKED
        assert failing_store.read() is None
        assert events[-2:] == ['resume', 'release']

    def test_session_runs_only_once(self, app_config, store, make_surface, blocker, fixed_clock):
        session = make_session(app_config, store, make_surface(UserAction.ACCEPT), blocker, fixed_clock)
        session.run()
        with pytest.raises(RuntimeError):
            session.run()


class TestNoDecision:

    def test_close_without_decision_records_reminder(self, app_config, store, make_surface, blocker,
                                                     fixed_clock):
        session = make_session(app_config, store, make_surface(None), blocker, fixed_clock)

        assert session.run() is False
        assert session.state is SessionState.BLOCKED
        record = store.read()
        assert record.accepted is False
        assert record.reminder_count == 1
        assert record.last_reminder_timestamp == FIXED_NOW

    def test_dismiss_within_budget(self, app_config, store, make_surface, blocker, fixed_clock, events):
        store.write(AcceptanceRecord.for_reminder(None, 'jdoe', now=EARLIER))
        events.clear()
        surface = make_surface(UserAction.DISMISS)

        assert make_session(app_config, store, surface, blocker, fixed_clock).run() is False
        assert store.read().reminder_count == 2
        assert events == ['suspend', 'present', 'write', 'resume', 'release']

    def test_dismiss_after_budget_represents(self, app_config, store, make_surface, blocker, fixed_clock):
        previous = AcceptanceRecord(accepted=False, reminder_count=app_config.max_dismissals)
        store.write(previous)
        surface = make_surface(UserAction.DISMISS, UserAction.ACCEPT)
        session = make_session(app_config, store, surface, blocker, fixed_clock)

        assert session.run() is True
        assert [dismissible for _, dismissible in surface.presented] == [False, False]
        assert store.read().reminder_count == 0

    def test_previous_acceptance_still_requires_new_version(self, app_config, store, make_surface,
                                                            blocker, fixed_clock):
        store.write(AcceptanceRecord.for_acceptance(None, '3.2.0', 'jdoe', now=EARLIER))
        make_session(app_config, store, make_surface(None), blocker, fixed_clock).run()

        record = store.read()
        assert record.accepted is False
        assert record.accepted_terms_version == '3.2.0'
        assert record.acceptance_count == 1


class TestFailures:

    def test_surface_unavailable(self, app_config, store, make_surface, blocker, fixed_clock, events):
        surface = make_surface(PresentationError("no display"))
        session = make_session(app_config, store, surface, blocker, fixed_clock)

        assert session.run() is False
        assert session.state is SessionState.BLOCKED
        assert store.read() is None
        assert events == ['suspend', 'present', 'resume', 'release']

    def test_missing_terms_content(self, app_config, store, make_surface, blocker, fixed_clock, events):
        session = make_session(app_config, store, make_surface(UserAction.ACCEPT), blocker, fixed_clock,
                               content_loader=lambda: None)

        assert session.run() is False
        assert session.state is SessionState.BLOCKED
        assert store.read() is None
        assert events == ['release']

    def test_unexpected_error_releases_resources(self, app_config, store, make_surface, blocker,
                                                 fixed_clock, events):
        surface = make_surface(RuntimeError("window manager crashed"))
        session = make_session(app_config, store, surface, blocker, fixed_clock)

        with pytest.raises(RuntimeError):
            session.run()
        assert session.state is SessionState.BLOCKED
        assert blocker.suspended is False
        assert events[-2:] == ['resume', 'release']

    def test_termination_signal_releases_resources(self, app_config, store, make_surface, blocker,
                                                   fixed_clock, events):
        surface = make_surface(SystemExit(1))
        session = make_session(app_config, store, surface, blocker, fixed_clock)

        with pytest.raises(SystemExit):
            session.run()
        assert events[-2:] == ['resume', 'release']

    def test_blocker_failure_does_not_stop_prompt(self, app_config, store, make_surface, fixed_clock):
        from termsgate.ui.base import InteractionBlocker

        class BrokenBlocker(InteractionBlocker):
            def suspend(self):
                raise OSError("no input hook permission")

            def resume(self):
                raise OSError("no input hook permission")

        session = make_session(app_config, store, make_surface(UserAction.ACCEPT), BrokenBlocker(), fixed_clock)
        assert session.run() is True
        assert store.read().accepted is True
