"""Tests for EventHook and Subscription."""

from shlinkrun.lifecycle import EventHook


class TestEventHook:
    def test_emit_reaches_observers_in_order(self):
        hook = EventHook("theme_changed")
        seen = []
        hook.attach(lambda old, new: seen.append(("a", old, new)))
        hook.attach(lambda old, new: seen.append(("b", old, new)))
        hook.emit("dark", "light")
        assert seen == [("a", "dark", "light"), ("b", "dark", "light")]

    def test_detach_unknown_observer(self):
        hook = EventHook()
        assert hook.detach(lambda: None) is False

    def test_observer_can_detach_itself_during_emit(self):
        hook = EventHook()
        calls = []

        def once():
            calls.append(1)
            sub.dispose()

        sub = hook.attach(once)
        hook.emit()
        hook.emit()
        assert calls == [1]


class TestSubscription:
    def test_dispose_detaches_at_most_once(self):
        hook = EventHook()
        observer = lambda: None  # noqa: E731
        sub = hook.attach(observer)
        # The same callable attached twice must only lose one registration
        hook.attach(observer)

        assert sub.dispose() is True
        assert sub.dispose() is False
        assert sub.disposed is True
        assert len(hook) == 1
