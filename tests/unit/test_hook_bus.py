import pytest

from hookline.hooks import HookBus, filter_until_error, is_error

from tests.fixtures.helpers import run

pytestmark = pytest.mark.hooks


class TestFilter:

    def test_no_handlers_returns_initial_value(self):
        bus = HookBus()
        assert run(bus.filter("missing", "value", 1, 2)) == "value"

    def test_handlers_run_in_registration_order(self):
        bus = HookBus()
        calls = []

        def handler(name):
            async def _handler(value, extra):
                calls.append((name, value, extra))
                return value + name
            return _handler

        for name in "ABC":
            bus.on("greet", handler(name))

        assert run(bus.filter("greet", "", "ctx")) == "ABC"
        assert calls == [("A", "", "ctx"), ("B", "A", "ctx"), ("C", "AB", "ctx")]

    def test_plain_functions_are_accepted(self):
        bus = HookBus()
        bus.on("count", lambda value: value + 1)
        bus.on("count", lambda value: value * 10)

        assert run(bus.filter("count", 1)) == 20

    def test_once_handler_fires_once_and_is_removed(self):
        bus = HookBus()
        seen = []

        for name in "ABC":
            bus.on("pipe", lambda value, name=name: value + name)

        def once_handler(value):
            seen.append(value)
            return value + "D"

        bus.on("pipe", once_handler, once=True)

        assert run(bus.filter("pipe", "")) == "ABCD"
        assert [r.handler for r in bus.get_hooks("pipe")].count(once_handler) == 0
        assert len(bus.get_hooks("pipe")) == 3
        assert run(bus.filter("pipe", "")) == "ABC"
        assert seen == ["ABC"]

    def test_error_values_do_not_stop_the_pipeline(self):
        bus = HookBus()
        received = []
        bus.on("guard", lambda value: ValueError("no"))
        bus.on("guard", lambda value: received.append(value) or value)

        result = run(bus.filter("guard", True))

        assert is_error(result)
        assert len(received) == 1 and isinstance(received[0], ValueError)

    def test_raising_handler_propagates_and_once_entries_are_consumed(self):
        bus = HookBus()
        bus.on("boom", lambda value: value, once=True)

        def explode(value):
            raise RuntimeError("handler failed")

        bus.on("boom", explode)

        with pytest.raises(RuntimeError, match="handler failed"):
            run(bus.filter("boom", 1))

        assert [r.handler for r in bus.get_hooks("boom")] == [explode]

    def test_handler_added_during_dispatch_runs_next_time(self):
        bus = HookBus()
        late = []

        def register(value):
            bus.on("grow", lambda v: late.append(v) or v)
            return value

        bus.on("grow", register, once=True)

        run(bus.filter("grow", "first"))
        assert late == []

        run(bus.filter("grow", "second"))
        assert late == ["second"]


class TestTrigger:

    def test_no_handlers(self):
        assert run(HookBus().trigger("nothing", 1)) is None

    def test_sequential_and_results_discarded(self):
        bus = HookBus()
        events = []

        async def first(a, b):
            events.append(("first", a, b))
            return "ignored"

        def second(a, b):
            events.append(("second", a, b))

        bus.on("login", first)
        bus.on("login", second)

        assert run(bus.trigger("login", 1, 2)) is None
        assert events == [("first", 1, 2), ("second", 1, 2)]

    def test_once_on_trigger(self):
        bus = HookBus()
        events = []
        bus.on("tick", lambda: events.append("once"), once=True)
        bus.on("tick", lambda: events.append("always"))

        run(bus.trigger("tick"))
        run(bus.trigger("tick"))

        assert events == ["once", "always", "always"]


class TestRegistry:

    def test_off_removes_first_match_only(self):
        bus = HookBus()

        def handler(value):
            return value

        bus.on("dup", handler)
        bus.on("dup", handler)
        bus.off("dup", handler)

        assert len(bus.get_hooks("dup")) == 1

    def test_off_unknown_is_noop(self):
        bus = HookBus()
        bus.off("never", print)
        assert bus.get_hooks("never") == []

    def test_reset(self):
        bus = HookBus()
        bus.on("a", print)
        bus.reset()
        assert bus.hooks == {}


class TestFilterUntilError:

    def test_stops_at_first_error(self):
        bus = HookBus()
        called = []
        bus.on("logout", lambda value: value + 1)
        bus.on("logout", lambda value: LookupError("stop"))
        bus.on("logout", lambda value: called.append(value))

        result = run(filter_until_error(bus, "logout", 1))

        assert isinstance(result, LookupError)
        assert called == []

    def test_threads_value_without_errors(self):
        bus = HookBus()
        bus.on("logout", lambda value, user: f"{value}:{user}")
        bus.on("logout", lambda value, user: value.upper(), once=True)

        assert run(filter_until_error(bus, "logout", "sid", "bob")) == "SID:BOB"
        assert len(bus.get_hooks("logout")) == 1

    def test_no_handlers(self):
        assert run(filter_until_error(HookBus(), "logout", "sid")) == "sid"
