import functools
from typing import Any, List

import pytest

from dynareg import (
    ChainPolicy,
    Context,
    NoSuchMethodError,
    Singleton,
    default_context,
)
from dynareg.core import HandlerKind, resolve


class Greeter(Singleton):
    def __init__(self, *args: Any) -> None:
        self.seen: List[str] = []

    def greet(self, name: str = "world") -> str:
        return f"hello {name}"

    def remember(self, name: str) -> None:
        self.seen.append(name)

    def _secret(self) -> str:
        return "hidden"

    @staticmethod
    def helper() -> str:
        return "static"


def test_declared_method_is_dispatched() -> None:
    g = Greeter.get_instance()
    assert g.greet("bob") == "hello bob"
    assert g.invoke("greet") == "hello world"


def test_dynamic_method_wins_over_declared() -> None:
    g = Greeter.get_instance()
    g._add_method("greet", lambda self, name="world": f"hi {name}")
    assert g.greet("bob") == "hi bob"
    assert g.invoke("greet") == "hi world"


def test_registry_closure_is_promoted_once() -> None:
    calls: List[int] = []
    closures = default_context().closures

    @closures.register("count")
    def count(self: Greeter) -> int:
        calls.append(1)
        return len(calls)

    g = Greeter.get_instance()
    assert "count" not in g._methods
    assert g.count() == 1
    assert "count" in g._methods
    bound = g._methods["count"]
    assert bound.func is count
    assert bound.instance is g

    # later registry changes no longer affect the bound method
    del closures["count"]
    assert g.count() == 2
    assert g._methods["count"] is bound


def test_registry_closure_receives_instance() -> None:
    default_context().closures["whoami"] = lambda self: self
    g = Greeter.get_instance()
    assert g.whoami() is g


def test_declared_method_wins_over_registry() -> None:
    default_context().closures["greet"] = lambda self, *a: "from registry"
    g = Greeter.get_instance()
    assert g.greet() == "hello world"
    assert "greet" not in g._methods


def test_empty_result_returns_instance_for_chaining() -> None:
    g = Greeter.get_instance()
    assert g.remember("a").remember("b") is g
    assert g.seen == ["a", "b"]


@pytest.mark.parametrize("empty", [None, False, 0, 0.0, "", [], {}, ()])
def test_falsy_results_collapse_to_instance(empty: Any) -> None:
    g = Greeter.get_instance()
    g._add_method("nothing", lambda self: empty)
    assert g.nothing() is g


def test_none_only_policy_keeps_falsy_results() -> None:
    ctx = Context(chain_policy=ChainPolicy.NONE_ONLY)

    class Strict(Singleton, context=ctx):
        def zero(self) -> int:
            return 0

        def nothing(self) -> None:
            return None

    s = Strict.get_instance()
    assert s.zero() == 0
    assert s.nothing() is s


def test_unknown_method_raises_with_name() -> None:
    g = Greeter.get_instance()
    with pytest.raises(NoSuchMethodError) as exc_info:
        g.invoke("does_not_exist")
    assert exc_info.value.name == "does_not_exist"

    with pytest.raises(NoSuchMethodError) as exc_info:
        g.nope()
    assert exc_info.value.name == "nope"
    assert "Greeter" in str(exc_info.value)


def test_unknown_attribute_is_an_attribute_error() -> None:
    g = Greeter.get_instance()
    assert not hasattr(g, "missing")
    assert getattr(g, "missing", "fallback") == "fallback"


def test_private_declared_methods_reachable_through_invoke() -> None:
    g = Greeter.get_instance()
    assert g.invoke("_secret") == "hidden"


def test_static_methods_are_not_instance_methods() -> None:
    g = Greeter.get_instance()
    assert g.helper() == "static"
    with pytest.raises(NoSuchMethodError):
        g.invoke("helper")


def test_base_api_is_not_dispatchable() -> None:
    g = Greeter.get_instance()
    with pytest.raises(NoSuchMethodError):
        g.invoke("invoke", "greet")


def test_plain_attributes_are_left_alone() -> None:
    g = Greeter.get_instance()
    assert g.seen == []
    g.seen = ["x"]
    assert g.seen == ["x"]


def test_class_level_call_builds_and_dispatches() -> None:
    received: List[Any] = []

    class Logger(Singleton):
        def __init__(self, *args: Any) -> None:
            self.ctor_args = args

    default_context().closures["log"] = lambda self, *args: received.append(args)

    result = Logger.log("first")
    instance = Logger.get_instance()
    assert result is instance
    assert instance.ctor_args == ("first",)
    assert received == [("first",)]

    Logger.log("second")
    assert instance.ctor_args == ("first",)
    assert received == [("first",), ("second",)]


def test_class_level_call_for_declared_method() -> None:
    assert Greeter.call("greet") == "hello world"
    assert Greeter.get_instance().seen == []


def test_class_level_unknown_method_raises_on_call() -> None:
    call = Greeter.unknown
    with pytest.raises(NoSuchMethodError) as exc_info:
        call()
    assert exc_info.value.name == "unknown"


def test_class_level_private_names_are_plain_attribute_errors() -> None:
    with pytest.raises(AttributeError):
        Greeter._nothing_here
    assert not hasattr(Greeter, "__not_there__")


def test_resolve_reports_each_handler_kind() -> None:
    closures = default_context().closures
    closures["from_registry"] = lambda self: "r"
    g = Greeter.get_instance()
    g._add_method("dyn", lambda self: "d")

    assert resolve(g, "dyn", closures).kind is HandlerKind.DYNAMIC
    assert resolve(g, "greet", closures).kind is HandlerKind.DECLARED
    assert resolve(g, "from_registry", closures).kind is HandlerKind.REGISTRY
    missing = resolve(g, "other", closures)
    assert missing.kind is HandlerKind.MISSING
    assert not missing.found
    assert missing.target is None


class AmbiguousTruth:
    def __bool__(self) -> bool:
        raise ValueError("truth value is ambiguous")


class EmptyRecord:
    def __len__(self) -> int:
        return 0


def test_objects_with_undefined_truth_are_returned_verbatim() -> None:
    frame = AmbiguousTruth()
    g = Greeter.get_instance()
    g._add_method("frame", lambda self: frame)
    assert g.frame() is frame


def test_falsy_non_builtin_objects_are_not_collapsed() -> None:
    record = EmptyRecord()
    g = Greeter.get_instance()
    g._add_method("record", lambda self: record)
    assert g.record() is record


def test_decorated_declared_methods_are_dispatched() -> None:
    calls: List[int] = []

    class Cached(Singleton):
        @functools.lru_cache(maxsize=None)
        def compute(self, n: int = 2) -> int:
            calls.append(n)
            return n * n

        @functools.lru_cache(maxsize=None)
        def warm(self) -> None:
            calls.append(0)

    c = Cached.get_instance()
    assert c.invoke("compute") == 4
    assert c.compute(3) == 9
    assert c.compute(3) == 9
    assert calls == [2, 3]
    assert c.warm() is c
    assert Cached.call("compute") == 4
    assert resolve(c, "compute", default_context().closures).kind is (
        HandlerKind.DECLARED
    )


def test_class_and_static_methods_are_not_dispatched() -> None:
    class Tools(Singleton):
        @classmethod
        def build(cls) -> str:
            return "built"

        @staticmethod
        def helper() -> str:
            return "helped"

        @property
        def size(self) -> int:
            return 3

    t = Tools.get_instance()
    assert t.build() == "built"
    assert t.size == 3
    for name in ("build", "helper", "size"):
        with pytest.raises(NoSuchMethodError):
            t.invoke(name)


def test_underscore_dynamic_methods_reachable_by_attribute() -> None:
    g = Greeter.get_instance()
    g._add_method("_hidden", lambda self: "dyn")
    assert g._hidden() == "dyn"


def test_underscore_dynamic_method_wins_over_declared() -> None:
    g = Greeter.get_instance()
    assert g._secret() == "hidden"
    g._add_method("_secret", lambda self: "replaced")
    assert g._secret() == "replaced"
    assert g.invoke("_secret") == "replaced"


def test_underscore_registry_closures_reachable_by_attribute() -> None:
    default_context().closures["_audit"] = lambda self: "audited"
    g = Greeter.get_instance()
    assert g._audit() == "audited"
    assert "_audit" in g._methods


def test_instance_state_names_cannot_become_methods() -> None:
    g = Greeter.get_instance()
    with pytest.raises(ValueError):
        g._add_method("_methods", lambda self: None)
    assert isinstance(g._methods, dict)


def test_instance_attribute_shadows_declared_method() -> None:
    class Labelled(Singleton):
        def __init__(self) -> None:
            self.label = "attr"  # type: ignore[method-assign]

        def label(self) -> str:
            return "method"

    p = Labelled.get_instance()
    assert p.label == "attr"
    assert p.invoke("label") == "method"


def test_class_attribute_probes_always_succeed() -> None:
    assert hasattr(Greeter, "anything_at_all")
    assert getattr(Greeter, "anything_at_all", None) is not None
    assert not hasattr(Greeter, "_private_probe")
