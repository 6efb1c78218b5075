"""Tests for the watched descriptor, watch_fields, and has_changed."""

import pytest

from effectable import DirectMutationViolation, ReactiveModule, has_changed, watch_fields, watched


class TestHasChanged:
    def test_equal_primitives(self):
        assert not has_changed(1, 1)
        assert not has_changed("a", "a")
        assert not has_changed(None, None)
        assert not has_changed(b"x", b"x")
        assert not has_changed(2.5, 2.5)

    def test_different_primitives(self):
        assert has_changed(1, 2)
        assert has_changed("a", "b")
        assert has_changed(None, 0)

    def test_mixed_types_change(self):
        assert has_changed(1, True)
        assert has_changed(1, 1.0)

    def test_composites_by_identity(self):
        a = [1, 2]
        assert not has_changed(a, a)
        assert has_changed(a, [1, 2])
        assert has_changed({"k": 1}, {"k": 1})
        assert has_changed(tuple([1]), tuple([1]))

    def test_nan(self):
        nan = float("nan")
        assert not has_changed(nan, nan)
        assert has_changed(nan, float("nan"))


class TestWatchedDescriptor:
    def test_class_access_returns_descriptor(self):
        class M(ReactiveModule):
            count = watched(3)

        assert isinstance(M.count, watched)
        assert repr(M.count) == "watched(3)"

    def test_repr_variants(self):
        assert repr(watched()) == "watched()"
        assert repr(watched(default_factory=list)) == f"watched(default_factory={list!r})"

    def test_default_and_factory_exclusive(self):
        with pytest.raises(ValueError):
            watched(0, default_factory=list)

    def test_plain_attribute_before_wiring(self):
        seen = []

        class M(ReactiveModule):
            count = watched(1)

            def __init__(self):
                seen.append(self.count)
                self.count += 1
                seen.append(self.count)
                super().__init__()

        m = M()
        assert seen == [1, 2]
        assert m.count == 2

    def test_factory_value_kept_before_wiring(self):
        class M(ReactiveModule):
            items = watched(default_factory=list)

            def __init__(self):
                self.items.append("first")
                super().__init__()

        assert M().items == ["first"]

    def test_unset_without_default_raises_before_wiring(self):
        class M(ReactiveModule):
            value = watched()

            def __init__(self):
                with pytest.raises(AttributeError):
                    self.value
                super().__init__()

        assert M().value is None

    def test_outside_reactive_module(self):
        class Plain:
            count = watched(0)

        p = Plain()
        assert p.count == 0
        p.count = 5
        assert p.count == 5
        del p.count
        assert p.count == 0


class TestWatchFields:
    def test_fields_assigned_in_init(self):
        @watch_fields("count", "message")
        class M(ReactiveModule):
            message = "Hello"

            def __init__(self):
                self.count = 0
                super().__init__()

        m = M()
        assert M.watched_fields() == ("count", "message")
        assert m.count == 0
        assert m.message == "Hello"
        with pytest.raises(DirectMutationViolation):
            m.count = 1
        m.set_state(count=1)
        assert m.count == 1

    def test_keeps_inherited_descriptor(self):
        class Base(ReactiveModule):
            count = watched(4)

        @watch_fields("count")
        class Child(Base):
            pass

        assert "count" not in Child.__dict__
        assert Child().count == 4

    def test_existing_descriptor_untouched(self):
        @watch_fields("count")
        class M(ReactiveModule):
            count = watched(2)

        assert M.watched_fields() == ("count",)
        assert M().count == 2

    @pytest.mark.parametrize("name", ["", "1abc", "not a name", None])
    def test_invalid_name(self, name):
        with pytest.raises(ValueError):
            watch_fields("ok", name)
