"""
Tests for default behaviour through a Handle.

With no trap hooks a handle must behave like the plain instance it
wraps: every operation is compared against an equivalent plain class.
"""

import weakref

import pytest

from customizable import (
    Customizable, Handle, NotExtensibleErr, PropertyDescriptor, ReadonlyErr, Reflect
)


class Point(Customizable):
    kind = "point"

    def __init__(self, x, y):
        self.x = x
        self.y = y

    def norm2(self):
        return self.x ** 2 + self.y ** 2

    def me(self):
        return self


class PlainPoint:
    kind = "point"

    def __init__(self, x, y):
        self.x = x
        self.y = y

    def norm2(self):
        return self.x ** 2 + self.y ** 2

    def me(self):
        return self


@pytest.fixture
def p():
    return Point(1, 2)


@pytest.fixture
def plain():
    return PlainPoint(1, 2)


class TestConstruction:

    def test_returns_handle(self, p):
        assert type(p) is Handle
        assert Reflect.is_handle(p)
        assert not Reflect.is_handle(PlainPoint(1, 2))

    def test_init_ran_once(self):
        calls = []

        class Counted(Customizable):
            def __init__(self, n):
                calls.append(n)

        Counted(7)
        assert calls == [7]

    def test_instance_checks(self, p):
        assert isinstance(p, Point)
        assert isinstance(p, Customizable)
        assert not isinstance(p, PlainPoint)
        assert p.__class__ is Point

    def test_identity_is_handle(self, p):
        assert p.me() is p
        assert p.norm2.__self__ is p

    def test_weakref(self, p):
        ref = weakref.ref(p)
        assert ref() is p

    def test_super_in_methods(self):
        class Base(Customizable):
            def greet(self):
                return "base"

        class Child(Base):
            def greet(self):
                return "child+" + super().greet()

        assert Child().greet() == "child+base"


class TestDefaults:

    def test_get(self, p, plain):
        assert p.x == plain.x
        assert p.kind == plain.kind
        assert p.norm2() == plain.norm2() == 5

    def test_get_missing(self, p, plain):
        with pytest.raises(AttributeError) as excinfo:
            p.z
        with pytest.raises(AttributeError) as plain_excinfo:
            plain.z
        assert str(excinfo.value) == "'Point' object has no attribute 'z'"
        assert str(plain_excinfo.value) == "'PlainPoint' object has no attribute 'z'"

    def test_set(self, p, plain):
        p.z = 3
        plain.z = 3
        assert p.z == plain.z == 3
        assert Reflect.own_keys(p) == list(vars(plain)) == ['x', 'y', 'z']

    def test_set_via_setattr(self, p):
        setattr(p, 'x', 10)
        assert p.norm2() == 104

    def test_delete(self, p, plain):
        del p.x
        del plain.x
        assert Reflect.own_keys(p) == list(vars(plain)) == ['y']
        with pytest.raises(AttributeError):
            del p.missing

    def test_has(self, p, plain):
        for key in ('x', 'norm2', 'kind'):
            assert key in p
            assert Reflect.has(plain, key)
        assert 'nope' not in p
        assert not Reflect.has(plain, 'nope')

    def test_has_rejects_non_string(self, p):
        with pytest.raises(TypeError):
            1 in p

    def test_own_keys(self, p, plain):
        assert Reflect.own_keys(p) == Reflect.own_keys(plain) == ['x', 'y']

    def test_dir(self, p):
        names = dir(p)
        assert {'x', 'y'} <= set(names)
        assert set(dir(Point)) <= set(names)
        assert len(names) == len(set(names))

    def test_get_own_property_descriptor(self, p, plain):
        desc = Reflect.get_own_property_descriptor(p, 'x')
        assert desc == Reflect.get_own_property_descriptor(plain, 'x')
        assert desc == PropertyDescriptor(value=1, writable=True, enumerable=True, configurable=True)
        assert Reflect.get_own_property_descriptor(p, 'norm2') is None

    def test_get_prototype_of(self, p):
        assert Reflect.get_prototype_of(p) is Point

    def test_set_prototype_of(self, p):
        class Other(Customizable):
            def norm2(self):
                return -1

        assert Reflect.set_prototype_of(p, Other) is True
        assert isinstance(p, Other)
        assert not isinstance(p, Point)
        assert p.norm2() == -1
        assert p.x == 1

    def test_set_prototype_of_rejects_non_class(self, p):
        with pytest.raises(TypeError):
            p.__class__ = 5

    def test_set_prototype_of_incompatible_layout(self, p):
        with pytest.raises(TypeError):
            p.__class__ = PlainPoint

    def test_is_extensible(self, p):
        assert Reflect.is_extensible(p) is True

    def test_prevent_extensions(self, p):
        assert Reflect.prevent_extensions(p) is True
        assert Reflect.is_extensible(p) is False

        p.x = 5
        assert p.x == 5
        with pytest.raises(NotExtensibleErr):
            p.z = 1
        assert Reflect.define_property(p, 'z', {'value': 1}) is False

        class Other(Customizable):
            pass

        assert Reflect.set_prototype_of(p, Other) is False
        with pytest.raises(TypeError):
            p.__class__ = Other

    def test_apply(self):
        class Adder(Customizable):
            def __call__(self, a, b=0):
                return a + b

        class Selfish(Customizable):
            def __call__(self):
                return self

        assert Adder()(1, b=2) == 3
        s = Selfish()
        assert s() is s

    def test_construct(self, p):
        made = Reflect.construct(p, 3, 4)
        assert Reflect.is_handle(made)
        assert made is not p
        assert isinstance(made, Point)
        assert made.norm2() == 25

    def test_repr(self, p):
        assert repr(p).startswith("<")
        assert "Point handle at" in repr(p)
        assert str(p) == repr(p)

        class Named(Customizable):
            def __init__(self):
                self.name = "ada"

            def __repr__(self):
                return f"Named({self.name})"

        assert repr(Named()) == "Named(ada)"
        assert str(Named()) == "Named(ada)"


class TestPropertyModel:
    """Descriptor-based definitions on a handle"""

    def test_define_readonly(self, p):
        assert Reflect.define_property(p, 'ro', {'value': 1}) is True
        assert p.ro == 1
        assert Reflect.get_own_property_descriptor(p, 'ro') == \
            PropertyDescriptor(value=1, writable=False, enumerable=False, configurable=False)

        with pytest.raises(ReadonlyErr):
            p.ro = 2
        with pytest.raises(AttributeError):
            del p.ro
        assert p.ro == 1

    def test_redefine_non_configurable(self, p):
        Reflect.define_property(p, 'ro', {'value': 1})
        assert Reflect.define_property(p, 'ro', {'value': 2}) is False
        assert Reflect.define_property(p, 'ro', {'value': 1}) is True
        assert Reflect.define_property(p, 'ro', {'enumerable': True}) is False
        assert Reflect.define_property(p, 'ro', {'get': lambda self: 1}) is False

    def test_redefine_non_writable_nan(self, p):
        Reflect.define_property(p, 'nan', {'value': float('nan')})
        assert Reflect.define_property(p, 'nan', {'value': float('nan')}) is True
        Reflect.define_property(p, 'zero', {'value': 0.0})
        assert Reflect.define_property(p, 'zero', {'value': -0.0}) is False

    def test_redefine_keeps_unmentioned_attributes(self, p):
        assert Reflect.define_property(p, 'x', {'writable': False}) is True
        desc = Reflect.get_own_property_descriptor(p, 'x')
        assert desc.value() == 1
        assert not desc.writable()
        assert desc.enumerable()
        assert desc.configurable()

    def test_accessor(self, p):
        assert Reflect.define_property(p, 'scaled', {
            'get': lambda self: self.x * 10,
            'set': lambda self, v: setattr(self, 'x', v // 10),
            'configurable': True,
        }) is True

        assert p.scaled == 10
        p.scaled = 50
        assert p.x == 5
        assert 'scaled' in p
        assert Reflect.own_keys(p) == ['x', 'y', 'scaled']
        assert Reflect.get_own_property_descriptor(p, 'scaled').is_accessor()

        del p.scaled
        assert 'scaled' not in p

    def test_accessor_without_setter(self, p):
        Reflect.define_property(p, 'fixed', {'get': lambda self: 42})
        assert p.fixed == 42
        with pytest.raises(ReadonlyErr):
            p.fixed = 1

    def test_accessor_to_data(self, p):
        Reflect.define_property(p, 'v', {'get': lambda self: 1, 'configurable': True})
        assert Reflect.define_property(p, 'v', {'value': 2, 'writable': True}) is True
        assert p.v == 2
        desc = Reflect.get_own_property_descriptor(p, 'v')
        assert desc.is_data()
        assert desc.configurable()

    def test_direct_target_access_honors_model(self):
        class Locked(Customizable):
            def trap_set(self, target, key, value):
                setattr(target, key, value)

        h = Locked()
        Reflect.define_property(h, 'ro', {'value': 1})
        with pytest.raises(ReadonlyErr):
            h.ro = 2


class Bag(Customizable):
    def __init__(self, *items):
        self.items = list(items)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, i):
        return self.items[i]

    def __setitem__(self, i, value):
        self.items[i] = value

    def __delitem__(self, i):
        del self.items[i]

    def __eq__(self, other):
        return list(self) == list(other)

    def __hash__(self):
        return hash(tuple(self.items))

    def __add__(self, other):
        return self.__class__(*self.items, *other)

    def __radd__(self, other):
        return self.__class__(*other, *self.items)

    def __neg__(self):
        return self.__class__(*reversed(self.items))

    def __enter__(self):
        self.items.append('open')
        return self

    def __exit__(self, *exc):
        self.items.remove('open')
        return False


class PlainBag:
    def __init__(self, *items):
        self.items = list(items)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, i):
        return self.items[i]


class TestProtocols:
    """Special methods the class defines keep working through the handle"""

    def test_container(self):
        b = Bag(1, 2, 3)
        assert len(b) == len(PlainBag(1, 2, 3)) == 3
        assert list(b) == [1, 2, 3]
        assert b[0] == 1
        b[0] = 10
        del b[1]
        assert b.items == [10, 3]
        assert list(reversed(b)) == [3, 10]

    def test_bool(self):
        assert not Bag()
        assert Bag(1)
        assert Point(0, 0)

    def test_equality_and_hash(self):
        assert Bag(1, 2) == Bag(1, 2)
        assert Bag(1, 2) != Bag(2, 1)
        assert hash(Bag(1, 2)) == hash((1, 2))
        assert len({Bag(1), Bag(1)}) == 1

    def test_default_equality_is_identity(self, p):
        assert p == p
        assert p != Point(1, 2)
        assert {p: 1}[p] == 1

    def test_unhashable(self):
        class Keyed(Customizable):
            def __eq__(self, other):
                return True

        with pytest.raises(TypeError, match="unhashable type: 'Keyed'"):
            hash(Keyed())

    def test_operators(self):
        b = Bag(1) + [2]
        assert Reflect.is_handle(b)
        assert b.items == [1, 2]
        assert ([0] + Bag(1)).items == [0, 1]
        assert (-Bag(1, 2)).items == [2, 1]

    def test_context_manager(self):
        b = Bag()
        with b as inner:
            assert inner is b
            assert b.items == ['open']
        assert b.items == []

    def test_iterate_by_index(self):
        class Squares(Customizable):
            def __getitem__(self, i):
                if i >= 3:
                    raise IndexError(i)
                return i * i

        assert list(Squares()) == [0, 1, 4]

    def test_missing_protocols(self, p):
        with pytest.raises(TypeError, match=r"object of type 'Point' has no len\(\)"):
            len(p)
        with pytest.raises(TypeError, match="'Point' object is not iterable"):
            iter(p)
        with pytest.raises(TypeError, match="'Point' object is not subscriptable"):
            p[0]
        with pytest.raises(TypeError):
            p + 1
        with pytest.raises(TypeError):
            -p
        with pytest.raises(TypeError):
            with p:
                pass

    def test_format(self, p):
        assert f"{p}" == str(p)


class Shouting(Customizable):
    seen = []

    def __setattr__(self, name, value):
        Shouting.seen.append(name)
        super().__setattr__(name, value.upper() if isinstance(value, str) else value)

    def __delattr__(self, name):
        Shouting.seen.append('-' + name)
        super().__delattr__(name)


class PlainShouting:
    def __setattr__(self, name, value):
        super().__setattr__(name, value.upper() if isinstance(value, str) else value)


class TestCustomAssignment:
    """A class's own __setattr__ and __delattr__ run for handle writes"""

    @pytest.fixture(autouse=True)
    def clear_seen(self):
        Shouting.seen.clear()

    def test_setattr(self):
        h = Shouting()
        plain = PlainShouting()
        h.name = "ada"
        plain.name = "ada"
        assert h.name == plain.name == "ADA"
        assert Shouting.seen == ['name']

    def test_delattr(self):
        h = Shouting()
        h.name = "ada"
        del h.name
        assert Shouting.seen == ['name', '-name']
        assert 'name' not in h

    def test_object_model_still_enforced(self):
        h = Shouting()
        Reflect.define_property(h, 'ro', {'value': 'x'})
        with pytest.raises(ReadonlyErr):
            h.ro = 'y'
        assert Shouting.seen == ['ro']
