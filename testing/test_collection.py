import abc
import unittest
from typing import Any, Callable, List

import pytest

from typedcollections import BoolCollection
from typedcollections import FloatCollection
from typedcollections import IntCollection
from typedcollections import IterationMode
from typedcollections import ReplaceMode
from typedcollections import StringCollection
from typedcollections import TypedCollection
from typedcollections import TypeMismatchError
from typedcollections import ValueKind


class Animal(abc.ABC):
    @abc.abstractmethod
    def sound(self) -> str:
        ...


class Dog(Animal):
    def sound(self) -> str:
        return "woof"


class Cat(Animal):
    def sound(self) -> str:
        return "meow"


class AnimalCollection(TypedCollection[Animal]):
    value_type = Animal


class CollectionTest(unittest.TestCase):
    def test_add_continues_keys(self):
        coll = IntCollection({0: 5, 1: 7})
        self.assertIs(coll, coll.add(9))
        self.assertEqual(9, coll[2])
        self.assertEqual([5, 7, 9], list(coll))
        self.assertEqual([0, 1, 2], coll.keys())

    def test_add_keeps_order(self):
        coll = StringCollection()
        for word in ("one", "two", "three"):
            coll.add(word)
        self.assertEqual(["one", "two", "three"], list(coll))
        self.assertEqual([0, 1, 2], coll.keys())

    def test_add_after_explicit_keys(self):
        coll = IntCollection({"a": 1, 7: 2})
        coll.add(3)
        self.assertEqual(["a", 7, 8], coll.keys())

    def test_bool_rejects_int(self):
        coll = BoolCollection()
        with self.assertRaises(TypeMismatchError) as cm:
            coll.add(1)
        self.assertEqual("boolean", cm.exception.declared_type)
        self.assertEqual("integer", cm.exception.actual_type)
        self.assertEqual(0, len(coll))

    def test_remove(self):
        coll = StringCollection({"x": "a", "y": "b"})
        self.assertIs(coll, coll.remove("x"))
        self.assertEqual(1, coll.count())
        self.assertEqual(["b"], list(coll))
        coll.remove("missing")
        del coll["also-missing"]
        self.assertEqual(1, len(coll))
        del coll["y"]
        self.assertEqual(0, len(coll))

    def test_overwrite_keeps_position(self):
        coll = StringCollection({"x": "a", "y": "b", "z": "c"})
        coll["y"] = "B"
        coll.add_by_key("x", "A")
        self.assertEqual(["x", "y", "z"], coll.keys())
        self.assertEqual(["A", "B", "c"], list(coll))

    def test_new_key_goes_last(self):
        coll = IntCollection({3: 1, 1: 2})
        coll[2] = 3
        self.assertEqual([3, 1, 2], coll.keys())

    def test_read_paths(self):
        coll = FloatCollection({"pi": 3.14})
        self.assertEqual(3.14, coll["pi"])
        self.assertEqual(3.14, coll.get("pi"))
        self.assertIsNone(coll.get("e"))
        self.assertEqual(2.72, coll.get("e", 2.72))
        self.assertTrue(coll.exists("pi"))
        self.assertIn("pi", coll)
        self.assertFalse(coll.exists("e"))
        self.assertNotIn("e", coll)
        self.assertNotIn(None, coll)
        with self.assertRaises(KeyError):
            coll["e"]

    def test_unusable_keys_are_never_found(self):
        coll = IntCollection({0: 10, 1: 20, 2: 30})
        for key in (True, False, 1.0, 0.0, None, [1]):
            with self.subTest(key):
                self.assertIsNone(coll.get(key))  # type: ignore[arg-type]
                self.assertEqual("d", coll.get(key, "d"))  # type: ignore[arg-type]
                self.assertFalse(coll.exists(key))
                self.assertNotIn(key, coll)
                with self.assertRaises(KeyError):
                    coll[key]  # type: ignore[index]
                coll.remove(key)  # type: ignore[arg-type]
                del coll[key]  # type: ignore[arg-type]
        self.assertEqual([(0, 10), (1, 20), (2, 30)], coll.items())

    def test_keys_values_items(self):
        coll = IntCollection({"a": 1, "b": 2})
        self.assertEqual(["a", "b"], coll.keys())
        self.assertEqual([1, 2], coll.values())
        self.assertEqual([("a", 1), ("b", 2)], coll.items())

    def test_clear(self):
        coll = IntCollection([1, 2, 3])
        coll.clear()
        self.assertEqual(0, coll.count())
        coll.add(4)
        self.assertEqual([0], coll.keys())

    def test_invalid_keys(self):
        coll = IntCollection()
        for key in (True, 1.5, None, (1,)):
            with self.subTest(key):
                with self.assertRaises(TypeError):
                    coll[key] = 1  # type: ignore[index]
        with self.assertRaises(TypeError):
            IntCollection({True: 1})
        self.assertEqual(0, len(coll))

    def test_build_from_sequence(self):
        coll = StringCollection(["a", "b"])
        self.assertEqual([(0, "a"), (1, "b")], coll.items())
        with self.assertRaises(TypeError):
            StringCollection("ab")  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            StringCollection(x for x in "ab")  # type: ignore[arg-type]

    def test_build_from_collection(self):
        source = IntCollection({"a": 1, "b": 2})
        coll = IntCollection(source)
        self.assertEqual(source.items(), coll.items())
        coll["c"] = 3
        self.assertNotIn("c", source)

    def test_chaining(self):
        coll = IntCollection().add(1).add_by_key("x", 2).remove(0).add(3)
        self.assertEqual([("x", 2), (0, 3)], coll.items())


class ReplaceAllTest(unittest.TestCase):
    def test_round_trip(self):
        items = {"b": 2, 0: 0, "a": 1}
        coll = IntCollection({"old": 9})
        self.assertIs(coll, coll.replace_all(items))
        self.assertEqual(len(items), len(coll))
        for key, value in items.items():
            with self.subTest(key):
                self.assertEqual(value, coll[key])
        self.assertEqual(list(items), coll.keys())

    def test_atomic_leaves_collection_unchanged(self):
        coll = IntCollection({"a": 1})
        with self.assertRaises(TypeMismatchError):
            coll.replace_all({"x": 1, "y": "2", "z": 3})
        self.assertEqual([("a", 1)], coll.items())

    def test_atomic_rejects_bad_key_first(self):
        coll = IntCollection({"a": 1})
        with self.assertRaises(TypeError):
            coll.replace_all({"x": 1, 2.5: 2})  # type: ignore[dict-item]
        self.assertEqual([("a", 1)], coll.items())

    def test_incremental_leaves_partial_state(self):
        coll = IntCollection({"a": 1}, replace_mode="incremental")
        self.assertIs(ReplaceMode.INCREMENTAL, coll.replace_mode)
        with self.assertRaises(TypeMismatchError):
            coll.replace_all({"x": 1, "y": "2", "z": 3})
        self.assertEqual([("x", 1)], coll.items())

    def test_construction_checks_every_value(self):
        with self.assertRaises(TypeMismatchError) as cm:
            FloatCollection({"a": 1.0, "b": 2})
        self.assertEqual("float", cm.exception.declared_type)
        self.assertEqual("integer", cm.exception.actual_type)
        self.assertEqual(2, cm.exception.value)

    def test_replace_with_itself(self):
        coll = IntCollection({"a": 1, "b": 2})
        coll.replace_all(coll)
        self.assertEqual([("a", 1), ("b", 2)], coll.items())


class DeclaredTypeTest(unittest.TestCase):
    def test_scalar_types(self):
        self.assertIs(ValueKind.BOOLEAN, BoolCollection().declared_type)
        self.assertIs(ValueKind.INTEGER, IntCollection().declared_type)
        self.assertIs(ValueKind.FLOAT, FloatCollection().declared_type)
        self.assertIs(ValueKind.STRING, StringCollection().declared_type)

    def test_runtime_declared(self):
        coll = TypedCollection({"n": 1}, value_type=int)
        self.assertIs(ValueKind.INTEGER, coll.declared_type)
        with self.assertRaises(TypeMismatchError):
            coll["t"] = True

        named = TypedCollection[str](value_type="string")
        named.add("ok")
        self.assertEqual(["ok"], list(named))

    def test_missing_declared_type(self):
        with self.assertRaises(TypeError):
            TypedCollection()

    def test_conflicting_declared_type(self):
        with self.assertRaises(TypeError):
            IntCollection(value_type=float)
        # Restating the class's own type is fine.
        IntCollection(value_type=int)
        IntCollection(value_type=ValueKind.INTEGER)

    def test_object_collection(self):
        dogs = AnimalCollection({"rex": Dog()})
        dogs.add(Cat())
        self.assertEqual(["woof", "meow"], [a.sound() for a in dogs])
        with self.assertRaises(TypeMismatchError) as cm:
            dogs.add("fido")  # type: ignore[arg-type]
        self.assertEqual(f"{__name__}.Animal", cm.exception.declared_type)
        self.assertEqual("string", cm.exception.actual_type)

    def test_object_collection_reports_class(self):
        dogs = TypedCollection(value_type=Dog)
        with self.assertRaises(TypeMismatchError) as cm:
            dogs.add(Cat())
        self.assertEqual(f"{__name__}.Dog", cm.exception.declared_type)
        self.assertEqual(f"{__name__}.Cat", cm.exception.actual_type)


class ComparisonTest(unittest.TestCase):
    def test_equality(self):
        self.assertEqual(IntCollection({"a": 1}), IntCollection({"a": 1}))
        self.assertNotEqual(IntCollection({"a": 1}), IntCollection({"a": 2}))
        self.assertNotEqual(
            IntCollection({"a": 1, "b": 2}), IntCollection({"b": 2, "a": 1})
        )
        self.assertNotEqual(
            IntCollection({"a": 1}), TypedCollection({"a": 1}, value_type=int)
        )
        self.assertNotEqual(IntCollection({"a": 1}), {"a": 1})
        with self.assertRaises(TypeError):
            hash(IntCollection())

    def test_copy(self):
        coll = IntCollection({"a": 1}, iteration="live", replace_mode="incremental")
        coll.advance()
        dup = coll.copy()
        self.assertEqual(coll, dup)
        self.assertIsNot(coll, dup)
        self.assertIs(IterationMode.LIVE, dup.iteration_mode)
        self.assertIs(ReplaceMode.INCREMENTAL, dup.replace_mode)
        self.assertEqual(0, dup.position)
        dup.add(2)
        self.assertEqual(1, len(coll))

        generic = TypedCollection({"x": 1.5}, value_type=float)
        self.assertEqual(generic, generic.copy())

    def test_repr(self):
        self.assertEqual("IntCollection({'a': 1})", repr(IntCollection({"a": 1})))
        self.assertEqual(
            "TypedCollection({0: 'x'}, value_type=string)",
            repr(TypedCollection(["x"], value_type=str)),
        )


def _insert_via_add(coll: TypedCollection, value: Any) -> None:
    coll.add(value)


def _insert_via_add_by_key(coll: TypedCollection, value: Any) -> None:
    coll.add_by_key("k", value)


def _insert_via_setitem(coll: TypedCollection, value: Any) -> None:
    coll["k"] = value


def _insert_via_overwrite(coll: TypedCollection, value: Any) -> None:
    coll[0] = value


def _insert_via_replace_all(coll: TypedCollection, value: Any) -> None:
    coll.replace_all([value])


_INSERTERS: List[Callable[[TypedCollection, Any], None]] = [
    _insert_via_add,
    _insert_via_add_by_key,
    _insert_via_setitem,
    _insert_via_overwrite,
    _insert_via_replace_all,
]


@pytest.mark.parametrize("insert", _INSERTERS)
@pytest.mark.parametrize(
    ("cls", "good", "bad"),
    [
        (BoolCollection, False, 0),
        (BoolCollection, True, "true"),
        (IntCollection, 1, True),
        (IntCollection, 1, 1.0),
        (FloatCollection, 1.0, 1),
        (FloatCollection, 0.5, "0.5"),
        (StringCollection, "s", b"s"),
        (StringCollection, "s", None),
    ],
)
def test_type_enforcement(
    insert: Callable[[TypedCollection, Any], None],
    cls: type,
    good: Any,
    bad: Any,
) -> None:
    coll = cls([good])
    before = coll.items()
    with pytest.raises(TypeMismatchError):
        insert(coll, bad)
    assert coll.items() == before
    insert(coll, good)
