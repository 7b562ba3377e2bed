# tests/test_two_three_tree.py
import random

import pytest

from ordered_index.tree.errors import DuplicateKeyError, InvariantViolation
from ordered_index.tree.model import Element, Node
from ordered_index.tree.two_three import DeletePhase, DeleteState, TwoThreeTree


def shape(node):
    """hoja -> tupla de claves; interno -> (claves, [hijos])"""
    keys = tuple(e.key for e in node.elements())
    if node.is_leaf:
        return keys
    return keys, [shape(c) for c in node.children()]


def leaf(*keys):
    n = Node(Element(keys[0], keys[0]))
    if len(keys) > 1:
        n.elem2 = Element(keys[1], keys[1])
    return n


def internal(keys, *children):
    n = Node.with_children(Element(keys[0], keys[0]), children[0], children[1])
    if len(keys) > 1:
        n.elem2 = Element(keys[1], keys[1])
        n.child3 = children[2]
    return n


def tree_from(root, size):
    t = TwoThreeTree()
    t.root = root
    t._size = size
    t.validate()
    return t


def insert_all(tree, keys):
    for k in keys:
        tree.insert(Element(k, k))
        tree.validate()
        assert tree.find(k).key == k


def test_empty_tree():
    t = TwoThreeTree()
    assert t.is_empty()
    assert t.size() == 0
    assert t.height() == 0
    assert t.find(1) is None
    assert t.delete(1) is False
    assert t.dump() == "Empty tree"
    assert t.validate().elements == 0


def test_simple_scenario():
    t = TwoThreeTree()
    insert_all(t, [2, 1, 3, 5, 4])
    assert t.size() == 5
    assert t.find(3) == Element(3, 3)
    assert t.find(3).value == 3

    assert t.delete(3) is True
    t.validate()
    assert t.find(3) is None
    assert t.size() == 4

    for k in [1, 2, 4, 5]:
        assert t.delete(k) is True
        t.validate()
    assert t.is_empty()
    assert t.size() == 0
    assert t.delete(1) is False


def test_dump_format():
    t = TwoThreeTree()
    insert_all(t, [2, 1, 3, 5, 4])
    assert t.dump() == "\n".join([
        "Tree(5):",
        "Element: 2 4",
        "| Element: 1",
        "| Element: 3",
        "| Element: 5",
    ])


def test_ascending_insert_shape():
    t = TwoThreeTree()
    insert_all(t, range(1, 8))
    assert shape(t.root) == ((4,), [((2,), [(1,), (3,)]), ((6,), [(5,), (7,)])])


def test_descending_insert_shape():
    t = TwoThreeTree()
    insert_all(t, range(7, 0, -1))
    assert shape(t.root) == ((4,), [((2,), [(1,), (3,)]), ((6,), [(5,), (7,)])])


def test_middle_split_propagates_to_root():
    t = TwoThreeTree()
    insert_all(t, [10, 20, 30, 40, 50, 25, 27])
    assert shape(t.root) == ((27,), [((20,), [(10,), (25,)]), ((40,), [(30,), (50,)])])
    assert t.height() == 3


@pytest.mark.parametrize("keys", [list(range(200)), list(range(199, -1, -1))])
def test_balance_after_every_insert(keys):
    t = TwoThreeTree()
    for i, k in enumerate(keys, start=1):
        t.insert(Element(k, str(k)))
        report = t.validate()
        assert report.elements == i
        assert report.height == t.height()


def test_ordered_insert_delete():
    t = TwoThreeTree()
    n = 50
    insert_all(t, range(n))
    for i in range(n):
        assert t.delete(i)
        t.validate()
    assert t.is_empty()

    insert_all(t, range(n - 1, -1, -1))
    for i in range(n):
        assert t.delete(i)
        t.validate()
    assert t.is_empty()


def test_stride_insert_delete():
    t = TwoThreeTree()
    n = 80
    elements = [(n + i * 71329) & 0xfffffff for i in range(n)]
    insert_all(t, elements)
    # 13 y 80 son coprimos: recorre todos los índices
    idx = 0
    for _ in range(n):
        idx = (idx + 13) % n
        assert t.delete(elements[idx])
        t.validate()
    assert t.is_empty()


def test_duplicate_insert_rejected_without_changes():
    t = TwoThreeTree()
    insert_all(t, [2, 1, 3, 5, 4])
    before = t.dump()
    with pytest.raises(DuplicateKeyError):
        t.insert(Element(4, "otra"))
    with pytest.raises(KeyError):
        t.insert(Element(1, "otra"))
    assert t.size() == 5
    assert t.dump() == before
    assert t.find(4).value == 4


def test_duplicate_insert_with_replace():
    t = TwoThreeTree()
    insert_all(t, [2, 1, 3, 5, 4])
    before = t.dump()
    t.insert(Element(4, "nuevo"), replace=True)
    t.insert(Element(1, "uno"), replace=True)
    assert t.size() == 5
    assert t.dump() == before
    assert t.find(4).value == "nuevo"
    assert t.find(1).value == "uno"
    t.insert(Element(9, 9), replace=True)
    assert t.size() == 6
    t.validate()


def test_delete_missing_key_leaves_tree_unchanged():
    t = TwoThreeTree()
    insert_all(t, range(0, 40, 2))
    before = t.dump()
    for k in [-1, 1, 17, 39, 100]:
        assert t.delete(k) is False
    assert t.size() == 20
    assert t.dump() == before


def test_contains_and_len():
    t = TwoThreeTree()
    insert_all(t, [5, 3, 8])
    assert 3 in t
    assert 4 not in t
    assert len(t) == 3


def test_string_keys():
    t = TwoThreeTree()
    words = ["pera", "manzana", "uva", "kiwi", "banano", "higo", "lima"]
    for w in words:
        t.insert(Element(w, len(w)))
    t.validate()
    assert t.find("kiwi").value == 4
    assert t.delete("pera")
    assert t.find("pera") is None
    t.validate()


# ---- matriz de casos de fix-hole (padre 2/3-node, posición del hueco, hermano 2/3-node) ----

@pytest.mark.parametrize("build,size,key,expected", [
    # padre 2-node
    (lambda: internal([2], leaf(1), leaf(3)), 3, 1, (2, 3)),
    (lambda: internal([2], leaf(1), leaf(3, 4)), 4, 1, ((3,), [(2,), (4,)])),
    (lambda: internal([2], leaf(1), leaf(3)), 3, 3, (1, 2)),
    (lambda: internal([3], leaf(1, 2), leaf(4)), 4, 4, ((2,), [(1,), (3,)])),
    # padre 3-node
    (lambda: internal([2, 4], leaf(1), leaf(3), leaf(5)), 5, 1, ((4,), [(2, 3), (5,)])),
    (lambda: internal([2, 5], leaf(1), leaf(3, 4), leaf(6)), 6, 1, ((3, 5), [(2,), (4,), (6,)])),
    (lambda: internal([2, 4], leaf(1), leaf(3), leaf(5)), 5, 3, ((4,), [(1, 2), (5,)])),
    (lambda: internal([3, 5], leaf(1, 2), leaf(4), leaf(6)), 6, 4, ((2, 5), [(1,), (3,), (6,)])),
    (lambda: internal([2, 4], leaf(1), leaf(3), leaf(5)), 5, 5, ((2,), [(1,), (3, 4)])),
    (lambda: internal([2, 5], leaf(1), leaf(3, 4), leaf(6)), 6, 6, ((2, 4), [(1,), (3,), (5,)])),
])
def test_fix_hole_cases(build, size, key, expected):
    t = tree_from(build(), size)
    assert t.delete(key) is True
    t.validate()
    assert t.size() == size - 1
    assert shape(t.root) == expected


def test_leaf_three_node_delete_no_hole():
    t = tree_from(internal([3], leaf(1, 2), leaf(4, 5)), 5)
    assert t.delete(1)
    assert shape(t.root) == ((3,), [(2,), (4, 5)])
    assert t.delete(5)
    assert shape(t.root) == ((3,), [(2,), (4,)])


def test_delete_internal_uses_predecessor_and_shrinks_root():
    root = internal([4], internal([2], leaf(1), leaf(3)), internal([6], leaf(5), leaf(7)))
    t = tree_from(root, 7)
    assert t.delete(4)
    t.validate()
    assert shape(t.root) == ((3, 6), [(1, 2), (5,), (7,)])
    assert t.height() == 2


def test_delete_internal_elem2_uses_predecessor():
    t = tree_from(internal([2, 4], leaf(1), leaf(3), leaf(5)), 5)
    assert t.delete(4)
    t.validate()
    assert shape(t.root) == ((3,), [(1, 2), (5,)])


def test_hole_propagates_through_internal_borrow():
    # el merge en el nivel de hojas deja un hueco interno que se resuelve con borrow
    root = internal([4],
                    internal([2], leaf(1), leaf(3)),
                    internal([6, 8], leaf(5), leaf(7), leaf(9)))
    t = tree_from(root, 9)
    assert t.delete(1)
    t.validate()
    assert shape(t.root) == ((6,), [((4,), [(2, 3), (5,)]), ((8,), [(7,), (9,)])])


def test_delete_last_element_empties_tree():
    t = TwoThreeTree()
    t.insert(Element(42, "x"))
    assert t.delete(42)
    assert t.is_empty()
    assert t.root is None
    assert t.delete(42) is False


def test_downwards_phase_reaching_fix_is_fatal():
    t = tree_from(internal([2], leaf(1), leaf(3)), 3)
    state = DeleteState(1)
    assert state.phase is DeletePhase.DOWNWARDS
    with pytest.raises(InvariantViolation):
        t._fix_hole(t.root, 1, state)


def test_random_interleaving_matches_dict_model():
    rng = random.Random(1234)
    t = TwoThreeTree()
    model = {}
    for _ in range(3000):
        k = rng.randrange(500)
        if rng.random() < 0.55:
            if k in model:
                with pytest.raises(DuplicateKeyError):
                    t.insert(Element(k, -k))
            else:
                t.insert(Element(k, -k))
                model[k] = -k
        else:
            assert t.delete(k) is (k in model)
            model.pop(k, None)
        t.validate()
        assert t.size() == len(model)
    for k in range(500):
        found = t.find(k)
        if k in model:
            assert found is not None and found.value == model[k]
        else:
            assert found is None
    for k in list(model):
        assert t.delete(k)
    assert t.is_empty()
