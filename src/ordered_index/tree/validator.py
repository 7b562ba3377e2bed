# src/ordered_index/tree/validator.py
"""
Validador estructural del árbol 2-3. Recorre todo el árbol y recalcula:
- orden de elementos dentro de cada nodo
- aridad (2-node / 3-node, hoja vs interno)
- rango de claves de cada subárbol respecto a sus ancestros
- misma profundidad para todas las hojas
- número total de elementos vs tamaño registrado
Es solo diagnóstico (tests / debug), nunca se llama desde insert/delete.
"""
from collections import namedtuple
from typing import Any, Optional

from .errors import InvariantViolation
from .model import Node

ValidationReport = namedtuple("ValidationReport", ["elements", "height"])


class _ValidateState:
    def __init__(self):
        self.leaf_level: Optional[int] = None
        self.elements = 0


def _check(cond: bool, msg: str):
    if not cond:
        raise InvariantViolation(msg)


def _check_range(node: Node, low: Any, high: Any):
    # límites no estrictos, como en insert (key <= elem1 va a child1)
    for e in node.elements():
        if low is not None:
            _check(e.key >= low, f"{node!r}: key {e.key!r} < lower bound {low!r}")
        if high is not None:
            _check(e.key <= high, f"{node!r}: key {e.key!r} > upper bound {high!r}")


def _validate_node(node: Node, level: int, low: Any, high: Any, state: _ValidateState):
    _check_range(node, low, high)
    state.elements += 1
    if node.elem2 is not None:
        _check(node.elem1.key <= node.elem2.key,
               f"{node!r}: elements out of order")
        state.elements += 1

    if node.child1 is None:
        _check(node.child2 is None and node.child3 is None,
               f"{node!r}: leaf with child2/child3")
        if state.leaf_level is None:
            state.leaf_level = level
        else:
            _check(level == state.leaf_level,
                   f"{node!r}: leaf at depth {level}, expected {state.leaf_level}")
        return

    _check(node.child2 is not None, f"{node!r}: internal node without child2")
    if node.elem2 is None:
        _check(node.child3 is None, f"{node!r}: 2-node with child3")
        _validate_node(node.child1, level + 1, low, node.elem1.key, state)
        _validate_node(node.child2, level + 1, node.elem1.key, high, state)
        return

    _check(node.child3 is not None, f"{node!r}: 3-node without child3")
    _validate_node(node.child1, level + 1, low, node.elem1.key, state)
    _validate_node(node.child2, level + 1, node.elem1.key, node.elem2.key, state)
    _validate_node(node.child3, level + 1, node.elem2.key, high, state)


def validate_tree(root: Optional[Node], size: int) -> ValidationReport:
    """
    Valida el árbol completo desde root.
    Lanza InvariantViolation al primer invariante roto.
    Retorna ValidationReport(elements, height); height = 0 si está vacío.
    """
    if root is None:
        _check(size == 0, f"empty tree with size {size}")
        return ValidationReport(0, 0)
    state = _ValidateState()
    _validate_node(root, 0, None, None, state)
    _check(state.elements == size,
           f"counted {state.elements} elements, tree size is {size}")
    return ValidationReport(state.elements, state.leaf_level + 1)
