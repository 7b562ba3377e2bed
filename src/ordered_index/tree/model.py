# src/ordered_index/tree/model.py
from collections import namedtuple
from typing import List, Optional, Tuple


class Element(namedtuple("Element", ["key", "value"])):
    """
    Par (key, value) guardado en el árbol.
    Igualdad, hash y orden dependen solo de key; value es carga útil.
    """
    __slots__ = ()

    def __eq__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return self.key == other.key

    def __ne__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return self.key != other.key

    # tuple ya define las comparaciones, hay que pisarlas todas
    def __lt__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return self.key < other.key

    def __le__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return self.key <= other.key

    def __gt__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return self.key > other.key

    def __ge__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return self.key >= other.key

    def __hash__(self):
        return hash(self.key)


# resultado de un overflow que sube al padre
Split = namedtuple("Split", ["element", "left", "right"])


class Node:
    """
    Nodo de un árbol 2-3, sin puntero al padre.
    - 2-node: elem1, hijos child1/child2 (o ninguno si es hoja)
    - 3-node: elem1 <= elem2, hijos child1/child2/child3 (o ninguno si es hoja)
    """
    def __init__(self, element: Element):
        self.elem1: Element = element
        self.elem2: Optional[Element] = None
        self.child1: Optional["Node"] = None
        self.child2: Optional["Node"] = None
        self.child3: Optional["Node"] = None

    @classmethod
    def with_children(cls, element: Element, child1: "Node", child2: "Node") -> "Node":
        node = cls(element)
        node.child1 = child1
        node.child2 = child2
        return node

    @property
    def is_leaf(self) -> bool:
        return self.child1 is None

    @property
    def is_three(self) -> bool:
        return self.elem2 is not None

    def elements(self) -> List[Element]:
        if self.elem2 is None:
            return [self.elem1]
        return [self.elem1, self.elem2]

    def children(self) -> List["Node"]:
        return [c for c in (self.child1, self.child2, self.child3) if c is not None]

    def add_left(self, element: Element, child: Optional["Node"]) -> None:
        """2-node -> 3-node, añadiendo elemento e hijo por la izquierda."""
        self.elem2 = self.elem1
        self.elem1 = element
        self.child3 = self.child2
        self.child2 = self.child1
        self.child1 = child

    def add_right(self, element: Element, child: Optional["Node"]) -> None:
        """2-node -> 3-node, añadiendo elemento e hijo por la derecha."""
        self.elem2 = element
        self.child3 = child

    def trim_left(self) -> Tuple[Element, Optional["Node"]]:
        """3-node -> 2-node; devuelve (elemento, hijo) quitados de la izquierda."""
        removed = (self.elem1, self.child1)
        self.elem1 = self.elem2
        self.elem2 = None
        self.child1 = self.child2
        self.child2 = self.child3
        self.child3 = None
        return removed

    def trim_right(self) -> Tuple[Element, Optional["Node"]]:
        """3-node -> 2-node; devuelve (elemento, hijo) quitados de la derecha."""
        removed = (self.elem2, self.child3)
        self.elem2 = None
        self.child3 = None
        return removed

    def __repr__(self) -> str:
        keys = ", ".join(repr(e.key) for e in self.elements())
        return f"Node({keys})"
