# src/ordered_index/tree/two_three.py
"""
Árbol 2-3 en memoria (índice ordenado clave -> valor).
- insert: baja hasta una hoja; los splits suben como valor de retorno (Split)
- delete: baja hasta la clave (o su predecesor) y los "huecos" suben a través
  de un DeleteState compartido por toda la recursión
- find: descenso iterativo de solo lectura
- validate: oráculo de invariantes (ver validator.py)
No hay punteros al padre: la pila de recursión hace ese trabajo.
"""
from enum import Enum
from typing import Any, List, Optional, Tuple

from .errors import DuplicateKeyError, InvariantViolation
from .model import Element, Node, Split
from .validator import ValidationReport, validate_tree


class DeletePhase(Enum):
    DOWNWARDS = "downwards"   # bajando por el árbol
    FIX_HOLE = "fix_hole"     # un hijo quedó sin elementos, el padre lo arregla
    DONE = "done"             # terminado; ver DeleteState.found


class DeleteState:
    """Estado de un delete, pasado por referencia a cada nivel de la recursión."""
    def __init__(self, key: Any):
        self.key = key
        self.phase = DeletePhase.DOWNWARDS
        self.found = False
        self.predecessor: Optional[Element] = None

    def done(self, found: bool):
        self.phase = DeletePhase.DONE
        self.found = found


class TwoThreeTree:
    """Árbol 2-3. API: insert(element), delete(key), find(key), size(), validate()."""

    def __init__(self):
        self.root: Optional[Node] = None
        self._size = 0

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self.root is None

    def height(self) -> int:
        h = 0
        node = self.root
        while node is not None:
            h += 1
            node = node.child1
        return h

    def __len__(self):
        return self._size

    def __contains__(self, key) -> bool:
        return self._locate(key) is not None

    # -------------------------
    # FIND
    # -------------------------
    def _locate(self, key: Any) -> Optional[Tuple[Node, str]]:
        node = self.root
        while node is not None:
            if key == node.elem1.key:
                return node, "elem1"
            if key < node.elem1.key:
                node = node.child1
            elif node.elem2 is None:
                node = node.child2
            elif key == node.elem2.key:
                return node, "elem2"
            elif key < node.elem2.key:
                node = node.child2
            else:
                node = node.child3
        return None

    def find(self, key: Any) -> Optional[Element]:
        hit = self._locate(key)
        if hit is None:
            return None
        node, slot = hit
        return getattr(node, slot)

    # -------------------------
    # INSERT
    # -------------------------
    def insert(self, element: Element, replace: bool = False) -> None:
        """
        Inserta element. Si la clave ya existe lanza DuplicateKeyError sin tocar
        el árbol; con replace=True sobrescribe el elemento existente (size no cambia).
        """
        hit = self._locate(element.key)
        if hit is not None:
            if not replace:
                raise DuplicateKeyError(element.key)
            node, slot = hit
            setattr(node, slot, element)
            return

        if self.root is None:
            self.root = Node(element)
        else:
            split = self._insert_node(self.root, element)
            if split is not None:
                # el split salió de la raíz: el árbol crece un nivel
                self.root = Node.with_children(split.element, split.left, split.right)
        self._size += 1

    def _insert_node(self, node: Node, element: Element) -> Optional[Split]:
        key = element.key
        if node.child1 is not None:
            if key <= node.elem1.key:
                split = self._insert_node(node.child1, element)
                if split is None:
                    return None
                if node.elem2 is None:
                    #    (a)              (s, a)
                    #   /   \     =>     /  |   \
                    #  S    (b)       s.l  s.r  (b)
                    node.elem2 = node.elem1
                    node.elem1 = split.element
                    node.child3 = node.child2
                    node.child1 = split.left
                    node.child2 = split.right
                    return None
                #      (a, b)                 (a)
                #    /   |   \      =>      /     \
                #   S   (c)  (d)          (s)      (b)
                #                        /   \    /   \
                #                      s.l  s.r (c)   (d)
                left = Node.with_children(split.element, split.left, split.right)
                right = Node.with_children(node.elem2, node.child2, node.child3)
                return Split(node.elem1, left, right)

            if node.elem2 is None or key <= node.elem2.key:
                split = self._insert_node(node.child2, element)
                if split is None:
                    return None
                if node.elem2 is None:
                    #    (a)             (a, s)
                    #   /   \     =>    /  |   \
                    # (b)    S        (b) s.l  s.r
                    node.child2 = split.left
                    node.add_right(split.element, split.right)
                    return None
                #     (a, b)                 (s)
                #    /  |   \      =>      /     \
                #  (c)  S   (d)          (a)      (b)
                #                       /   \    /   \
                #                     (c)  s.l  s.r  (d)
                left = Node.with_children(node.elem1, node.child1, split.left)
                right = Node.with_children(node.elem2, split.right, node.child3)
                return Split(split.element, left, right)

            split = self._insert_node(node.child3, element)
            if split is None:
                return None
            #    (a, b)                 (b)
            #   /  |   \      =>      /     \
            # (c) (d)   S           (a)      (s)
            #                      /   \    /   \
            #                    (c)  (d) s.l   s.r
            left = Node.with_children(node.elem1, node.child1, node.child2)
            right = Node.with_children(split.element, split.left, split.right)
            return Split(node.elem2, left, right)

        # hoja
        if node.elem2 is not None:
            # tres elementos: sube el del medio
            if key < node.elem1.key:
                return Split(node.elem1, Node(element), Node(node.elem2))
            if key < node.elem2.key:
                return Split(element, Node(node.elem1), Node(node.elem2))
            return Split(node.elem2, Node(node.elem1), Node(element))
        if node.elem1.key <= key:
            node.elem2 = element
        else:
            node.elem2 = node.elem1
            node.elem1 = element
        return None

    # -------------------------
    # DELETE
    # -------------------------
    def delete(self, key: Any) -> bool:
        """Borra la clave. Retorna True si estaba y se borró; si no, el árbol no cambia."""
        if self.root is None:
            return False
        state = DeleteState(key)
        self._delete_node(self.root, state)

        if state.phase is DeletePhase.DONE:
            if state.found:
                self._size -= 1
            return state.found
        if state.phase is DeletePhase.FIX_HOLE:
            # la raíz quedó vacía: su único hijo (o nada) pasa a ser la raíz
            self.root = self.root.child1
            self._size -= 1
            return True
        raise InvariantViolation(f"delete({key!r}) finished in phase {state.phase}")

    def _delete_node(self, node: Node, state: DeleteState) -> None:
        key = state.key
        if node.child1 is None:
            if node.elem1.key == key:
                if node.elem2 is not None:
                    node.elem1 = node.elem2
                    node.elem2 = None
                    state.done(True)
                else:
                    # hoja con un solo elemento: queda un hueco
                    state.phase = DeletePhase.FIX_HOLE
                return
            if node.elem2 is not None and node.elem2.key == key:
                node.elem2 = None
                state.done(True)
                return
            state.done(False)
            return

        if key < node.elem1.key:
            self._delete_node(node.child1, state)
            child_num = 1
        elif key == node.elem1.key:
            # nodo interno: se reemplaza por el predecesor en orden
            self._extract_predecessor(node.child1, state)
            node.elem1 = state.predecessor
            child_num = 1
        elif node.elem2 is None:
            self._delete_node(node.child2, state)
            child_num = 2
        elif key < node.elem2.key:
            self._delete_node(node.child2, state)
            child_num = 2
        elif key > node.elem2.key:
            self._delete_node(node.child3, state)
            child_num = 3
        else:
            self._extract_predecessor(node.child2, state)
            node.elem2 = state.predecessor
            child_num = 2
        self._fix_hole(node, child_num, state)

    def _extract_predecessor(self, node: Node, state: DeleteState) -> None:
        """Quita el elemento máximo del subárbol y lo deja en state.predecessor."""
        if node.child3 is not None:
            self._extract_predecessor(node.child3, state)
            self._fix_hole(node, 3, state)
        elif node.child2 is not None:
            self._extract_predecessor(node.child2, state)
            self._fix_hole(node, 2, state)
        elif node.elem2 is not None:
            state.predecessor = node.elem2
            node.elem2 = None
            state.done(True)
        else:
            state.predecessor = node.elem1
            state.phase = DeletePhase.FIX_HOLE

    def _fix_hole(self, node: Node, child_num: int, state: DeleteState) -> None:
        """
        Fase de subida. Si el hijo child_num quedó como hueco (sin elementos,
        con a lo sumo un hijo en child1) se presta un elemento del hermano
        (borrow) o se fusiona con él (merge). Solo el merge sobre un 2-node
        deja a node como nuevo hueco.
        """
        if state.phase is DeletePhase.DONE:
            return
        if state.phase is not DeletePhase.FIX_HOLE:
            raise InvariantViolation(f"unexpected phase {state.phase} while fixing {node!r}")

        child1 = node.child1
        child2 = node.child2

        if node.elem2 is None:
            if child_num == 1:
                if child2.elem2 is None:
                    #   (a)             (o)
                    #  /   \     =>      |
                    # (o)  (b)         (a, b)
                    #  |   / \         /  |  \
                    # (c) (d) (e)    (c) (d) (e)
                    child2.add_left(node.elem1, child1.child1)
                    node.child1 = child2
                    node.child2 = None
                else:
                    #   (a)                (b)
                    #  /   \       =>    /     \
                    # (o)  (b, c)      (a)     (c)
                    #  |   / | \       / \     / \
                    # (d) (e)(f)(g)  (d) (e) (f) (g)
                    child1.elem1 = node.elem1
                    node.elem1, child1.child2 = child2.trim_left()
                    state.done(True)
            else:
                if child1.elem2 is None:
                    #    (a)             (o)
                    #   /   \     =>      |
                    # (b)   (o)         (b, a)
                    # / \    |          /  |  \
                    #        (c)              (c)
                    child1.add_right(node.elem1, child2.child1)
                    node.child2 = None
                else:
                    #      (a)              (c)
                    #    /     \     =>    /   \
                    #  (b, c)  (o)       (b)   (a)
                    #  / | \    |        / \   / \
                    # (d)(e)(f) (g)    (d)(e)(f) (g)
                    child2.elem1 = node.elem1
                    child2.child2 = child2.child1
                    node.elem1, child2.child1 = child1.trim_right()
                    state.done(True)
            return

        # node es un 3-node: el hueco siempre se absorbe aquí
        child3 = node.child3
        if child_num == 1:
            if child2.elem2 is None:
                #     (a, b)              (b)
                #    /  |   \            /   \
                #  (o)  (c)  ..   =>  (a, c)  ..
                child2.add_left(node.elem1, child1.child1)
                node.trim_left()
            else:
                #     (a, b)                 (c, b)
                #    /  |    \              /  |   \
                #  (o) (c, d) ..    =>    (a)  (d)  ..
                child1.elem1 = node.elem1
                node.elem1, child1.child2 = child2.trim_left()
        elif child_num == 2:
            if child1.elem2 is None:
                #     (a, b)              (b)
                #    /  |   \            /   \
                #  (c)  (o)  ..   =>  (c, a)  ..
                child1.add_right(node.elem1, child2.child1)
                node.elem1 = node.elem2
                node.elem2 = None
                node.child2 = child3
                node.child3 = None
            else:
                #      (a, b)                (d, b)
                #     /   |  \              /  |   \
                #  (c, d) (o) ..    =>    (c)  (a)  ..
                child2.elem1 = node.elem1
                child2.child2 = child2.child1
                node.elem1, child2.child1 = child1.trim_right()
        else:
            if child2.elem2 is None:
                #    (a, b)              (a)
                #   /  |   \            /   \
                #  .. (c)  (o)   =>   ..  (c, b)
                child2.add_right(node.elem2, child3.child1)
                node.elem2 = None
                node.child3 = None
            else:
                #    (a, b)                (a, d)
                #   /   |    \            /  |   \
                #  .. (c, d) (o)   =>   ..  (c)  (b)
                child3.elem1 = node.elem2
                child3.child2 = child3.child1
                node.elem2, child3.child1 = child2.trim_right()
        state.done(True)

    # -------------------------
    # DIAGNÓSTICO
    # -------------------------
    def validate(self) -> ValidationReport:
        return validate_tree(self.root, self._size)

    def dump(self) -> str:
        if self.root is None:
            return "Empty tree"
        lines: List[str] = [f"Tree({self._size}):"]
        self._dump_node(self.root, 0, lines)
        return "\n".join(lines)

    def _dump_node(self, node: Node, indent: int, lines: List[str]):
        keys = " ".join(str(e.key) for e in node.elements())
        lines.append("| " * indent + f"Element: {keys}")
        for child in node.children():
            self._dump_node(child, indent + 1, lines)

    def print_tree(self):
        print(self.dump())
