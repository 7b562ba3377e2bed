# src/ordered_index/sim/storm.py
from typing import List, Dict, Any, Optional, Tuple, Callable
import time

import numpy as np

from ordered_index.tree.errors import InvariantViolation
from ordered_index.tree.model import Element
from ordered_index.tree.two_three import TwoThreeTree

DEFAULT_NUM_ELEMENTS = 10000
DEFAULT_KEY_SPACE = 10_000_000


def _check(cond: bool, msg: str):
    if not cond:
        raise InvariantViolation(msg)


class StormRunner:
    """
    "Tormenta" aleatoria de inserts y luego deletes sobre un TwoThreeTree.
    - Inserta num_elements claves distintas de [0, key_space), comprobando find después de cada una.
    - Borra todas en orden aleatorio (swap-remove sobre una lista que se achica).
    - Llama a validate() cada validate_every pasos (0 = solo al final de cada fase).
    Cualquier inconsistencia lanza AssertionError (InvariantViolation es subclase).
    """

    def __init__(
        self,
        num_elements: int = DEFAULT_NUM_ELEMENTS,
        key_space: int = DEFAULT_KEY_SPACE,
        seed: Optional[int] = None,
        validate_every: int = 1,
        verbose: bool = False
    ):
        if num_elements < 0:
            raise ValueError("num_elements must be >= 0")
        if key_space < num_elements:
            raise ValueError("key_space must be >= num_elements (keys are distinct)")
        if validate_every < 0:
            raise ValueError("validate_every must be >= 0")
        self.num_elements = int(num_elements)
        self.key_space = int(key_space)
        self.validate_every = int(validate_every)
        self.verbose = verbose
        self.rng = np.random.default_rng(seed)
        self.tree = TwoThreeTree()

    def _should_validate(self, step: int) -> bool:
        return self.validate_every > 0 and step % self.validate_every == 0

    def _log(self, *args):
        if self.verbose:
            print(*args)

    def insert_phase(self) -> Tuple[List[int], List[Tuple[str, int, int, int]]]:
        keys = [int(k) for k in self.rng.choice(self.key_space, size=self.num_elements, replace=False)]
        history = []
        self._log(f"Insertando {len(keys)} claves...")
        for step, key in enumerate(keys, start=1):
            self.tree.insert(Element(key, key))
            if self._should_validate(step):
                self.tree.validate()
            found = self.tree.find(key)
            _check(found is not None and found.key == key, f"find({key}) failed after insert")
            history.append(("insert", step, self.tree.size(), self.tree.height()))
        _check(self.tree.size() == len(keys), "size mismatch after inserts")
        self.tree.validate()
        return keys, history

    def delete_phase(self, keys: List[int]) -> List[Tuple[str, int, int, int]]:
        remaining = list(keys)
        history = []
        self._log(f"Borrando {len(remaining)} claves en orden aleatorio...")
        step = 0
        for i in range(len(remaining), 0, -1):
            n = int(self.rng.integers(0, i))
            key = remaining[n]
            remaining[n] = remaining[i - 1]
            remaining.pop()
            step += 1
            deleted = self.tree.delete(key)
            _check(deleted, f"delete({key}) returned False")
            if self._should_validate(step):
                self.tree.validate()
            history.append(("delete", step, self.tree.size(), self.tree.height()))
        _check(self.tree.is_empty(), "tree not empty after deleting every key")
        self.tree.validate()
        return history

    def run(self, after_insert: Optional[Callable[[TwoThreeTree], None]] = None) -> Dict[str, Any]:
        """
        Ejecuta ambas fases. after_insert(tree), si se pasa, se llama entre las dos fases.
        Retorna un dict con métricas y el historial (phase, step, size, height) por paso.
        """
        t0 = time.perf_counter()
        keys, history = self.insert_phase()
        t1 = time.perf_counter()
        max_height = self.tree.height()
        self._log("Insert terminado. size:", self.tree.size(), "height:", max_height)
        if after_insert is not None:
            after_insert(self.tree)
        t_del = time.perf_counter()
        history.extend(self.delete_phase(keys))
        t2 = time.perf_counter()
        self._log("Delete terminado. Árbol vacío:", self.tree.is_empty())

        return {
            "inserted": len(keys),
            "deleted": len(keys),
            "max_height": max_height,
            "final_size": self.tree.size(),
            "insert_seconds": t1 - t0,
            "delete_seconds": t2 - t_del,
            "history": history
        }
