# src/ordered_index/io.py
import json
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from ordered_index.tree.two_three import TwoThreeTree

HISTORY_COLUMNS = ["phase", "step", "size", "height"]


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def level_stats(tree: TwoThreeTree) -> pd.DataFrame:
    """
    Resumen por nivel del árbol: columnas depth, two_nodes, three_nodes, leaves, elements.
    Árbol vacío -> DataFrame vacío con las mismas columnas.
    """
    rows = []
    level = [tree.root] if tree.root is not None else []
    depth = 0
    while level:
        rows.append({
            "depth": depth,
            "two_nodes": sum(1 for n in level if not n.is_three),
            "three_nodes": sum(1 for n in level if n.is_three),
            "leaves": sum(1 for n in level if n.is_leaf),
            "elements": sum(len(n.elements()) for n in level)
        })
        level = [c for n in level for c in n.children()]
        depth += 1
    return pd.DataFrame(rows, columns=["depth", "two_nodes", "three_nodes", "leaves", "elements"])


def save_storm_report(result: Dict[str, Any], out_dir: Path) -> Path:
    """
    Guarda el resultado de StormRunner.run() en out_dir:
      - storm_history.csv  (phase, step, size, height por paso)
      - storm_summary.json (métricas, sin el historial)
    Devuelve la path del out_dir.
    """
    out_p = _ensure_dir(Path(out_dir))

    df = pd.DataFrame(result.get("history", []), columns=HISTORY_COLUMNS)
    df.to_csv(out_p / "storm_history.csv", index=False)

    summary = {k: v for k, v in result.items() if k != "history"}
    with open(out_p / "storm_summary.json", "w", encoding="utf-8") as fh:
        json.dump(summary, fh, indent=2)

    return out_p
