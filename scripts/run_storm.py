# scripts/run_storm.py
"""
Ejecuta la "tormenta" aleatoria de inserts/deletes sobre el árbol 2-3 y guarda resultados.
Uso (ejemplo, desde la raíz del proyecto):
  python scripts/run_storm.py
  python scripts/run_storm.py --n 10000 --seed 0 --out results/run1
  python scripts/run_storm.py --n 200000 --validate-every 1000 --out results/big

Salida en --out:
  storm_history.csv   phase,step,size,height
  storm_summary.json  métricas agregadas
  level_stats.csv     nodos por nivel del árbol tras la fase de insert
"""
from pathlib import Path
import argparse
import sys

try:
    from ordered_index.sim.storm import StormRunner, DEFAULT_NUM_ELEMENTS, DEFAULT_KEY_SPACE
    from ordered_index.io import level_stats, save_storm_report
except Exception as e:
    print("ERROR: no se pudo importar ordered_index. Instala el paquete (pip install -e .) desde la raíz.")
    raise


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Random insert/delete storm sobre TwoThreeTree")
    p.add_argument("--n", type=int, default=DEFAULT_NUM_ELEMENTS)
    p.add_argument("--key-space", type=int, default=DEFAULT_KEY_SPACE)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--validate-every", type=int, default=1)
    p.add_argument("--out", type=str, default=None, help="Carpeta de salida (opcional)")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    runner = StormRunner(
        num_elements=args.n,
        key_space=args.key_space,
        seed=args.seed,
        validate_every=args.validate_every,
        verbose=True
    )

    captured = {}

    def show_levels(tree):
        print("Tamaño tras insert:", tree.size(), "| altura:", tree.height())
        captured["stats"] = level_stats(tree)
        print(captured["stats"].to_string(index=False))

    result = runner.run(after_insert=show_levels)
    print("Árbol vacío tras delete:", runner.tree.is_empty())
    print("Insert (s): %.3f | Delete (s): %.3f" % (result["insert_seconds"], result["delete_seconds"]))

    if args.out:
        out = save_storm_report(result, Path(args.out))
        captured["stats"].to_csv(out / "level_stats.csv", index=False)
        print("Resultados guardados en", out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
