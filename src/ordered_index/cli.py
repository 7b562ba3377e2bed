# src/ordered_index/cli.py
import argparse
import os
from pathlib import Path

from ordered_index.io import level_stats, save_storm_report
from ordered_index.sim.storm import StormRunner, DEFAULT_NUM_ELEMENTS, DEFAULT_KEY_SPACE
from ordered_index.tree.errors import DuplicateKeyError
from ordered_index.tree.model import Element
from ordered_index.tree.two_three import TwoThreeTree

# visualización opcional
try:
    from ordered_index.viz.visualizer import visualize_tree
    HAS_VIS = True
except Exception:
    HAS_VIS = False

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_OUT_DIR = os.path.join(PROJECT_ROOT, "results", "storm")


def _plot(tree, title):
    if not HAS_VIS:
        print("Visualización no disponible. Instala networkx y matplotlib.")
    else:
        visualize_tree(tree, title=title)


def cmd_storm(args):
    runner = StormRunner(
        num_elements=args.n,
        key_space=args.key_space,
        seed=args.seed,
        validate_every=args.validate_every,
        verbose=True
    )
    result = runner.run()

    print("=== RESULTADO ===")
    print("Insertados:", result["inserted"], "| Borrados:", result["deleted"])
    print("Altura máxima:", result["max_height"])
    print("Tamaño final:", result["final_size"])
    print("Insert (s): %.3f | Delete (s): %.3f" % (result["insert_seconds"], result["delete_seconds"]))

    if args.out:
        out = save_storm_report(result, Path(args.out))
        print("Reporte guardado en", out)


def cmd_demo(args):
    tree = TwoThreeTree()
    for k in args.keys:
        try:
            tree.insert(Element(k, k))
        except DuplicateKeyError:
            raise SystemExit(f"Clave duplicada en --keys: {k}")
    print("== Después de insertar", args.keys)
    tree.print_tree()

    for k in args.delete or []:
        print(f"delete({k}) ->", tree.delete(k))
    if args.delete:
        print("== Después de borrar", args.delete)
        tree.print_tree()

    for k in args.find or []:
        print(f"find({k}) ->", tree.find(k))

    report = tree.validate()
    print("Validación OK. elements:", report.elements, "height:", report.height)
    if not tree.is_empty():
        print(level_stats(tree).to_string(index=False))

    if args.plot:
        _plot(tree, title=f"Árbol 2-3 ({tree.size()} elementos)")


def main(argv=None):
    p = argparse.ArgumentParser(prog="ordered_index")
    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("storm", help="Inserts y deletes aleatorios validando el árbol")
    ps.add_argument("--n", type=int, default=DEFAULT_NUM_ELEMENTS, help="Número de claves")
    ps.add_argument("--key-space", type=int, default=DEFAULT_KEY_SPACE, help="Claves en [0, key_space)")
    ps.add_argument("--seed", type=int, default=None)
    ps.add_argument("--validate-every", type=int, default=1, help="Validar cada N pasos (0 = solo al final)")
    ps.add_argument("--out", nargs="?", const=DEFAULT_OUT_DIR, default=None,
                    help=f"Carpeta para guardar el reporte (por defecto {DEFAULT_OUT_DIR})")

    pd_ = sub.add_parser("demo", help="Construye un árbol pequeño y lo imprime")
    pd_.add_argument("--keys", type=int, nargs="+", default=[2, 1, 3, 5, 4])
    pd_.add_argument("--delete", type=int, nargs="*", help="Claves a borrar después de insertar")
    pd_.add_argument("--find", type=int, nargs="*", help="Claves a buscar al final")
    pd_.add_argument("--plot", action="store_true", help="Mostrar gráfica del árbol (si hay dependencias)")

    args = p.parse_args(argv)
    if args.cmd == "storm":
        cmd_storm(args)
    elif args.cmd == "demo":
        cmd_demo(args)


if __name__ == "__main__":
    main()
