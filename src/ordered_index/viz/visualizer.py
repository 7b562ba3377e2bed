# src/ordered_index/viz/visualizer.py
"""
Visualizador sencillo que usa networkx + matplotlib para dibujar la estructura del árbol 2-3.
Si no están instalados, lanza ImportError al importarlo (CLI lo manejará).
"""
import networkx as nx
import matplotlib.pyplot as plt


def tree_to_networkx(tree):
    """
    Convierte el árbol en un nx.DiGraph padre -> hijo.
    Cada nodo se identifica por la tupla de sus claves; atributo 'depth'.
    """
    G = nx.DiGraph()
    if tree.root is None:
        return G
    stack = [(tree.root, 0)]
    while stack:
        node, depth = stack.pop()
        label = tuple(e.key for e in node.elements())
        G.add_node(label, depth=depth)
        for child in node.children():
            G.add_edge(label, tuple(e.key for e in child.elements()))
            stack.append((child, depth + 1))
    return G


def _layered_positions(G):
    # hojas de izquierda a derecha; cada padre centrado sobre sus hijos
    pos = {}
    roots = [n for n, d in G.in_degree() if d == 0]
    next_x = [0.0]

    def place(n):
        kids = sorted(G.successors(n))
        if not kids:
            x = next_x[0]
            next_x[0] += 1.0
        else:
            xs = [place(k) for k in kids]
            x = sum(xs) / len(xs)
        pos[n] = (x, -G.nodes[n]["depth"])
        return x

    for r in roots:
        place(r)
    return pos


def visualize_tree(tree, title="Árbol 2-3"):
    """Dibuja el árbol por niveles; las etiquetas solo si el árbol es pequeño."""
    G = tree_to_networkx(tree)

    plt.figure(figsize=(10, 7))
    if len(G.nodes) == 0:
        plt.title(f"{title} (vacío)")
        plt.axis('off')
        plt.show()
        return

    pos = _layered_positions(G)
    three = [n for n in G.nodes if len(n) == 2]
    two = [n for n in G.nodes if len(n) == 1]
    nx.draw_networkx_nodes(G, pos, nodelist=two, node_size=120, node_color='tab:blue')
    nx.draw_networkx_nodes(G, pos, nodelist=three, node_size=200, node_color='tab:orange')
    nx.draw_networkx_edges(G, pos, width=0.8, alpha=0.6, arrows=False)
    if len(G.nodes) < 200:
        labels = {n: ",".join(str(k) for k in n) for n in G.nodes}
        nx.draw_networkx_labels(G, pos, labels=labels, font_size=6)

    plt.title(title)
    plt.axis('off')
    plt.show()
