from typing import List, Optional
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import networkx as nx

from sipbuddy.core.catalog_graph import category_node_id, product_to_node_id, tag_node_id
from sipbuddy.models.product import RecommendationView

def visualize_picks(G: nx.Graph, category: str, picks: List[RecommendationView]) -> Optional[plt.Figure]:
    """Category -> tag -> product view of a set of recommendations."""
    if not picks:
        return None

    root_id = category_node_id(category)
    shown = [p for p in picks if product_to_node_id(p.id) in G]
    if root_id not in G or not shown:
        return None
    pick_ids = list(dict.fromkeys(product_to_node_id(p.id) for p in shown))

    edges = set()
    tag_ids = set()
    for pick in shown:
        pid = product_to_node_id(pick.id)
        if pick.tags:
            for tag in pick.tags:
                tid = tag_node_id(tag)
                if G.has_edge(pid, tid):
                    tag_ids.add(tid)
                    edges.add((root_id, tid))
                    edges.add((tid, pid))
        else:
            edges.add((root_id, pid))

    sub = nx.Graph()
    sub.add_nodes_from([root_id] + pick_ids)
    sub.add_edges_from(edges)

    fig, ax = plt.subplots(figsize=(10, 6))
    shells = [[root_id], sorted(tag_ids), pick_ids]
    pos = nx.shell_layout(sub, nlist=[s for s in shells if s])

    colors = []
    for n in sub.nodes():
        t = G.nodes[n].get("node_type")
        if n == root_id:
            colors.append("#ffe680")
        elif t == "tag":
            colors.append("#ffccd5")
        else:
            colors.append("#b3ffb3")

    nx.draw_networkx_nodes(sub, pos, ax=ax, node_size=650, node_color=colors, edgecolors="#000000")
    nx.draw_networkx_edges(sub, pos, ax=ax, alpha=0.7, width=1.5, edge_color="#bbbbbb")

    labels = {n: G.nodes[n].get("name", n) for n in sub.nodes()}
    nx.draw_networkx_labels(sub, pos, ax=ax, labels=labels, font_size=8, font_color="#000000")

    ax.set_facecolor("#050b16")
    ax.set_title(f"How the {category} picks connect to their tags", fontsize=10, color="#ffffff")
    ax.axis("off")
    return fig
