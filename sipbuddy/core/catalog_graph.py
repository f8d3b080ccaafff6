from typing import Dict, List

import networkx as nx

from sipbuddy.core.classifier import CategoryScheme, classify, is_rtd
from sipbuddy.core.tags import product_tags
from sipbuddy.models.product import Product, CATEGORIES, RTD
from sipbuddy.utils.logger import logger


def product_to_node_id(product_id: str) -> str:
    return f"product:{product_id}"

def category_node_id(category: str) -> str:
    return f"category:{category}"

def tag_node_id(tag: str) -> str:
    return f"tag:{tag}"

def brand_node_id(brand: str) -> str:
    return f"brand:{brand}"


def product_categories(product: Product, scheme: CategoryScheme) -> List[str]:
    """Every UI category a product belongs to; RTD is checked independently."""
    found = []
    base = classify(product, scheme)
    if base is not None:
        found.append(base)
    if is_rtd(product):
        found.append(RTD)
    return found


def build_catalog_graph(products: List[Product], scheme: CategoryScheme) -> nx.Graph:
    G = nx.Graph()

    for cat in CATEGORIES:
        G.add_node(category_node_id(cat), node_type="category", name=cat)

    for p in products:
        pid = product_to_node_id(p.id)
        categories = product_categories(p, scheme)
        tags_by_category: Dict[str, List[str]] = {c: product_tags(p, c) for c in categories}
        G.add_node(
            pid,
            node_type="product",
            name=p.display_name,
            product_id=p.id,
            price=p.price,
            categories=categories,
            tags=tags_by_category,
        )
        if p.brand:
            G.add_node(brand_node_id(p.brand), node_type="brand", name=p.brand)
            G.add_edge(pid, brand_node_id(p.brand), edge_type="HAS_BRAND")

        for cat in categories:
            G.add_edge(pid, category_node_id(cat), edge_type="IS_A")
            for tag in tags_by_category[cat]:
                tid = tag_node_id(tag)
                if tid not in G:
                    G.add_node(tid, node_type="tag", name=tag, category=cat)
                if G.has_edge(pid, tid):
                    G.edges[pid, tid]["categories"].add(cat)
                else:
                    G.add_edge(pid, tid, edge_type="HAS_TAG", categories={cat})

    logger.info(f"Catalog graph built: {G.number_of_nodes()} nodes, {G.number_of_edges()} edges")
    return G


def products_in_category(G: nx.Graph, category: str) -> List[str]:
    """Product ids linked to a category node, in catalog order."""
    cid = category_node_id(category)
    if cid not in G:
        return []
    return [
        G.nodes[n]["product_id"]
        for n in G.neighbors(cid)
        if G.nodes[n].get("node_type") == "product"
    ]


def tags_for(G: nx.Graph, product_id: str, category: str) -> List[str]:
    pid = product_to_node_id(product_id)
    if pid not in G:
        return []
    return list(G.nodes[pid]["tags"].get(category, []))


def category_tags(G: nx.Graph, category: str) -> List[str]:
    """Sorted tag vocabulary observed among a category's products."""
    found = set()
    for product_id in products_in_category(G, category):
        pid = product_to_node_id(product_id)
        for nb in G.neighbors(pid):
            edge = G.edges[pid, nb]
            if edge.get("edge_type") == "HAS_TAG" and category in edge["categories"]:
                found.add(G.nodes[nb]["name"])
    return sorted(found)
