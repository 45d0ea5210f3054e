"""
Example computing random projection embeddings and PageRank on a small graph.

This example shows how to:
1. Build a Graph from a networkx graph
2. Estimate memory before running
3. Compute embeddings and look up structurally similar nodes
4. Compute PageRank on the same graph
"""

import networkx as nx

from fastrp import (
    Graph,
    PageRank,
    PageRankConfig,
    ProgressLogger,
    RandomProjection,
    RandomProjectionConfig,
    estimate_random_projection,
    most_similar,
    setup_logger,
)

setup_logger("fastrp", level="INFO")


def main():
    nx_graph = nx.karate_club_graph()
    graph = Graph.from_networkx(nx_graph)
    print(graph)

    config = RandomProjectionConfig(
        embedding_dimension=64,
        iterations=4,
        iteration_weights=[1.0, 1.0, 0.5, 0.25],
        normalization_strength=-0.1,
        normalize_l2=True,
        concurrency=2,
        random_seed=42,
    )
    print(estimate_random_projection(graph.node_count(), config).human_readable())

    progress = ProgressLogger(graph.node_count(), "RandomProjection")
    with RandomProjection(graph, config, progress_logger=progress) as algorithm:
        embeddings = algorithm.compute().embeddings()

    node = graph.to_mapped_node_id(0)
    print(f"\nNodes most similar to {graph.to_original_node_id(node)}:")
    for other, similarity in most_similar(embeddings, node, top_k=5):
        print(f"   {graph.to_original_node_id(other)}: {similarity:.4f}")

    pagerank = PageRank(graph, PageRankConfig(max_iterations=40)).compute()
    ranked = sorted(pagerank.result().items(), key=lambda item: item[1], reverse=True)
    print("\nTop PageRank scores:")
    for entity, score in ranked[:5]:
        print(f"   {entity}: {score:.4f}")


if __name__ == "__main__":
    main()
