#!/usr/bin/env python3
"""
Utility script to visualize NEAT neural networks.

Renders the network of the fittest genome of a saved pool (a generation
snapshot or the pool file).

Usage:
    python scripts/visualize_network.py --pool snapshots/cartpole/backup30.json --inputs 4
"""

import sys
import argparse
import json
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from neatris import Config, Pool
import graphviz


def visualize_genome(genome, output_file='network', format='png', view=True):
    """
    Visualize a NEAT genome as a neural network graph.

    Args:
        genome: The genome to visualize
        output_file: Output filename (without extension)
        format: Output format (png, pdf, svg, etc.)
        view: Whether to automatically open the generated file
    """
    pool       = genome.pool
    input_size = pool.input_size
    output_ids = pool.output_ids

    dot = graphviz.Digraph(format=format, engine='dot')
    dot.attr('node', shape='circle')

    # Add nodes (only the inputs actually connected, there may be hundreds)
    for node_id in genome.network.neurons:
        if node_id < input_size:
            if any(gene.into == node_id for gene in genome.genes if gene.enabled):
                dot.node(str(node_id), label=f'In{node_id}', color='green', style='filled')
        elif node_id == input_size:
            dot.node(str(node_id), label='Bias', color='yellow', style='filled')
        elif node_id in output_ids:
            dot.node(str(node_id), label=f'Out{output_ids.index(node_id)}', color='red', style='filled')
        else:
            dot.node(str(node_id), label=str(node_id), color='lightblue', style='filled')

    # Add connections
    for gene in genome.genes:
        if gene.enabled:
            weight = gene.weight
            color = 'blue' if weight > 0 else 'red'
            penwidth = str(min(abs(weight) * 2, 5))
            dot.edge(str(gene.into), str(gene.out),
                    label=f'{weight:.2f}', color=color, penwidth=penwidth)

    dot.render(output_file, view=view)
    print(f"Network visualization saved to {output_file}.{format}")


def main():
    parser = argparse.ArgumentParser(description='Visualize NEAT neural networks')
    parser.add_argument('--pool', type=str, required=True,
                        help='Path to a saved pool (JSON)')
    parser.add_argument('--inputs', type=int, default=None,
                        help='Number of network inputs (read from the pool file if omitted)')
    parser.add_argument('--config', type=str, default=None,
                        help='Configuration file the pool was evolved with')
    parser.add_argument('--output', type=str, default='network',
                        help='Output filename (without extension)')
    parser.add_argument('--format', type=str, default='png',
                        choices=['png', 'pdf', 'svg'],
                        help='Output format')
    parser.add_argument('--no-view', action='store_true',
                        help='Do not automatically open the generated file')

    args = parser.parse_args()

    input_size = args.inputs
    if input_size is None:
        with open(args.pool, 'r', encoding='utf-8') as f:
            input_size = json.load(f).get('inputSize')
        if input_size is None:
            print("Error: the pool file does not record its input size, use --inputs")
            sys.exit(1)

    config = Config(args.config)
    pool   = Pool(config, input_size)
    if not pool.load_file(args.pool):
        print(f"Error: could not load pool from '{args.pool}'")
        sys.exit(1)

    best = max(pool.genomes(), key=lambda genome: genome.fitness, default=None)
    if best is None:
        print("Error: the pool has no genomes")
        sys.exit(1)

    print(f"Fittest genome: {best!r}")
    visualize_genome(best, args.output, args.format, not args.no_view)


if __name__ == '__main__':
    main()
