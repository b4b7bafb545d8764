"""
NEAT Phenotype Package

This package expresses genomes as executable neural networks.

Modules:
    network: Neuron, Network and the sigmoid activation

Exported:
    Neuron:  A node of the network
    Network: A sparse graph of neurons built from a genome's enabled genes
    sigmoid: The activation function of every neuron
"""

from neatris.phenotype.network import Network, Neuron, sigmoid

__all__ = ['Network',
           'Neuron',
           'sigmoid']
