"""
NEAT Network Module

This module implements the phenotype representation for the NEAT algorithm:
the neural network expressed by a genome. The network is a sparse directed
graph of neurons, built from the enabled genes of a genome.

Classes:
    Neuron:  A node of the network, holding its value and incoming genes
    Network: A sparse graph of neurons, keyed by node ID

Functions:
    sigmoid: The (steepened, zero-centered) activation function used by all neurons
"""

import numpy as np
from typing import Iterable, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from neatris.genotype import Gene

def sigmoid(x: float) -> float:
    """
    Zero-centered steepened sigmoid: 2 / (1 + exp(-4.9 x)) - 1, with range (-1, 1).
    """
    z = np.clip(-4.9 * x, -100, 100)   # to prevent overflow when calculating exp
    return float(2.0 / (1.0 + np.exp(z)) - 1.0)

class Neuron:
    """
    A node of the network.

    Public Attributes:
        value:    The value computed by the neuron during the last pass
        incoming: The (enabled) genes ending at this neuron
    """

    __slots__ = ('value', 'incoming')

    def __init__(self):
        self.value   : float        = 0.0
        self.incoming: list['Gene'] = []

    def __repr__(self):
        return f"Neuron(value={self.value:+.4f}, incoming={len(self.incoming)})"

class Network:
    """
    A neural network expressed by a genome.

    The neurons are kept in a dictionary (node ID => Neuron) whose insertion order
    is also the evaluation order: input neurons first, then output neurons, then
    the neurons discovered while walking the genes. Evaluation visits the neurons
    in that order in a single pass, without sorting them topologically. A neuron
    visited before one of its sources reads the value that source computed during
    the previous pass, which gives the network a short memory.

    Public Attributes:
        neurons: Dictionary mapping node IDs to Neuron objects

    Public Methods:
        build(genes):      Rebuild the network from a list of genes
        evaluate(inputs):  Perform one pass and return the output values
    """

    def __init__(self, input_size: int, output_ids: Sequence[int]):
        """
        Parameters:
            input_size: number of input neurons (node IDs [0, input_size))
            output_ids: node IDs of the output neurons
        """
        self.neurons    : dict[int, Neuron] = {}
        self._input_size: int               = input_size
        self._output_ids: tuple[int, ...]   = tuple(output_ids)

    @property
    def input_size(self) -> int:
        return self._input_size

    @property
    def output_ids(self) -> tuple[int, ...]:
        return self._output_ids

    def clear(self) -> None:
        self.neurons.clear()

    def build(self, genes: Iterable['Gene']) -> None:
        """
        Rebuild the network from genes.

        Input and output neurons are always present. Each enabled gene is added
        to the incoming list of its destination neuron, and both of its endpoints
        are created if missing. Disabled genes are skipped.

        Parameters:
            genes: the genes to build from, in the order the neurons should be created
        """
        self.clear()

        for node_id in range(self._input_size):
            self.neurons[node_id] = Neuron()
        for node_id in self._output_ids:
            self.neurons[node_id] = Neuron()

        for gene in genes:
            if not gene.enabled:
                continue
            if gene.out not in self.neurons:
                self.neurons[gene.out] = Neuron()
            self.neurons[gene.out].incoming.append(gene)
            if gene.into not in self.neurons:
                self.neurons[gene.into] = Neuron()

    def evaluate(self, inputs: Sequence[float]) -> list[float]:
        """
        Perform one pass through the network.

        Parameters:
            inputs: the network inputs (exactly 'input_size' values)

        Returns:
            the values of the output neurons, in output ID order

        Raises:
            ValueError:   wrong number of inputs
            RuntimeError: a neuron referenced by a gene is missing
        """
        if len(inputs) != self._input_size:
            raise ValueError(f"Expected {self._input_size} inputs, got {len(inputs)}")

        for node_id in range(self._input_size):
            neuron = self.neurons.get(node_id)
            if neuron is None:
                raise RuntimeError(f"input neuron {node_id} missing from network")
            neuron.value = float(inputs[node_id])

        for node_id, neuron in self.neurons.items():
            if 0 <= node_id < self._input_size:
                continue
            if not neuron.incoming:
                neuron.value = 0.0
                continue

            total = 0.0
            for gene in neuron.incoming:
                source = self.neurons.get(gene.into)
                if source is None:
                    raise RuntimeError(f"neuron {gene.into} missing from network")
                total += gene.weight * source.value
            neuron.value = sigmoid(total)

        outputs = []
        for node_id in self._output_ids:
            neuron = self.neurons.get(node_id)
            if neuron is None:
                raise RuntimeError(f"output neuron {node_id} missing from network")
            outputs.append(neuron.value)
        return outputs

    def __len__(self):
        return len(self.neurons)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.neurons

    def __str__(self):
        return "\n".join(f"  {node_id}: {neuron}" for node_id, neuron in self.neurons.items())
