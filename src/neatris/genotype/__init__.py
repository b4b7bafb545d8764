"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm: the genes of a genome, its self-adapting mutation
rates, and the genome itself with its mutation operators.

Modules:
    gene:           Gene class
    mutation_rates: MutationKind enumeration and MutationRates class
    genome:         Genome class

Exported Classes:
    Gene:          Gene encoding a weighted connection between nodes
    MutationKind:  Enumeration of the mutation kinds
    MutationRates: Per-genome vector of mutation rates
    Genome:        An individual: genes, network, mutation rates and fitness
"""

from neatris.genotype.gene           import Gene
from neatris.genotype.mutation_rates import MutationKind, MutationRates
from neatris.genotype.genome         import Genome

__all__ = ['Gene',
           'Genome',
           'MutationKind',
           'MutationRates']
