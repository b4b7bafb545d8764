"""
NEAT Pool Package

This package contains the classes managing the population of genomes in the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Modules:
    species: A cluster of similar genomes; crossover, distance and breeding
    pool:    The whole population; speciation, generational turnover and persistence

Exported Classes:
    Species: A cluster of genetically similar genomes
    Pool:    The population of genomes
"""

from neatris.pool.species import Species
from neatris.pool.pool    import Pool

__all__ = ['Species',
           'Pool']
