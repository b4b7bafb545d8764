"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: A cluster of similar genomes, with crossover, distance and breeding
"""

import weakref
from typing import TYPE_CHECKING

from neatris.genotype.genome import Genome

if TYPE_CHECKING:
    from neatris.pool.pool import Pool

# Version of the serialized species record
SPECIES_VERSION = 0

class Species:
    """
    A species: a cluster of genetically similar genomes.

    The first genome of the species is its representative: a genome joins the
    species when it is compatible with the representative. The species keeps
    track of its best fitness ever and of how many generations have passed
    without improving it (staleness). Its average fitness is the average
    global rank of its members, which sets the number of children the species
    breeds at the next generation.

    Public Attributes:
        genomes:         Member genomes (sorted by descending fitness after culling)
        top_fitness:     Best fitness ever achieved by a member
        staleness:       Generations since 'top_fitness' last improved
        average_fitness: Average global rank of the members

    Public Methods:
        crossover(g1, g2):           Combine two genomes into a child
        disjoint(g1, g2):            Fraction of non-matching genes
        weights(g1, g2):             Mean weight difference of matching genes
        same_species(g1, g2):        Compatibility test
        calculate_average_fitness(): Update 'average_fitness'
        breed_child():               Produce one mutated child
    """

    def __init__(self, pool: 'Pool'):
        """
        Parameters:
            pool: the pool this species belongs to
        """
        self._pool_ref = weakref.ref(pool)

        self.genomes        : list[Genome] = []
        self.top_fitness    : int          = 0
        self.staleness      : int          = 0
        self.average_fitness: int          = 0

    @property
    def pool(self) -> 'Pool':
        pool = self._pool_ref()
        if pool is None:
            raise RuntimeError("species outlived its pool")
        return pool

    @property
    def representative(self) -> Genome:
        return self.genomes[0]

    def crossover(self, g1: Genome | None, g2: Genome | None) -> Genome:
        """
        Create a child genome by crossing over two parents.

        Genes are aligned by innovation number. The child inherits every gene of
        the fitter parent; for genes both parents share, a coin flip may take the
        other parent's copy instead, provided that copy is enabled. Genes present
        only in the less fit parent are never inherited.

        Parameters:
            g1: first parent
            g2: second parent (may be the same genome as 'g1')

        Returns:
            the child genome, with its network already built
        """
        if g1 is None or g2 is None:
            raise RuntimeError("crossover requires two parents")

        # make sure g1 is the higher fitness genome
        if g2.fitness > g1.fitness:
            g1, g2 = g2, g1

        rand  = self.pool.rand
        child = Genome(self.pool)

        innovations2 = {gene.innovation: gene for gene in g2.genes}

        for gene1 in g1.genes:
            gene2 = innovations2.get(gene1.innovation)
            if gene2 is not None and rand.random() < 0.5 and gene2.enabled:
                child.genes.append(gene2.copy())
            else:
                child.genes.append(gene1.copy())

        child.max_neuron     = max(g1.max_neuron, g2.max_neuron)
        child.mutation_rates = g1.mutation_rates.copy()
        child.generate_network()
        return child

    @staticmethod
    def disjoint(g1: Genome, g2: Genome) -> float:
        """
        Fraction of genes whose innovation number appears in only one of the two genomes,
        relative to the size of the larger genome.
        """
        innovations1 = {gene.innovation for gene in g1.genes}
        innovations2 = {gene.innovation for gene in g2.genes}

        result  = sum(1 for gene in g1.genes if gene.innovation not in innovations2)
        result += sum(1 for gene in g2.genes if gene.innovation not in innovations1)

        n = max(len(g1.genes), len(g2.genes))
        if n == 0:
            return 0.0
        return result / n

    @staticmethod
    def weights(g1: Genome, g2: Genome) -> float:
        """
        Mean absolute weight difference over genes with matching innovation numbers.
        Two genomes without matching genes have a weight difference of 0.
        """
        innovations2 = {gene.innovation: gene for gene in g2.genes}

        total      = 0.0
        coincident = 0
        for gene in g1.genes:
            gene2 = innovations2.get(gene.innovation)
            if gene2 is not None:
                total      += abs(gene.weight - gene2.weight)
                coincident += 1

        if coincident == 0:
            return 0.0
        return total / coincident

    def same_species(self, g1: Genome, g2: Genome) -> bool:
        """
        Whether two genomes are close enough to belong to the same species.
        """
        config = self.pool.config
        dd = config.delta_disjoint * self.disjoint(g1, g2)
        dw = config.delta_weights  * self.weights(g1, g2)
        return (dd + dw) < config.delta_threshold

    def calculate_average_fitness(self) -> None:
        """
        Set 'average_fitness' to the (integer) average global rank of the members.
        """
        if self.genomes:
            total = sum(genome.global_rank for genome in self.genomes)
            self.average_fitness = total // len(self.genomes)
        else:
            self.average_fitness = 0

    def breed_child(self) -> Genome:
        """
        Produce one child: either the crossover of two random members (possibly the
        same one twice) or a clone of a random member, then mutated once.
        """
        if not self.genomes:
            raise RuntimeError("cannot breed a child from an empty species")

        rand = self.pool.rand
        if rand.random() < self.pool.config.crossover_chance:
            g1 = self.genomes[rand.randrange(len(self.genomes))]
            g2 = self.genomes[rand.randrange(len(self.genomes))]
            child = self.crossover(g1, g2)
        else:
            g = self.genomes[rand.randrange(len(self.genomes))]
            child = g.clone()

        child.mutate()
        child.generate_network()
        return child

    def to_dict(self) -> dict:
        return {"version"       : SPECIES_VERSION,
                "topFitness"    : self.top_fitness,
                "staleness"     : self.staleness,
                "averageFitness": self.average_fitness,
                "genomes"       : [genome.to_dict() for genome in self.genomes]}

    @classmethod
    def from_dict(cls, species_dict: dict, pool: 'Pool') -> 'Species':
        """
        Create a Species (and its genomes) from its serialized form (see 'to_dict').

        Raises:
            ValueError: the record is malformed (not an object, no genomes) or was written by a newer version
            KeyError:   a required field is missing
        """
        if not isinstance(species_dict, dict):
            raise ValueError(f"species record must be an object, not {type(species_dict).__name__}")

        version = species_dict.get("version", 0)
        if version > SPECIES_VERSION:
            raise ValueError(f"unsupported species version {version}")

        species = cls(pool)
        species.top_fitness     = int(species_dict.get("topFitness", 0))
        species.staleness       = int(species_dict.get("staleness", 0))
        species.average_fitness = int(species_dict.get("averageFitness", 0))
        species.genomes         = [Genome.from_dict(genome_dict, pool) for genome_dict in species_dict["genomes"]]
        if not species.genomes:
            raise ValueError("species without genomes")
        return species

    def __len__(self):
        return len(self.genomes)

    def __repr__(self):
        return (f"Species(genomes={len(self.genomes)}, top_fitness={self.top_fitness}, "
                f"staleness={self.staleness}, average_fitness={self.average_fitness})")
