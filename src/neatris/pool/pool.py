"""
NEAT Pool Module

This module implements the Pool class, the top-level container of the NEAT
evolutionary state: every species and genome, the innovation counter, the
shared random generator and the generation counter. The pool is also the unit
of persistence: it is saved after every generation and on demand.

Classes:
    Pool: The population of genomes, grouped into species
"""

import json
import math
import os
import random
import threading
from loguru import logger
from typing import Iterator

from neatris.genotype.genome import Genome
from neatris.pool.species    import Species
from neatris.run.config      import Config

# Version of the serialized pool record
POOL_VERSION = 0

class Pool:
    """
    The whole population of genomes, split into species.

    Public Attributes:
        config:     Configuration parameters
        input_size: Number of network inputs (size of an observation)
        generation: Number of generational turnovers so far
        innovation: Last innovation number handed out
        species:    The species of the current generation
        rand:       The random generator shared by all genomes and species

    Public Properties:
        max_fitness: Best fitness measured so far (thread safe)
        output_ids:  Node IDs of the output nodes

    Public Methods:
        init():                     Create the initial population
        new_innovation():           Hand out a new innovation number
        update_max_fitness(f):      Raise the best fitness, if 'f' is larger
        genomes():                  Iterate over all genomes
        rank_globally():            Rank all genomes by fitness
        cull_species(cut_to_one):   Keep only the best members of each species
        remove_stale_species():     Remove species that stopped improving
        remove_weak_species():      Remove species that would breed no child
        add_to_species(genome):     Assign a genome to a species
        new_generation():           Produce the next generation
        save_pool() / load_pool():  Save / load the pool to / from 'config.pool_file'
        write_file(f) / load_file(f)
    """

    def __init__(self, config: Config, input_size: int, seed: int | None = None):
        """
        Parameters:
            config:     configuration parameters
            input_size: the number of network inputs
            seed:       seed of the random generator (defaults to 'config.seed')
        """
        self.config    : Config        = config
        self.input_size: int           = input_size
        self.generation: int           = 0
        self.innovation: int           = config.num_outputs
        self.species   : list[Species] = []
        self.rand      : random.Random = random.Random(config.seed if seed is None else seed)

        self._max_fitness     : int            = 0
        self._max_fitness_lock: threading.Lock = threading.Lock()

    @property
    def output_ids(self) -> tuple[int, ...]:
        return tuple(range(self.config.max_nodes, self.config.max_nodes + self.config.num_outputs))

    @property
    def max_fitness(self) -> int:
        with self._max_fitness_lock:
            return self._max_fitness

    @max_fitness.setter
    def max_fitness(self, value: int) -> None:
        with self._max_fitness_lock:
            self._max_fitness = value

    def update_max_fitness(self, fitness: int) -> bool:
        """
        Raise the best fitness to 'fitness' if it is larger. Safe to call from worker threads.

        Returns:
            whether the best fitness was raised
        """
        with self._max_fitness_lock:
            if fitness > self._max_fitness:
                self._max_fitness = fitness
                return True
            return False

    def init(self) -> None:
        """
        Create the initial population: genomes without genes, each mutated once.
        """
        for _ in range(self.config.population_size):
            genome = Genome(self)
            genome.max_neuron = self.input_size
            genome.mutate()
            genome.generate_network()
            self.add_to_species(genome)

        logger.info("Pool initialized: {} genomes in {} species", self.population_count(), len(self.species))

    def new_innovation(self) -> int:
        self.innovation += 1
        return self.innovation

    def genomes(self) -> Iterator[Genome]:
        for species in self.species:
            yield from species.genomes

    def population_count(self) -> int:
        return sum(len(species.genomes) for species in self.species)

    # ------------------------------------------------------------------
    # Generational turnover
    # ------------------------------------------------------------------

    def rank_globally(self) -> None:
        """
        Sort all genomes by ascending fitness and set their 'global_rank' to their position.
        """
        ranked = sorted(self.genomes(), key=lambda genome: genome.fitness)
        for rank, genome in enumerate(ranked):
            genome.global_rank = rank

    def total_average_fitness(self) -> int:
        return sum(species.average_fitness for species in self.species)

    def cull_species(self, cut_to_one: bool) -> None:
        """
        Sort each species by descending fitness and keep its top half (rounded up),
        or only its best genome.

        Parameters:
            cut_to_one: keep only the best genome of each species
        """
        for species in self.species:
            species.genomes.sort(key=lambda genome: genome.fitness, reverse=True)

            remaining = 1 if cut_to_one else math.ceil(len(species.genomes) / 2)
            del species.genomes[remaining:]

    def remove_stale_species(self) -> None:
        """
        Update the staleness of every species and remove the species that have not
        improved for 'stale_species' generations, unless they hold the best fitness.
        """
        max_fitness = self.max_fitness

        survived = []
        for species in self.species:
            if not species.genomes:
                raise RuntimeError("species without genomes")

            species.genomes.sort(key=lambda genome: genome.fitness, reverse=True)

            if species.genomes[0].fitness > species.top_fitness:
                species.top_fitness = species.genomes[0].fitness
                species.staleness   = 0
            else:
                species.staleness  += 1

            if species.staleness < self.config.stale_species or species.top_fitness >= max_fitness:
                survived.append(species)

        removed = len(self.species) - len(survived)
        if removed:
            logger.debug("Removed {} stale species", removed)
        self.species = survived

    def _breed_count(self, species: Species, total: int) -> int:
        """
        The number of children a species breeds: its share of the total average fitness,
        times the population size, rounded down. Zero when the total is zero.
        """
        if total == 0:
            return 0
        return int(math.floor(species.average_fitness / total * self.config.population_size))

    def remove_weak_species(self) -> None:
        """
        Remove the species whose share of the total average fitness would not earn them a single child.
        When the total is zero no species is removed.
        """
        total = self.total_average_fitness()
        if total == 0:
            return

        survived = [species for species in self.species if self._breed_count(species, total) >= 1]

        removed = len(self.species) - len(survived)
        if removed:
            logger.debug("Removed {} weak species", removed)
        self.species = survived

    def add_to_species(self, child: Genome) -> None:
        """
        Add a genome to the first species whose representative is compatible with it,
        or to a new species if none is.
        """
        for species in self.species:
            if species.same_species(child, species.representative):
                species.genomes.append(child)
                return

        species = Species(self)
        species.genomes.append(child)
        self.species.append(species)

    def new_generation(self) -> None:
        """
        Replace the current generation with the next one.

        Every genome must have been evaluated. The bottom half of each species
        is culled, stale and weak species are removed, each surviving species
        breeds children in proportion to its average rank, only the best genome
        of each species is kept, the population is topped up with more children,
        and finally the children are speciated. A snapshot of the new generation
        is written to disk.
        """
        self.cull_species(False)
        self.rank_globally()
        self.remove_stale_species()
        self.rank_globally()
        for species in self.species:
            species.calculate_average_fitness()
        self.remove_weak_species()

        total    = self.total_average_fitness()
        children = []
        for species in self.species:
            for _ in range(self._breed_count(species, total)):
                children.append(species.breed_child())

        self.cull_species(True)

        while len(children) + len(self.species) < self.config.population_size:
            if not self.species:
                raise RuntimeError("no species left to breed from")
            species = self.species[self.rand.randrange(len(self.species))]
            children.append(species.breed_child())

        for child in children:
            self.add_to_species(child)

        self.generation += 1
        logger.info("Generation {}: {} genomes in {} species, max fitness {}",
                    self.generation, self.population_count(), len(self.species), self.max_fitness)

        self.write_file(self.snapshot_path(self.generation))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot_path(self, generation: int) -> str:
        filename = self.config.snapshot_pattern.format(generation=generation)
        return os.path.join(self.config.snapshot_dir, filename)

    def to_dict(self) -> dict:
        return {"version"   : POOL_VERSION,
                "generation": self.generation,
                "innovation": self.innovation,
                "maxFitness": self.max_fitness,
                "inputSize" : self.input_size,
                "species"   : [species.to_dict() for species in self.species]}

    def from_dict(self, pool_dict: dict) -> None:
        """
        Replace the state of this pool with a serialized one (see 'to_dict').
        The pool is only modified if the whole document can be read.

        Raises:
            ValueError: malformed record, unsupported version or mismatching input size
            KeyError:   a required field is missing
        """
        if not isinstance(pool_dict, dict):
            raise ValueError(f"pool record must be an object, not {type(pool_dict).__name__}")

        version = pool_dict.get("version", 0)
        if version > POOL_VERSION:
            raise ValueError(f"unsupported pool version {version}")

        input_size = pool_dict.get("inputSize", self.input_size)
        if input_size != self.input_size:
            raise ValueError(f"pool was saved with {input_size} inputs, expected {self.input_size}")

        species = [Species.from_dict(species_dict, self) for species_dict in pool_dict["species"]]

        # Documents without an innovation counter resume after the largest innovation in use
        innovation = pool_dict.get("innovation")
        if innovation is None:
            innovation = max((gene.innovation for entry in species for genome in entry.genomes for gene in genome.genes),
                             default=self.config.num_outputs)
            innovation = max(innovation, self.config.num_outputs)

        self.generation  = int(pool_dict.get("generation", 0))
        self.innovation  = int(innovation)
        self.max_fitness = int(pool_dict.get("maxFitness", 0))
        self.species     = species

    def write_file(self, filename: str) -> bool:
        """
        Save the pool to a JSON file. Failures are logged and otherwise ignored.

        Returns:
            whether the file was written
        """
        try:
            directory = os.path.dirname(filename)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(filename, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write pool to '{}': {}", filename, e)
            return False

        logger.debug("Pool written to '{}'", filename)
        return True

    def load_file(self, filename: str) -> bool:
        """
        Load the pool from a JSON file. Failures are logged and leave the pool unchanged.

        Returns:
            whether the pool was loaded
        """
        try:
            with open(filename, "r", encoding="utf-8") as f:
                pool_dict = json.load(f)
            self.from_dict(pool_dict)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to read pool from '{}': {}", filename, e)
            return False

        logger.info("Pool loaded from '{}': generation {}, {} genomes in {} species",
                    filename, self.generation, self.population_count(), len(self.species))
        return True

    def save_pool(self) -> bool:
        return self.write_file(self.config.pool_file)

    def load_pool(self) -> bool:
        return self.load_file(self.config.pool_file)

    def __repr__(self):
        return (f"Pool(generation={self.generation}, species={len(self.species)}, "
                f"genomes={self.population_count()}, max_fitness={self.max_fitness})")
