"""
NEAT Trainer Module

This module implements the Trainer, which runs the evolutionary loop: evaluate
every genome of the current generation against the task, then produce the next
generation, until a maximum number of generations is reached. It also exposes
the operator-facing queries and commands (save, load, best genome playback,
progress).

Classes:
    Trainer: Runs the evolution of a pool against a task
"""

import os
from loguru import logger
from typing import Callable

from neatris.pool.pool        import Pool
from neatris.run.config       import Config
from neatris.run.coordinator  import EvaluationCoordinator
from neatris.run.task         import TaskSimulation

class Trainer:
    """
    Runs the evolution of a pool of genomes against a task.

    Public Attributes:
        focus: The simulation currently selected for playback (or None)

    Public Properties:
        pool:        The pool being evolved
        generation:  The current generation number
        max_fitness: The best fitness measured so far

    Public Methods:
        init():            Create a fresh pool
        process():         Run one evaluation pass; True once the generation is measured
        next_generation(): Produce the next generation
        run():             Run the evolutionary loop
        save() / load():   Save / load the pool to / from the configured pool file
        play_top():        Select the simulation of the fittest genome for playback
        measured():        Percentage of genomes of this generation already measured
    """

    def __init__(self,
                 config            : Config,
                 input_size        : int,
                 simulation_factory: Callable[[], TaskSimulation],
                 seed              : int | None = None):
        """
        Parameters:
            config:             configuration parameters
            input_size:         the size of an observation of the task
            simulation_factory: creates a new task simulation
            seed:               seed of the pool random generator (defaults to 'config.seed')
        """
        self._config            : Config                       = config
        self._input_size        : int                          = input_size
        self._simulation_factory: Callable[[], TaskSimulation] = simulation_factory
        self._seed              : int | None                   = seed
        self._pool              : Pool | None                  = None
        self._coordinator       : EvaluationCoordinator | None = None
        self.focus              : TaskSimulation | None        = None

    @property
    def pool(self) -> Pool | None:
        return self._pool

    @property
    def generation(self) -> int:
        return self._pool.generation if self._pool else 0

    @property
    def max_fitness(self) -> int:
        return self._pool.max_fitness if self._pool else 0

    def init(self) -> None:
        """
        Create and initialize a fresh pool, and write it to 'temp.json' in the snapshot directory.
        """
        self._pool = Pool(self._config, self._input_size, self._seed)
        self._pool.init()
        self._coordinator = EvaluationCoordinator(self._pool, self._simulation_factory)
        self.focus = None
        self._pool.write_file(os.path.join(self._config.snapshot_dir, "temp.json"))

    def _require_pool(self) -> Pool:
        if self._pool is None:
            raise RuntimeError("trainer not initialized; call 'init()' first")
        return self._pool

    def process(self) -> bool:
        """
        Run one evaluation pass over the current generation.

        Returns:
            True if every genome of the generation has been measured
        """
        self._require_pool()
        complete = self._coordinator.process()
        if self._coordinator.focus is not None:
            self.focus = self._coordinator.focus
        return complete

    def next_generation(self) -> None:
        self._require_pool().new_generation()

    def run(self, max_generations: int | None = None) -> None:
        """
        Run the evolutionary loop.

        Parameters:
            max_generations: the number of generations to produce
                             (defaults to 'config.max_number_generations'; None runs forever)
        """
        if self._pool is None:
            self.init()

        if max_generations is None:
            max_generations = self._config.max_number_generations

        produced = 0
        while max_generations is None or produced < max_generations:
            with self._coordinator.session():
                while not self.process():
                    pass
            self._report_progress()
            self.next_generation()
            produced += 1

    def _report_progress(self) -> None:
        pool    = self._require_pool()
        fitness = [genome.fitness for genome in pool.genomes()]
        logger.info("Generation {} measured: species={}, genomes={}, best={}, mean={:.2f}, max ever={}",
                    pool.generation, len(pool.species), len(fitness),
                    max(fitness, default=0), sum(fitness) / len(fitness) if fitness else 0.0,
                    pool.max_fitness)

    def save(self) -> bool:
        return self._require_pool().save_pool()

    def load(self) -> bool:
        """
        Replace the pool with the one saved in the pool file. On failure the current pool is kept.
        """
        pool = self._require_pool()
        if not pool.load_pool():
            return False
        self._coordinator.pool = pool
        self.focus = None
        return True

    def play_top(self) -> TaskSimulation | None:
        """
        Select for playback the simulation of the fittest genome that has one.

        Returns:
            the selected simulation (also stored in 'focus'), or None
        """
        pool = self._require_pool()

        best = None
        for genome in pool.genomes():
            if genome.simulation is None:
                continue
            if best is None or genome.fitness > best.fitness:
                best = genome

        self.focus = best.simulation if best is not None else None
        return self.focus

    def measured(self) -> int:
        """
        Percentage (rounded down) of genomes that have finished their episode.
        """
        if self._coordinator is None:
            return 0
        return self._coordinator.measured()
