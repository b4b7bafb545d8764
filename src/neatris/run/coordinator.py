"""
Evaluation Coordinator Module

This module drives the concurrent evaluation of every genome in the pool
against the task, one frame at a time, using joblib thread-based parallelism.

Classes:
    EvaluationCoordinator: Steps all unfinished genomes and detects generation completion
"""

from contextlib import contextmanager
from joblib import Parallel, delayed
from loguru import logger
from typing import Callable, Iterator, TYPE_CHECKING

from neatris.run.task import TaskSimulation

if TYPE_CHECKING:
    from neatris.genotype import Genome
    from neatris.pool     import Pool

class EvaluationCoordinator:
    """
    Drives the fitness evaluation of a pool's genomes.

    Each call to 'process()' is one evaluation pass: every genome without a
    simulation gets one, and up to 'max_concurrent_tasks' unfinished genomes are
    stepped by one frame, concurrently, on a pool of worker threads. Each worker
    owns exactly one genome for the duration of the pass. The pass returns only
    once every dispatched step has completed.

    The only state shared between workers is the pool's best fitness, which is
    updated under a lock (see 'Pool.update_max_fitness').

    Public Attributes:
        focus: The simulation of the best unfinished genome seen in the last pass

    Public Methods:
        session():  Keep one pool of worker threads open across several passes
        process():  Run one evaluation pass; returns True once all genomes have finished
        measured(): Percentage of genomes that have finished their episode
    """

    def __init__(self, pool: 'Pool', simulation_factory: Callable[[], TaskSimulation]):
        """
        Parameters:
            pool:               the pool whose genomes are evaluated
            simulation_factory: creates a new task simulation (one per genome and episode)
        """
        self._pool              : 'Pool'                         = pool
        self._simulation_factory: Callable[[], TaskSimulation]   = simulation_factory
        self.focus              : TaskSimulation | None          = None
        self._parallel          : Parallel | None                = None

    @property
    def pool(self) -> 'Pool':
        return self._pool

    @pool.setter
    def pool(self, pool: 'Pool') -> None:
        self._pool = pool
        self.focus = None

    @contextmanager
    def session(self) -> Iterator['EvaluationCoordinator']:
        """
        Keep one pool of 'max_concurrent_tasks' worker threads open for every
        pass run inside the block (typically a whole generation). Outside a
        session each pass starts its own workers.
        """
        with Parallel(n_jobs=self._pool.config.max_concurrent_tasks, prefer="threads") as parallel:
            self._parallel = parallel
            try:
                yield self
            finally:
                self._parallel = None

    @staticmethod
    def _step(genome: 'Genome') -> None:
        genome.evaluate_current()

    def process(self) -> bool:
        """
        Run one evaluation pass.

        Returns:
            True if every genome had already finished its episode (nothing was
            dispatched), False otherwise
        """
        max_tasks = self._pool.config.max_concurrent_tasks
        complete  = True
        dispatch  = []

        focus_fitness = 0
        for genome in self._pool.genomes():
            if genome.simulation is None:
                genome.initialize_run(self._simulation_factory())

            if len(dispatch) < max_tasks:
                if genome.finished:
                    if genome.simulation is self.focus:
                        self.focus = None
                else:
                    complete = False
                    dispatch.append(genome)
            elif not genome.finished:
                complete = False

            if not genome.finished:
                if self.focus is None or not self.focus.is_active() or genome.fitness > focus_fitness:
                    focus_fitness = genome.fitness
                    self.focus    = genome.simulation

        if dispatch:
            parallel = self._parallel
            if parallel is None:
                parallel = Parallel(n_jobs=len(dispatch), prefer="threads")
            parallel(delayed(self._step)(genome) for genome in dispatch)

        logger.debug("Evaluation pass: {} genomes stepped, {}% measured", len(dispatch), self.measured())
        return complete

    def measured(self) -> int:
        """
        Percentage (rounded down) of genomes that have finished their episode.
        """
        count = 0
        done  = 0
        for genome in self._pool.genomes():
            count += 1
            if genome.finished:
                done += 1
        if count == 0:
            return 0
        return int(done / count * 100)
