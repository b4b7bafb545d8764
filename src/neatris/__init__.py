"""
neatris - NEAT neuroevolution for game-playing agents.

This package implements the NEAT (NeuroEvolution of Augmenting Topologies) algorithm,
evolving populations of variable-topology neural networks against an external task
(a game, originally a falling-block puzzle) which provides observations and a score.

Main components:
- genotype:  Genetic encoding (genes, mutation rates, genomes and mutation operators)
- phenotype: Neural network expression of a genome
- pool:      Species and population management, generational turnover, persistence
- run:       Configuration, task contract, concurrent evaluation and the training loop
- utils:     Logging setup

Example:
    >>> from neatris import Config, Trainer, TaskSimulation
    >>> class MyTask(TaskSimulation):
    ...     # implement init / observe / step / is_active / score
    ...     pass
    >>> trainer = Trainer(Config(), input_size=200, simulation_factory=MyTask)
    >>> trainer.run(max_generations=10)
"""

__version__ = "0.1.0"

from neatris.run.config      import Config
from neatris.run.task        import Control, TaskSimulation
from neatris.genotype        import Gene, Genome, MutationKind, MutationRates
from neatris.phenotype       import Network, Neuron, sigmoid
from neatris.pool            import Pool, Species
from neatris.run.coordinator import EvaluationCoordinator
from neatris.run.trainer     import Trainer

__all__ = [
    "Config",
    "Control",
    "TaskSimulation",
    "Gene",
    "Genome",
    "MutationKind",
    "MutationRates",
    "Network",
    "Neuron",
    "sigmoid",
    "Pool",
    "Species",
    "EvaluationCoordinator",
    "Trainer",
]
