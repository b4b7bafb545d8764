"""
NEAT Run Package

This package runs the evolution of a pool of genomes against a task.

Modules:
    config:      Configuration management
    task:        The task simulation contract and action decoding
    coordinator: Concurrent evaluation of all genomes against the task
    trainer:     The evolutionary loop and operator-facing commands

Exported Classes:
    Config:                Configuration parameters
    Control:               Default layout of the action vector
    TaskSimulation:        Abstract base class for task simulations
    EvaluationCoordinator: Concurrent evaluation driver (joblib threads)
    Trainer:               Runs the evolutionary loop
"""

from neatris.run.config      import Config
from neatris.run.task        import Control, TaskSimulation, decode_actions
from neatris.run.coordinator import EvaluationCoordinator
from neatris.run.trainer     import Trainer

__all__ = ['Config',
           'Control',
           'TaskSimulation',
           'decode_actions',
           'EvaluationCoordinator',
           'Trainer']
