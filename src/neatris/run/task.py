"""
Task Simulation Module

This module defines the contract between the evolutionary engine and the task
on which genomes are evaluated. The task is an external collaborator: the
engine only observes it, acts on it, and reads back a score and whether the
episode is still running.

Classes:
    Control:        The control channels of the default action layout
    TaskSimulation: Abstract base class for task simulations

Functions:
    decode_actions: Turn raw network outputs into an action vector
"""

from abc    import ABC, abstractmethod
from enum   import IntEnum
from typing import Sequence

class Control(IntEnum):
    """
    Default layout of the action vector (one network output per channel).
    """
    DOWN  = 0
    RIGHT = 1
    LEFT  = 2
    CW    = 3
    CCW   = 4

class TaskSimulation(ABC):
    """
    Abstract base class for the task a genome is evaluated on.

    One instance runs one episode for one genome. The evaluation coordinator
    creates an instance per genome, calls 'init()' once, and then at every
    frame calls 'observe()', 'step()', 'is_active()' and 'score()', until
    'is_active()' returns False; 'term()' is called once the episode is over.

    Subclasses must implement:
    - init():      Reset to a fresh episode
    - observe():   Return the observation vector (one value per network input)
    - step(a):     Apply an action vector and advance the simulation by one tick
    - is_active(): Whether the episode is still running
    - score():     The current score of the episode

    Subclasses can override:
    - term():          Release resources once the episode is over (default: no-op)
    - exclusive_pairs: Pairs of action channels that cancel out when both are active
    """

    # Pairs of mutually exclusive channels: when both fire, both are cleared.
    exclusive_pairs: tuple[tuple[int, int], ...] = ((Control.LEFT, Control.RIGHT),)

    @abstractmethod
    def init(self) -> None:
        pass

    @abstractmethod
    def observe(self) -> Sequence[float]:
        pass

    @abstractmethod
    def step(self, actions: Sequence[float]) -> None:
        pass

    @abstractmethod
    def is_active(self) -> bool:
        pass

    @abstractmethod
    def score(self) -> float:
        pass

    def term(self) -> None:
        pass

def decode_actions(outputs        : Sequence[float],
                   num_outputs    : int,
                   exclusive_pairs: Sequence[tuple[int, int]] = ()) -> list[float]:
    """
    Turn raw network outputs into an action vector.

    A channel is active (1.0) when its output is positive, inactive (0.0) otherwise.
    When both channels of an exclusive pair are active, both are cleared. An empty
    'outputs' (the network could not be evaluated) means no action at all.

    Parameters:
        outputs:         the raw network outputs
        num_outputs:     the length of the action vector
        exclusive_pairs: pairs of channels that cannot be active together

    Returns:
        the action vector
    """
    if not outputs:
        return [0.0] * num_outputs

    actions = [1.0 if value > 0.0 else 0.0 for value in outputs[:num_outputs]]
    actions.extend([0.0] * (num_outputs - len(actions)))

    for first, second in exclusive_pairs:
        if first < num_outputs and second < num_outputs and actions[first] and actions[second]:
            actions[first]  = 0.0
            actions[second] = 0.0

    return actions
