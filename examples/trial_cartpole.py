"""
CartPole Task for NEAT

This module wires the classic CartPole balancing task from Gymnasium into the
evolutionary engine, through the TaskSimulation contract. The goal is to evolve
neural networks that can balance a pole on a moving cart by pushing it left or right.

The CartPole Problem:
    The agent controls a cart that moves along a frictionless track. A pole is attached
    to the cart via an un-actuated joint. The agent must balance the pole by moving the
    cart left or right.

    State Space (4 continuous values, one per network input):
        - Cart position: [-2.4, 2.4]
        - Cart velocity: [-inf, inf]
        - Pole angle: [-0.209, 0.209] radians (~12 degrees)
        - Pole angular velocity: [-inf, inf]

    Action Space (2 discrete actions, one network output each):
        0 - Push cart to the left
        1 - Push cart to the right

    Termination Conditions:
        - Pole angle exceeds +-12 degrees
        - Cart position exceeds +-2.4
        - Episode length exceeds 500 timesteps

Fitness:
    The engine sets fitness = score + frames survived + 1, so the frame count already
    rewards balancing. The score adds a penalty proportional to the distance of the
    cart from the center, which encourages stable solutions.

Classes:
    CartPoleSimulation: One CartPole episode driven by one genome

Usage:
    config  = Config("examples/configs/config_cartpole.ini")
    trainer = Trainer(config, CartPoleSimulation.INPUT_SIZE, CartPoleSimulation)
    trainer.run()
"""

import gymnasium as gym    # type: ignore
from typing import Sequence

from neatris.run.task import TaskSimulation

class CartPoleSimulation(TaskSimulation):
    """
    One episode of CartPole-v1.

    The cart is pushed towards the side whose output channel is active; when both or
    neither are active the previous action is repeated.
    """

    INPUT_SIZE = 4

    # Both push channels may fire together; the simulation settles the conflict itself.
    exclusive_pairs = ()

    def __init__(self, seed: int | None = None, position_penalty_coeff: float = 10.0, render_mode: str | None = None):
        """
        Parameters:
            seed:                   seed of the environment (None for a random start)
            position_penalty_coeff: penalty per unit of distance from the center
            render_mode:            Gymnasium render mode (e.g. "human" to watch the episode)
        """
        self._env   = gym.make("CartPole-v1", render_mode=render_mode)
        self._seed  = seed
        self._penalty_coeff = position_penalty_coeff

        self._observation = None
        self._action      = 0
        self._active      = False

    def init(self) -> None:
        self._observation, _ = self._env.reset(seed=self._seed)
        self._action = 0
        self._active = True

    def observe(self) -> Sequence[float]:
        return [float(value) for value in self._observation]

    def step(self, actions: Sequence[float]) -> None:
        left, right = actions[0], actions[1]
        if left != right:
            self._action = 1 if right else 0

        self._observation, _, terminated, truncated, _ = self._env.step(self._action)
        self._active = not (terminated or truncated)

    def is_active(self) -> bool:
        return self._active

    def score(self) -> float:
        # NOTE: the cart position is the first value of an observation
        return -self._penalty_coeff * abs(float(self._observation[0]))

    def term(self) -> None:
        self._env.close()
