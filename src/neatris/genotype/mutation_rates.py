"""
NEAT Mutation Rates Module

Each genome carries its own vector of mutation rates, which drift from one
generation to the next (self-adaptation). The rates are indexed by a closed
enumeration of mutation kinds.

Classes:
    MutationKind:  Enumeration of the mutation kinds
    MutationRates: Per-genome vector of mutation rates
"""

from enum import IntEnum
import numpy as np

from neatris.run.config import Config

class MutationKind(IntEnum):
    CONNECTIONS = 0   # probability of perturbing all connection weights
    LINK        = 1   # expected number of new links
    BIAS        = 2   # expected number of new links from the bias node
    NODE        = 3   # expected number of connection splits
    ENABLE      = 4   # expected number of re-enabled genes
    DISABLE     = 5   # expected number of disabled genes
    STEP        = 6   # magnitude of weight perturbations

# Factors applied to each rate at every mutation (chosen by a coin flip)
RATE_DECAY  = 0.95
RATE_GROWTH = 1.05263

class MutationRates:
    """
    The mutation rates of a genome.

    Rates are stored in a fixed-size numpy vector indexed by 'MutationKind'.
    Rates are not clamped: they can grow or decay without bound.

    Public Methods:
        defaults(config): Build the initial rates from the configuration
        perturb(rand):    Scale every rate up or down
        copy():           Return an independent copy
        to_dict():        Serialize (rate name => value)
        from_dict():      Deserialize
    """

    def __init__(self, values=None):
        """
        Parameters:
            values: one value per MutationKind, in enumeration order (zeros if None)
        """
        if values is None:
            values = np.zeros(len(MutationKind))
        self._values = np.array(values, dtype=np.float64)
        if self._values.shape != (len(MutationKind),):
            raise ValueError(f"expected {len(MutationKind)} mutation rates, got {self._values.shape}")

    @classmethod
    def defaults(cls, config: Config) -> 'MutationRates':
        rates = cls()
        rates[MutationKind.CONNECTIONS] = config.mutate_connections_chance
        rates[MutationKind.LINK]        = config.link_mutation_chance
        rates[MutationKind.BIAS]        = config.bias_mutation_chance
        rates[MutationKind.NODE]        = config.node_mutation_chance
        rates[MutationKind.ENABLE]      = config.enable_mutation_chance
        rates[MutationKind.DISABLE]     = config.disable_mutation_chance
        rates[MutationKind.STEP]        = config.step_size
        return rates

    def __getitem__(self, kind: MutationKind) -> float:
        return float(self._values[kind])

    def __setitem__(self, kind: MutationKind, value: float) -> None:
        self._values[kind] = value

    def __len__(self):
        return len(self._values)

    def perturb(self, rand) -> None:
        """
        Scale every rate by RATE_DECAY or RATE_GROWTH, picked by a fair coin flip.

        Parameters:
            rand: the random generator to draw from
        """
        for kind in MutationKind:
            if rand.random() < 0.5:
                self._values[kind] *= RATE_DECAY
            else:
                self._values[kind] *= RATE_GROWTH

    def copy(self) -> 'MutationRates':
        return MutationRates(self._values.copy())

    def to_dict(self) -> dict[str, float]:
        return {kind.name.lower(): float(self._values[kind]) for kind in MutationKind}

    @classmethod
    def from_dict(cls, rates_dict: dict, config: Config) -> 'MutationRates':
        """
        Rates missing from 'rates_dict' keep their default value; unknown names are ignored.
        """
        rates = cls.defaults(config)
        for kind in MutationKind:
            name = kind.name.lower()
            if name in rates_dict:
                rates[kind] = float(rates_dict[name])
        return rates

    def __eq__(self, other):
        if not isinstance(other, MutationRates):
            return NotImplemented
        return bool(np.array_equal(self._values, other._values))

    __hash__ = None

    def __repr__(self):
        inner = ", ".join(f"{name}={value:.4f}" for name, value in self.to_dict().items())
        return f"MutationRates({inner})"
