"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Genome: An individual of the population: its genes, network, mutation rates and fitness
"""

import weakref
from loguru import logger
from typing import Sequence, TYPE_CHECKING

from neatris.genotype.gene           import Gene
from neatris.genotype.mutation_rates import MutationKind, MutationRates
from neatris.phenotype.network       import Network
from neatris.run.task                import decode_actions

if TYPE_CHECKING:
    from neatris.pool.pool import Pool
    from neatris.run.task  import TaskSimulation

# Version of the serialized genome record
GENOME_VERSION = 0

class Genome:
    """
    A NEAT genome: the unit of selection.

    A genome is a list of connection genes, from which a neural network is derived,
    plus its own vector of mutation rates and the bookkeeping needed to measure its
    fitness on one episode of the task.

    Node numbering convention:
        - Input nodes:  [0, input_size)
        - Bias node:    input_size (never receives connections)
        - Hidden nodes: (input_size, max_nodes), allocated by incrementing 'max_neuron'
        - Output nodes: [max_nodes, max_nodes + num_outputs)

    The genome does not own its pool: it keeps a weak reference to it, used to reach
    the shared random generator, the innovation counter and the configuration.

    Public Attributes:
        genes:           List of Gene objects
        network:         The Network built from the enabled genes
        fitness:         Fitness measured on the last episode
        max_neuron:      Highest node ID allocated by this genome
        global_rank:     Position of this genome in the population sorted by fitness
        mutation_rates:  The genome's self-adapting mutation rates
        frames_survived: Number of frames the current episode has lasted
        current_frame:   Number of frames stepped in the current episode
        finished:        Whether the current episode is over
        simulation:      The live task simulation driven by this genome (or None)

    Public Methods:
        generate_network():          Rebuild the network from the genes
        evaluate_network(inputs):    Run the network on an observation
        mutate():                    Apply all mutation operators
        clone():                     Genetic copy of this genome
        initialize_run(simulation):  Start a new episode
        evaluate_current():          Step the current episode by one frame
    """

    def __init__(self, pool: 'Pool'):
        """
        Initialize an empty genome (no genes, default mutation rates).

        Parameters:
            pool: the pool this genome belongs to
        """
        self._pool_ref = weakref.ref(pool)

        self.genes          : list[Gene]    = []
        self.fitness        : int           = 0
        self.max_neuron     : int           = 0
        self.global_rank    : int           = 0
        self.mutation_rates : MutationRates = MutationRates.defaults(pool.config)
        self.network        : Network       = Network(pool.input_size, pool.output_ids)

        self.frames_survived: int                        = 0
        self.current_frame  : int                        = 0
        self.finished       : bool                       = False
        self.simulation     : 'TaskSimulation | None'    = None

    @property
    def pool(self) -> 'Pool':
        pool = self._pool_ref()
        if pool is None:
            raise RuntimeError("genome outlived its pool")
        return pool

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    def generate_network(self) -> None:
        """
        Rebuild the network from the enabled genes.
        The genes are sorted (in place) by destination node first.
        """
        self.genes.sort(key=lambda gene: gene.out)
        self.network.build(self.genes)

    def evaluate_network(self, inputs: Sequence[float]) -> list[float]:
        """
        Run the network on one observation.

        Parameters:
            inputs: the observation, one value per input node

        Returns:
            the output values, or an empty list if the observation has the wrong size
        """
        input_size = self.pool.input_size
        if len(inputs) != input_size:
            logger.warning("incorrect number of neural network inputs: expected {}, got {}",
                           input_size, len(inputs))
            return []
        return self.network.evaluate(inputs)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def random_neuron(self, non_input: bool) -> int:
        """
        Pick a node ID at random among the nodes known to this genome.

        The candidates are the output nodes, the endpoints of every gene and,
        unless 'non_input' is set, the input nodes. When 'non_input' is set,
        gene endpoints on the input side (IDs up to and including the bias node)
        are left out.

        Parameters:
            non_input: whether to exclude input (and bias) nodes

        Returns:
            the ID of the selected node
        """
        pool       = self.pool
        input_size = pool.input_size

        neurons = set(pool.output_ids)
        if not non_input:
            neurons.update(range(input_size))

        for gene in self.genes:
            if not non_input or gene.into > input_size:
                neurons.add(gene.into)
            if not non_input or gene.out > input_size:
                neurons.add(gene.out)

        candidates = sorted(neurons)
        return candidates[pool.rand.randrange(len(candidates))]

    def contains_link(self, into: int, out: int) -> bool:
        return any(gene.into == into and gene.out == out for gene in self.genes)

    def point_mutate(self) -> None:
        """
        Mutate the weight of every gene: most of the time perturb it
        by a small amount, otherwise replace it with a new random value.
        """
        rand = self.pool.rand
        step = self.mutation_rates[MutationKind.STEP]
        perturb_chance = self.pool.config.perturb_chance

        for gene in self.genes:
            if rand.random() < perturb_chance:
                gene.weight = gene.weight + rand.random() * step * 2.0 - step
            else:
                gene.weight = rand.random() * 4.0 - 2.0

    def link_mutate(self, force_bias: bool) -> None:
        """
        Add a connection between two nodes picked at random.

        The connection always points away from the input side. Nothing is added
        if both ends are inputs or if the genome already has this connection.

        Parameters:
            force_bias: make the bias node the source of the new connection
        """
        pool       = self.pool
        input_size = pool.input_size

        neuron1 = self.random_neuron(False)
        neuron2 = self.random_neuron(True)

        # both input nodes
        if neuron1 <= input_size and neuron2 <= input_size:
            return

        # swap input and output
        if neuron2 <= input_size:
            neuron1, neuron2 = neuron2, neuron1

        into = input_size if force_bias else neuron1
        out  = neuron2
        if self.contains_link(into, out):
            return

        innovation = pool.new_innovation()
        weight     = pool.rand.random() * 4.0 - 2.0
        self.genes.append(Gene(into, out, weight, True, innovation))

    def node_mutate(self) -> None:
        """
        Split a connection picked at random by inserting a new node.

        The split gene is disabled and replaced by two new genes: one from its
        source to the new node (weight 1) and one from the new node to its
        destination (the old weight). Nothing happens if the picked gene is
        already disabled; the node ID is consumed anyway.
        """
        if not self.genes:
            return

        pool = self.pool
        self.max_neuron += 1

        gene = self.genes[pool.rand.randrange(len(self.genes))]
        if not gene.enabled:
            return
        gene.enabled = False

        gene1 = Gene(gene.into, self.max_neuron, 1.0, True, pool.new_innovation())
        self.genes.append(gene1)

        gene2 = Gene(self.max_neuron, gene.out, gene.weight, True, pool.new_innovation())
        self.genes.append(gene2)

    def enable_disable_mutate(self, enable: bool) -> None:
        """
        Flip the 'enabled' flag of one gene picked at random among those that are not already 'enable'.
        """
        candidates = [gene for gene in self.genes if gene.enabled != enable]
        if not candidates:
            return

        gene = candidates[self.pool.rand.randrange(len(candidates))]
        gene.enabled = not gene.enabled

    def mutate(self) -> None:
        """
        Apply all mutation operators to this genome.

        The mutation rates are perturbed first. Weights are then mutated with
        probability 'connections'. The other rates are expected counts: an
        operator whose rate is 2.3 is applied twice, plus once more with
        probability 0.3.
        """
        rand = self.pool.rand

        self.mutation_rates.perturb(rand)

        if rand.random() < self.mutation_rates[MutationKind.CONNECTIONS]:
            self.point_mutate()

        operators = ((MutationKind.LINK,    lambda: self.link_mutate(False)),
                     (MutationKind.BIAS,    lambda: self.link_mutate(True)),
                     (MutationKind.NODE,    self.node_mutate),
                     (MutationKind.ENABLE,  lambda: self.enable_disable_mutate(True)),
                     (MutationKind.DISABLE, lambda: self.enable_disable_mutate(False)))

        for kind, operator in operators:
            p = self.mutation_rates[kind]
            while p > 0.0:
                if rand.random() < p:
                    operator()
                p -= 1.0

    def clone(self) -> 'Genome':
        """
        Create a genetic copy of this genome.
        The copy does not share the episode state (simulation, frames, finished flag).
        """
        child = Genome(self.pool)
        child.genes          = [gene.copy() for gene in self.genes]
        child.fitness        = self.fitness
        child.max_neuron     = self.max_neuron
        child.global_rank    = self.global_rank
        child.mutation_rates = self.mutation_rates.copy()
        child.generate_network()
        return child

    # ------------------------------------------------------------------
    # Episode
    # ------------------------------------------------------------------

    def initialize_run(self, simulation: 'TaskSimulation') -> None:
        """
        Start a new episode of the task, driven by this genome.
        The fitness is reset: it is measured anew on every episode.

        Parameters:
            simulation: a fresh task simulation; it becomes the genome's live simulation
        """
        self.simulation = simulation
        self.simulation.init()
        self.fitness         = 0
        self.frames_survived = 0
        self.current_frame   = 0
        self.finished        = False
        self.generate_network()

    def evaluate_current(self) -> None:
        """
        Step the current episode by one frame.

        The network is evaluated on the simulation's observation, and the decoded
        actions are applied to the simulation. While the episode is running the
        fitness tracks the score plus the number of frames survived. Once it is
        over (or once 'max_ticks' frames have been played, if configured) the
        genome is marked as finished and the pool's best fitness is updated.
        """
        if self.finished:
            return
        if self.simulation is None:
            raise RuntimeError("genome has no simulation; call 'initialize_run' first")

        pool       = self.pool
        simulation = self.simulation

        outputs = self.evaluate_network(simulation.observe())
        actions = decode_actions(outputs, pool.config.num_outputs, simulation.exclusive_pairs)
        simulation.step(actions)

        active = simulation.is_active()
        if active:
            self.frames_survived = max(self.frames_survived, self.current_frame + 1)
            self.fitness = int(simulation.score()) + self.frames_survived + 1
            if self.fitness == 0:
                self.fitness = -1

        max_ticks = pool.config.max_ticks
        capped    = max_ticks is not None and self.current_frame + 1 >= max_ticks

        if not active or capped:
            pool.update_max_fitness(self.fitness)
            self.finished = True
            simulation.term()

        self.current_frame += 1

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {"version"        : GENOME_VERSION,
                "fitness"        : self.fitness,
                "maxNeuron"      : self.max_neuron,
                "globalRank"     : self.global_rank,
                "framesSurvived" : self.frames_survived,
                "currentFrame"   : self.current_frame,
                "finished"       : self.finished,
                "mutationRates"  : self.mutation_rates.to_dict(),
                "genes"          : [gene.to_dict() for gene in self.genes]}

    @classmethod
    def from_dict(cls, genome_dict: dict, pool: 'Pool') -> 'Genome':
        """
        Create a Genome from its serialized form (see 'to_dict') and build its network.

        Raises:
            ValueError: the record is not an object, or was written by a newer, unsupported version
            KeyError:   a required field is missing
        """
        if not isinstance(genome_dict, dict):
            raise ValueError(f"genome record must be an object, not {type(genome_dict).__name__}")

        version = genome_dict.get("version", 0)
        if version > GENOME_VERSION:
            raise ValueError(f"unsupported genome version {version}")

        genome = cls(pool)
        genome.fitness         = int(genome_dict.get("fitness", 0))
        genome.max_neuron      = int(genome_dict["maxNeuron"])
        genome.global_rank     = int(genome_dict.get("globalRank", 0))
        genome.frames_survived = int(genome_dict.get("framesSurvived", 0))
        genome.current_frame   = int(genome_dict.get("currentFrame", 0))
        genome.finished        = bool(genome_dict.get("finished", False))
        genome.mutation_rates  = MutationRates.from_dict(genome_dict.get("mutationRates", {}), pool.config)
        genome.genes           = [Gene.from_dict(gene_dict) for gene_dict in genome_dict["genes"]]
        genome.generate_network()
        return genome

    def __str__(self):
        genes = " ".join(str(gene) for gene in self.genes)
        return f"fitness={self.fitness}, rank={self.global_rank}, max_neuron={self.max_neuron}\n{genes}"

    def __repr__(self):
        return f"Genome(genes={len(self.genes)}, fitness={self.fitness}, max_neuron={self.max_neuron})"
