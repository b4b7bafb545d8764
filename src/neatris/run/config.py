import configparser
import os

class Config:

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding the defaults.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config with default values, which
                         can then be modified by setting attributes manually.
        """

        # Defaults (also used for testing/manual setup)
        if config_file is None:

            # [POPULATION]
            self.population_size = 300
            self.num_outputs     = 5
            self.max_nodes       = 1000000
            self.seed            = None

            # [SPECIATION]
            self.delta_disjoint  = 2.0
            self.delta_weights   = 0.4
            self.delta_threshold = 1.0
            self.stale_species   = 15

            # [MUTATION]
            self.mutate_connections_chance = 0.25
            self.perturb_chance            = 0.90
            self.crossover_chance          = 0.75
            self.link_mutation_chance      = 2.0
            self.node_mutation_chance      = 0.50
            self.bias_mutation_chance      = 0.40
            self.step_size                 = 0.1
            self.disable_mutation_chance   = 0.4
            self.enable_mutation_chance    = 0.2

            # [EVALUATION]
            self.max_concurrent_tasks = 150
            self.max_ticks            = None

            # [PERSISTENCE]
            self.snapshot_dir     = "."
            self.snapshot_pattern = "backup{generation}.json"
            self.pool_file        = "pool.json"

            # [TERMINATION]
            self.max_number_generations = None

            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [POPULATION]

        # The number of genomes in each generation.
        self.population_size = get_value('POPULATION', 'population_size', int)

        # The number of output nodes (one per control channel of the task).
        self.num_outputs = get_value('POPULATION', 'num_outputs', int, default=5)

        # Output node IDs start here; hidden node IDs must stay below it.
        self.max_nodes = get_value('POPULATION', 'max_nodes', int, default=1000000)

        # Seed for the pool random generator. Use "None" for a random seed.
        self.seed = get_value('POPULATION', 'seed', int, default=None)

        # [SPECIATION]

        # Coefficients of the disjoint-gene and weight-difference
        # terms of the compatibility distance.
        self.delta_disjoint = get_value('SPECIATION', 'delta_disjoint', float, default=2.0)
        self.delta_weights  = get_value('SPECIATION', 'delta_weights' , float, default=0.4)

        # Genomes whose compatibility distance is less than this
        # threshold are considered to be in the same species.
        self.delta_threshold = get_value('SPECIATION', 'delta_threshold', float, default=1.0)

        # Species that have not improved their top fitness for this many
        # generations are removed (unless they hold the best fitness).
        self.stale_species = get_value('SPECIATION', 'stale_species', int, default=15)

        # [MUTATION]

        # Initial value of the per-genome probability of mutating all connection weights.
        self.mutate_connections_chance = get_value('MUTATION', 'mutate_connections_chance', float, default=0.25)

        # When mutating weights, the probability of perturbing a weight
        # (as opposed to replacing it with a new random value).
        self.perturb_chance = get_value('MUTATION', 'perturb_chance', float, default=0.90)

        # The probability that a child is bred through crossover (as opposed to cloning).
        self.crossover_chance = get_value('MUTATION', 'crossover_chance', float, default=0.75)

        # Initial values of the per-genome structural mutation rates. These are
        # expected counts per mutation, so values above 1 are meaningful.
        self.link_mutation_chance    = get_value('MUTATION', 'link_mutation_chance'   , float, default=2.0)
        self.node_mutation_chance    = get_value('MUTATION', 'node_mutation_chance'   , float, default=0.50)
        self.bias_mutation_chance    = get_value('MUTATION', 'bias_mutation_chance'   , float, default=0.40)
        self.disable_mutation_chance = get_value('MUTATION', 'disable_mutation_chance', float, default=0.4)
        self.enable_mutation_chance  = get_value('MUTATION', 'enable_mutation_chance' , float, default=0.2)

        # Initial value of the per-genome weight perturbation step.
        self.step_size = get_value('MUTATION', 'step_size', float, default=0.1)

        # [EVALUATION]

        # The maximum number of genomes stepped concurrently in one evaluation pass.
        self.max_concurrent_tasks = get_value('EVALUATION', 'max_concurrent_tasks', int, default=150)

        # Force an episode to finish after this many frames. Use "None" to let
        # every episode run until the task itself ends it.
        self.max_ticks = get_value('EVALUATION', 'max_ticks', int, default=None)

        # [PERSISTENCE]

        # Directory and file name pattern of the snapshot written after every generation.
        self.snapshot_dir     = get_value('PERSISTENCE', 'snapshot_dir'    , str, default=".")
        self.snapshot_pattern = get_value('PERSISTENCE', 'snapshot_pattern', str, default="backup{generation}.json")

        # The file used by manual save and load.
        self.pool_file = get_value('PERSISTENCE', 'pool_file', str, default="pool.json")

        # [TERMINATION]

        # The number of generations after which to stop the run. Use "None" to never stop.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int, default=None)

        if self.population_size is None or self.population_size < 1:
            raise ValueError("'population_size' must be a positive integer")
        if self.num_outputs < 1:
            raise ValueError("'num_outputs' must be a positive integer")
        if self.max_concurrent_tasks < 1:
            raise ValueError("'max_concurrent_tasks' must be a positive integer")
