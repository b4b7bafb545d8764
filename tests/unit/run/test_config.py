"""
Unit tests for Config class.
"""

import configparser
import pytest
import textwrap
from neatris.run.config import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def write_config(tmp_path):
    """Write an INI file in a temporary directory and return its path."""
    def _write(content, name="config.ini"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content))
        return str(path)
    return _write


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:
    """Test Config initialization."""

    def test_init_without_file_holds_defaults(self):
        """Test that Config() without file holds every default value."""
        config = Config()

        assert config.population_size == 300
        assert config.num_outputs == 5
        assert config.max_nodes == 1000000
        assert config.seed is None
        assert config.delta_disjoint == 2.0
        assert config.delta_weights == 0.4
        assert config.delta_threshold == 1.0
        assert config.stale_species == 15
        assert config.mutate_connections_chance == 0.25
        assert config.perturb_chance == 0.90
        assert config.crossover_chance == 0.75
        assert config.link_mutation_chance == 2.0
        assert config.node_mutation_chance == 0.50
        assert config.bias_mutation_chance == 0.40
        assert config.step_size == 0.1
        assert config.disable_mutation_chance == 0.4
        assert config.enable_mutation_chance == 0.2
        assert config.max_concurrent_tasks == 150
        assert config.max_ticks is None
        assert config.snapshot_dir == "."
        assert config.snapshot_pattern == "backup{generation}.json"
        assert config.pool_file == "pool.json"
        assert config.max_number_generations is None

    def test_init_with_nonexistent_file_raises_error(self):
        """Test that Config with nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Configuration file .* not found"):
            Config('nonexistent_file.ini')

    def test_init_with_minimal_config(self, write_config):
        """Only 'population_size' is required; everything else defaults."""
        config = Config(write_config("""
            [POPULATION]
            population_size = 50
        """))

        assert config.population_size == 50
        assert config.num_outputs == 5
        assert config.delta_threshold == 1.0
        assert config.link_mutation_chance == 2.0
        assert config.max_concurrent_tasks == 150
        assert config.max_ticks is None
        assert config.pool_file == "pool.json"

    def test_init_with_full_config(self, write_config):
        config = Config(write_config("""
            [POPULATION]
            population_size = 80
            num_outputs     = 2
            max_nodes       = 5000
            seed            = 11

            [SPECIATION]
            delta_disjoint  = 1.5
            delta_weights   = 0.5
            delta_threshold = 3.0
            stale_species   = 20

            [MUTATION]
            mutate_connections_chance = 0.3
            perturb_chance            = 0.8
            crossover_chance          = 0.5
            link_mutation_chance      = 1.0
            node_mutation_chance      = 0.25
            bias_mutation_chance      = 0.1
            step_size                 = 0.2
            disable_mutation_chance   = 0.3
            enable_mutation_chance    = 0.1

            [EVALUATION]
            max_concurrent_tasks = 8
            max_ticks            = 500

            [PERSISTENCE]
            snapshot_dir     = snapshots
            snapshot_pattern = gen{generation}.json
            pool_file        = current.json

            [TERMINATION]
            max_number_generations = 25
        """))

        assert config.population_size == 80
        assert config.num_outputs == 2
        assert config.max_nodes == 5000
        assert config.seed == 11
        assert config.delta_disjoint == 1.5
        assert config.delta_weights == 0.5
        assert config.delta_threshold == 3.0
        assert config.stale_species == 20
        assert config.mutate_connections_chance == 0.3
        assert config.perturb_chance == 0.8
        assert config.crossover_chance == 0.5
        assert config.link_mutation_chance == 1.0
        assert config.node_mutation_chance == 0.25
        assert config.bias_mutation_chance == 0.1
        assert config.step_size == 0.2
        assert config.disable_mutation_chance == 0.3
        assert config.enable_mutation_chance == 0.1
        assert config.max_concurrent_tasks == 8
        assert config.max_ticks == 500
        assert config.snapshot_dir == "snapshots"
        assert config.snapshot_pattern == "gen{generation}.json"
        assert config.pool_file == "current.json"
        assert config.max_number_generations == 25


# ============================================================================
# Test Config Value Parsing
# ============================================================================

class TestConfigValues:
    """Test parsing of special and invalid values."""

    def test_none_values(self, write_config):
        config = Config(write_config("""
            [POPULATION]
            population_size = 10
            seed            = None

            [EVALUATION]
            max_ticks = none

            [TERMINATION]
            max_number_generations = None
        """))

        assert config.seed is None
        assert config.max_ticks is None
        assert config.max_number_generations is None

    def test_missing_required_value_raises(self, write_config):
        with pytest.raises(configparser.NoSectionError):
            Config(write_config("""
                [SPECIATION]
                delta_threshold = 2.0
            """))

    def test_invalid_type_raises(self, write_config):
        with pytest.raises(ValueError):
            Config(write_config("""
                [POPULATION]
                population_size = many
            """))

    @pytest.mark.parametrize("content,key", [
        ("[POPULATION]\npopulation_size = 0\n", "population_size"),
        ("[POPULATION]\npopulation_size = 10\nnum_outputs = 0\n", "num_outputs"),
        ("[POPULATION]\npopulation_size = 10\n[EVALUATION]\nmax_concurrent_tasks = 0\n", "max_concurrent_tasks"),
    ])
    def test_non_positive_values_rejected(self, write_config, content, key):
        with pytest.raises(ValueError, match=key):
            Config(write_config(content))
