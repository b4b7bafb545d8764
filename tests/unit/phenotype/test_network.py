"""
Unit tests for the phenotype network: sigmoid, Neuron and Network.
"""

import math
import pytest
import numpy as np

from neatris.genotype.gene     import Gene
from neatris.phenotype.network import Network, Neuron, sigmoid


# ============================================================================
# Fixtures
# ============================================================================

OUTPUTS = (100, 101)

@pytest.fixture
def network():
    """Network with 2 inputs and 2 outputs (IDs 100 and 101)."""
    return Network(2, OUTPUTS)


# ============================================================================
# Test: sigmoid
# ============================================================================

class TestSigmoid:

    def test_zero_maps_to_zero(self):
        assert sigmoid(0.0) == 0.0

    def test_strictly_increasing(self):
        xs     = np.linspace(-2.0, 2.0, 101)
        values = [sigmoid(x) for x in xs]
        assert all(b > a for a, b in zip(values, values[1:]))

    def test_range_strictly_inside_unit_interval(self):
        for x in np.linspace(-3.0, 3.0, 61):
            assert -1.0 < sigmoid(x) < 1.0

    def test_saturates(self):
        assert sigmoid(10.0) == pytest.approx(1.0)
        assert sigmoid(-10.0) == pytest.approx(-1.0)

    def test_extreme_inputs_do_not_overflow(self):
        assert -1.0 <= sigmoid(-1e6) <= 1.0
        assert -1.0 <= sigmoid(1e6) <= 1.0
        assert not math.isnan(sigmoid(1e308))

    def test_formula(self):
        x = 0.3
        assert sigmoid(x) == pytest.approx(2.0 / (1.0 + math.exp(-4.9 * x)) - 1.0)


# ============================================================================
# Test: Neuron
# ============================================================================

class TestNeuron:

    def test_new_neuron(self):
        neuron = Neuron()
        assert neuron.value == 0.0
        assert neuron.incoming == []

    def test_neurons_do_not_share_incoming_lists(self):
        a, b = Neuron(), Neuron()
        a.incoming.append(Gene())
        assert b.incoming == []


# ============================================================================
# Test: Network.build
# ============================================================================

class TestNetworkBuild:

    def test_inputs_and_outputs_always_present(self, network):
        network.build([])

        assert list(network.neurons) == [0, 1, 100, 101]
        assert len(network) == 4

    def test_enabled_genes_create_endpoints(self, network):
        genes = [Gene(0, 7, 1.0, True, 1), Gene(7, 100, 1.0, True, 2), Gene(9, 101, 1.0, True, 3)]
        network.build(genes)

        for gene in genes:
            assert gene.into in network
            assert gene.out in network
        assert network.neurons[100].incoming == [genes[1]]

    def test_insertion_order_follows_genes(self, network):
        network.build([Gene(8, 9, 1.0, True, 1), Gene(0, 5, 1.0, True, 2)])

        # destination before source for each gene
        assert list(network.neurons)[4:] == [9, 8, 5]

    def test_disabled_genes_are_skipped(self, network):
        network.build([Gene(0, 7, 1.0, False, 1)])

        assert 7 not in network
        assert all(not neuron.incoming for neuron in network.neurons.values())

    def test_rebuild_discards_previous_neurons(self, network):
        network.build([Gene(0, 7, 1.0, True, 1)])
        network.build([])

        assert 7 not in network


# ============================================================================
# Test: Network.evaluate
# ============================================================================

class TestNetworkEvaluate:

    def test_direct_connections(self, network):
        network.build([Gene(0, 100, 1.0, True, 1), Gene(1, 101, -1.0, True, 2)])

        outputs = network.evaluate([0.5, 0.5])

        assert outputs == pytest.approx([sigmoid(0.5), sigmoid(-0.5)])

    def test_outputs_without_incoming_are_zero(self, network):
        network.build([])
        assert network.evaluate([1.0, 1.0]) == [0.0, 0.0]

    def test_inputs_are_not_reset(self, network):
        network.build([])
        network.evaluate([0.25, -0.75])

        assert network.neurons[0].value == 0.25
        assert network.neurons[1].value == -0.75

    def test_hidden_after_output_lags_one_pass(self, network):
        # the output neuron is visited before the hidden neuron feeding it
        network.build([Gene(0, 5, 1.0, True, 1), Gene(5, 100, 1.0, True, 2)])

        first  = network.evaluate([1.0, 0.0])
        second = network.evaluate([1.0, 0.0])

        assert first[0] == 0.0
        assert second[0] == pytest.approx(sigmoid(sigmoid(1.0)))

    def test_wrong_number_of_inputs_raises(self, network):
        network.build([])
        with pytest.raises(ValueError):
            network.evaluate([1.0])

    def test_missing_neuron_raises(self, network):
        network.build([Gene(0, 100, 1.0, True, 1)])
        del network.neurons[0]

        with pytest.raises(RuntimeError):
            network.evaluate([1.0, 1.0])

    def test_outputs_in_output_id_order(self):
        network = Network(1, (200, 100))
        network.build([Gene(0, 100, 1.0, True, 1)])

        outputs = network.evaluate([1.0])

        assert outputs[0] == 0.0
        assert outputs[1] == pytest.approx(sigmoid(1.0))
