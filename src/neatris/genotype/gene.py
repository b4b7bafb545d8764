"""
NEAT Gene Module

This module implements the Gene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Gene: Gene encoding a weighted connection between two nodes
"""

# Version of the serialized gene record
GENE_VERSION = 0

class Gene:
    """
    A gene describing a weighted connection between two nodes in a Neural Network.

    Each gene represents a directed edge in the neural network graph, connecting
    a source node ('into') to a destination node ('out') with an associated weight.
    Genes are uniquely identified by their innovation number, which serves as a
    historical marker enabling gene alignment during crossover and speciation.

    Genes can be enabled or disabled. A disabled gene keeps its place in the
    genome but contributes no edge to the network built from it.

    Public Attributes:
        into:       ID of the source node
        out:        ID of the destination node
        weight:     Weight of the connection
        enabled:    Whether this connection is active in the network
        innovation: Global innovation number uniquely identifying this connection

    Public Methods:
        copy():      Return an independent copy of the gene
        to_dict():   Serialize the gene
        from_dict(): Deserialize a gene
    """

    __slots__ = ('into', 'out', 'weight', 'enabled', 'innovation')

    def __init__(self,
                 into      : int   = 0,
                 out       : int   = 0,
                 weight    : float = 0.0,
                 enabled   : bool  = True,
                 innovation: int   = 0):
        """
        Parameters:
            into:       ID of the source node
            out:        ID of the destination node
            weight:     Weight of the connection
            enabled:    Whether this connection is active in the network
            innovation: Number uniquely and globally identifying this connection
        """
        self.into      : int   = into
        self.out       : int   = out
        self.weight    : float = weight
        self.enabled   : bool  = enabled
        self.innovation: int   = innovation

    def copy(self) -> 'Gene':
        return Gene(self.into, self.out, self.weight, self.enabled, self.innovation)

    def to_dict(self) -> dict:
        return {"version"   : GENE_VERSION,
                "into"      : self.into,
                "out"       : self.out,
                "weight"    : self.weight,
                "innovation": self.innovation,
                "enabled"   : self.enabled}

    @classmethod
    def from_dict(cls, gene_dict: dict) -> 'Gene':
        """
        Create a Gene from its serialized form (see 'to_dict').

        Raises:
            ValueError: the record is not an object, or was written by a newer, unsupported version
            KeyError:   a required field is missing
        """
        if not isinstance(gene_dict, dict):
            raise ValueError(f"gene record must be an object, not {type(gene_dict).__name__}")

        version = gene_dict.get("version", 0)
        if version > GENE_VERSION:
            raise ValueError(f"unsupported gene version {version}")

        return cls(into       = int  (gene_dict["into"]),
                   out        = int  (gene_dict["out"]),
                   weight     = float(gene_dict["weight"]),
                   enabled    = bool (gene_dict.get("enabled", True)),
                   innovation = int  (gene_dict["innovation"]))

    def __eq__(self, other):
        if not isinstance(other, Gene):
            return NotImplemented
        return (self.into       == other.into    and
                self.out        == other.out     and
                self.weight     == other.weight  and
                self.enabled    == other.enabled and
                self.innovation == other.innovation)

    __hash__ = None

    def __repr__(self):
        return (f"Gene(into={self.into:03d}, out={self.out:03d}, "
                f"weight={self.weight:+.6f}, enabled={self.enabled}, innovation={self.innovation:03d})")

    def __str__(self):
        s  = f"[{self.innovation:03d},{'E' if self.enabled else 'D'},"
        s += f"{self.into:02d}=>{self.out:02d},{self.weight:+.02f}]"
        return s
