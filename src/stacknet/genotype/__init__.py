"""
Genotype Package

This package implements the evolutionary operators over flat genomes (the
vector of all trainable parameters of a network). Encoding a network into a
genome and decoding it back is done by 'Network.get_genome()' and
'Network.set_genome()'.

Modules:
    genetics: crossover and mutation operators

Exported Functions:
    crossover: Combine two parent genomes into one offspring genome
    mutate:    Randomly perturb a fraction of a genome's elements
"""

from stacknet.genotype.genetics import crossover, mutate

__all__ = ['crossover',
           'mutate']
