"""
Genetics Module

This module implements the evolutionary operators that act on flat genomes.
A genome is the vector of all trainable parameters of a network, as produced
by 'Network.get_genome()'; the operators here know nothing about layers, they
only require that the genomes they combine come from networks of the same
topology (and therefore have the same length).

Functions:
    crossover(genome_1, genome_2):      Combine two parent genomes into one offspring genome
    mutate(genome, rate, magnitude):    Randomly perturb a fraction of a genome's elements
"""

import numpy as np

def crossover(genome_1, genome_2) -> np.ndarray:
    """
    Combine two parent genomes into one offspring genome.

    Uniform crossover: every element of the offspring is inherited, with equal
    probability, from the corresponding element of either parent. Two identical
    parents therefore always produce an identical offspring.

    Parameters:
        genome_1: first parent genome
        genome_2: second parent genome

    Returns:
        the offspring genome (a new array, parents are not modified)

    Raises:
        ValueError: if the two genomes differ in length
    """
    genome_1 = np.asarray(genome_1, dtype=np.float64)
    genome_2 = np.asarray(genome_2, dtype=np.float64)
    if genome_1.shape != genome_2.shape:
        raise ValueError(f"Cannot cross genomes of length {len(genome_1)} and {len(genome_2)}")

    from_first = np.random.random(genome_1.shape) < 0.5
    return np.where(from_first, genome_1, genome_2)

def mutate(genome, rate: float, magnitude: float) -> np.ndarray:
    """
    Randomly perturb a fraction of a genome's elements.

    Each element is, independently and with probability 'rate', shifted by
    a value drawn uniformly from [-magnitude, magnitude]. All other elements
    are copied unchanged.

    Parameters:
        genome:    the genome to mutate
        rate:      probability that any single element is mutated, in [0, 1]
        magnitude: largest absolute perturbation applied to a mutated element

    Returns:
        the mutated genome (a new array, the input is not modified)

    Raises:
        ValueError: if 'rate' lies outside [0, 1] or 'magnitude' is negative
    """
    if not 0.0 <= rate <= 1.0:
        raise ValueError(f"Mutation rate must lie in [0, 1], got {rate}")
    if magnitude < 0.0:
        raise ValueError(f"Mutation magnitude must be non-negative, got {magnitude}")

    genome  = np.array(genome, dtype=np.float64)
    mutated = np.random.random(genome.shape) < rate
    perturbation = np.random.uniform(-magnitude, magnitude, genome.shape)
    genome[mutated] += perturbation[mutated]
    return genome
