"""
Trial Module

This module defines the abstract base class for evolutionary trials, with
built-in support for CPU-based parallelization using joblib.

A trial represents one independent run of the evolutionary algorithm: a
population of networks sharing one topology is evolved, generation after
generation, until a solution is found or the maximum number of generations
is reached.
"""

import logging
from abc    import ABC, abstractmethod
from joblib import Parallel, delayed

from stacknet.phenotype  import Network
from stacknet.run.config import Config

logger = logging.getLogger(__name__)

class Trial(ABC):
    """
    Abstract base class for implementing an evolutionary trial.

    Each generation, every network is evaluated; the 'num_winners' fittest
    networks breed the next generation through 'Network.mutate()' (crossover
    and mutation of their genomes).

    Subclasses must implement:
    - _build_network(): Build one network of the initial population
    - _evaluate_fitness(network): Evaluate fitness for a single network
    - _report_progress(): Display progress after each generation
    - _final_report(): Display final results

    Subclasses can override:
    - _reset(): Reset trial-specific state (call super()._reset())
    - _terminate(): Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        population: The networks of the current generation
        fitness:    The fitness of each network of the current generation
        failed:     Whether the trial ended without reaching the fitness threshold

    Public Methods:
        run(): Execute a complete trial

    Parallelization of fitness evaluation:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
        """
        self._config            : Config        = config
        self._generation_counter: int           = 0
        self._suppress_output   : bool          = suppress_output
        self.population         : list[Network] = []
        self.fitness            : list[float]   = []
        self.failed             : bool          = True

    def run(self, num_jobs: int = 1):
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
        """
        self._reset()

        # Create the initial population
        self.population = [self._build_network() for _ in range(self._config.population_size)]

        self._evaluate_fitness_all(num_jobs)
        if not self._suppress_output:
            self._report_progress()

        # Evolution loop
        while not self._terminate():
            self._generation_counter += 1
            self._spawn_next_generation()
            self._evaluate_fitness_all(num_jobs)

            logger.info("Generation %d: best fitness %.6f", self._generation_counter, max(self.fitness))
            if not self._suppress_output:
                self._report_progress()

        if not self._suppress_output:
            self._final_report()

    def _reset(self):
        """
        Reset the trial state before starting a new run.

        Subclasses overriding this should call super()._reset().
        """
        self._generation_counter = 0
        self.population = []
        self.fitness    = []
        self.failed     = True

    def _new_network(self) -> Network:
        """An empty network configured from the trial's Config, for '_build_network()'."""
        return Network(self._config.loss_function,
                       self._config.learning_rate,
                       self._config.weight_init_mean,
                       self._config.weight_init_stdev,
                       self._config.reset_jobs,
                       self._config.sliding_window_size)

    @abstractmethod
    def _build_network(self) -> Network:
        """
        Build one network of the initial population.

        All networks must have the same topology, so that their genomes can be
        crossed over. Start from 'self._new_network()' and add layers to it.
        """
        pass

    @abstractmethod
    def _evaluate_fitness(self, network: Network) -> float:
        """
        Evaluate and return the fitness of a network.
        Higher fitness values indicate better performance.

        Parameters:
            network: The Network to evaluate

        Returns:
            float: Fitness score for the network
        """
        pass

    def _evaluate_fitness_all(self, num_jobs: int):
        """
        Evaluate fitness for all networks in the population.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
        """
        if num_jobs == 1:
            self.fitness = [self._evaluate_fitness(network) for network in self.population]
        else:
            self.fitness = list(Parallel(num_jobs)(delayed(self._evaluate_fitness)(n) for n in self.population))

    def _winners(self) -> list[Network]:
        """The 'num_winners' fittest networks of the current generation."""
        ranked = sorted(zip(self.fitness, range(len(self.population))), reverse=True)
        return [self.population[index] for _, index in ranked[:self._config.num_winners]]

    def _spawn_next_generation(self):
        """Replace the population with the offspring of its fittest networks."""
        self.population = Network.mutate(self._winners(),
                                         self._config.population_size,
                                         self._config.mutation_rate,
                                         self._config.mutation_magnitude)
        self.fitness = []

    def get_fittest(self) -> tuple[Network, float]:
        """The fittest network of the current generation, and its fitness."""
        if not self.fitness:
            raise RuntimeError("The population has not been evaluated yet")
        best = max(range(len(self.population)), key=lambda index: self.fitness[index])
        return self.population[best], self.fitness[best]

    @abstractmethod
    def _report_progress(self):
        """
        Report trial progress after each generation.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it once the fittest
        network reaches the fitness threshold.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        terminate = self._generation_counter >= self._config.max_number_generations

        if self._config.fitness_threshold is not None:
            success   = max(self.fitness) >= self._config.fitness_threshold
            terminate = terminate or success
            if terminate:
                self.failed = not success

        return terminate
