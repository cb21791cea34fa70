"""
Trial with Gradient Descent Module

This module defines an abstract base class for trials that combine evolution
with gradient descent: before its fitness is evaluated, every network is
trained by backpropagation on the trial's training data. The trained
parameters are the ones passed on to the offspring (Lamarckian evolution).

Classes:
    TrialGrad: Abstract base class combining evolution with gradient descent
"""

import numpy as np
from abc    import abstractmethod
from joblib import Parallel, delayed

from stacknet.phenotype     import Network
from stacknet.run.config    import Config
from stacknet.run.reporting import ProgressObserver
from stacknet.run.trial     import Trial

class TrialGrad(Trial):
    """
    Abstract base class for evolutionary trials with gradient descent.

    Subclasses must implement (in addition to Trial requirements):
    - _get_training_data(): Provide the (inputs, targets) used for training

    Gradient Training Configuration (via Config):
        learning_rate: Step size of gradient descent
        num_epochs:    Passes over the training data per generation

    Public Methods (inherited from Trial):
        run(): Execute a complete trial
    """

    def __init__(self,
                 config         : Config,
                 suppress_output: bool = False,
                 observer       : ProgressObserver | None = None):
        """
        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
            observer:        Optional observer notified of every training step
        """
        super().__init__(config, suppress_output)
        self._observer: ProgressObserver | None = observer

    @abstractmethod
    def _get_training_data(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Get the training data.

        Returns:
            (inputs, targets): one input vector and one target vector per example
        """
        pass

    def _train(self, network: Network) -> None:
        """Train a network for 'num_epochs' passes over the training data."""
        inputs, targets = self._get_training_data()
        for _ in range(self._config.num_epochs):
            for x, t in zip(inputs, targets):
                network.forward_pass(x)
                network.backpropagate(t, self._observer)

    def _train_and_evaluate(self, network: Network) -> tuple[np.ndarray, float]:
        """
        Train a network, then evaluate it.

        Returns:
            (genome after training, fitness after training)
        """
        self._train(network)
        return network.get_genome(), self._evaluate_fitness(network)

    def _evaluate_fitness_all(self, num_jobs: int):
        """
        Train and evaluate every network in the population.

        Worker processes train copies of the networks, so the trained genomes
        are sent back and installed in the networks of this process.
        """
        if num_jobs == 1:
            results = [self._train_and_evaluate(network) for network in self.population]
        else:
            results = Parallel(num_jobs)(delayed(self._train_and_evaluate)(n) for n in self.population)

        self.fitness = []
        for network, (genome, fitness) in zip(self.population, results):
            network.set_genome(genome)
            self.fitness.append(fitness)
