"""
XOR Problem with Evolution and Gradient Descent

This module trains networks on the classic XOR (exclusive OR) problem:
        Input (0, 0) -> Output 0
        Input (0, 1) -> Output 1
        Input (1, 0) -> Output 1
        Input (1, 1) -> Output 0

XOR is not linearly separable, so the networks have one hidden layer:
    Input(2) -> FullyConnected(4, tanh) -> FullyConnected(1, sigmoid)

Every generation, each network is trained by backpropagation for 'num_epochs'
passes over the four cases; the fittest trained networks then breed the next
generation through crossover and mutation of their genomes.

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

Usage:
    python trial_XOR.py [config_xor.ini] [num_jobs]
"""

import logging
import sys
import numpy as np
from pathlib import Path

from stacknet.logging_config import setup_logging
from stacknet.phenotype      import Network
from stacknet.run            import Config, TrialGrad

class Trial_XOR(TrialGrad):
    """
    Evolution + gradient descent trial for the XOR problem.

    Implemented Methods:
        _build_network():             Input(2) -> FC(4, tanh) -> FC(1, sigmoid)
        _get_training_data():         The four XOR cases
        _evaluate_fitness(network):   4.0 minus the squared error over the four cases
        _report_progress():           Display generation statistics and the XOR truth table
        _final_report():              Save and visualize the fittest network
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        super().__init__(config, suppress_output)

        self.xor_inputs  = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
        self.xor_outputs = np.array([[0.0],      [1.0],      [1.0],      [0.0]])

    def _build_network(self) -> Network:
        network = self._new_network()
        network.add_input_layer(2)
        network.add_fully_connected_layer(4, activation="tanh")
        network.add_fully_connected_layer(1, activation="sigmoid")
        return network

    def _get_training_data(self) -> tuple[np.ndarray, np.ndarray]:
        return self.xor_inputs, self.xor_outputs

    def _evaluate_fitness(self, network: Network) -> float:
        fitness = 4.0  # max possible fitness
        for inputs, expected_output in zip(self.xor_inputs, self.xor_outputs):
            output   = network.forward_pass(inputs)
            fitness -= float(np.sum((output - expected_output) ** 2))
        return fitness

    def _report_progress(self):
        fittest, fitness = self.get_fittest()

        s  = f"===============\n"
        s += f"GENERATION {self._generation_counter:04d}\n"
        s += f"population size = {len(self.population)}\n"
        s += f"maximum fitness = {fitness:.4f}\n"
        s += '\n'
        s += "input         output   target  error\n"
        s += "------------------------------------\n"

        for inputs, target in zip(self.xor_inputs, self.xor_outputs):
            output = fittest.forward_pass(inputs)[0]
            s += f"{inputs.tolist()} -> {output:.4f}    {target[0]}   {abs(output - target[0]):.4f}\n"

        print(s)

    def _final_report(self):
        fittest, _ = self.get_fittest()
        path = fittest.save("xor_network.bin")
        print(f"Fittest network saved as '{path}'")
        print("SUCCESS" if not self.failed else "FAILED")

        # Rendering needs the Graphviz binaries, which are optional
        try:
            fittest.visualize()
        except Exception as e:
            print(f"Could not visualize network: {e}")

if __name__ == "__main__":
    setup_logging(logging.INFO)

    config_file = sys.argv[1] if len(sys.argv) > 1 else Path(__file__).parent / "config_xor.ini"
    num_jobs    = int(sys.argv[2]) if len(sys.argv) > 2 else 1

    config = Config(str(config_file))
    trial  = Trial_XOR(config)
    trial.run(num_jobs=num_jobs)
