"""
Pattern Classification with a Convolutional Network

This module trains a single network, by gradient descent only, to tell apart
three kinds of noisy 6x6 pattern: horizontal bars, vertical bars and
diagonals.

    Input(6x6x1) -> Convolution(4 filters, 3x3) -> ReLU -> Pooling(2)
                 -> FullyConnected(3, sigmoid)

Progress is printed by a ConsoleReporter: every 500 examples the
guess, the expected output and the running errors, plus the sliding-window
average error each time a window of 200 examples completes.

Usage:
    python train_patterns.py [num_examples]
"""

import logging
import sys
import numpy as np

from stacknet.logging_config import setup_logging
from stacknet.phenotype      import Network
from stacknet.run            import ConsoleReporter

SIZE = 6

def make_example(label: int) -> tuple[np.ndarray, np.ndarray]:
    """A noisy 6x6 image of pattern 'label', and its one-hot target."""
    image = np.random.normal(0.0, 0.1, (SIZE, SIZE))
    if label == 0:
        image[np.random.randint(SIZE), :] += 1.0
    elif label == 1:
        image[:, np.random.randint(SIZE)] += 1.0
    else:
        columns = np.arange(SIZE) if np.random.random() < 0.5 else np.arange(SIZE)[::-1]
        image[np.arange(SIZE), columns] += 1.0

    target = np.zeros(3)
    target[label] = 1.0
    return image.ravel(), target

def build_network() -> Network:
    network = Network("error_squared", learning_rate=0.05)
    network.add_input_layer(SIZE * SIZE, extent=(SIZE, SIZE, 1))
    network.add_convolution_layer(n_filters=4, filter_size=3, stride=1, padding=0)
    network.add_relu_layer()
    network.add_pooling_layer(2)
    network.add_fully_connected_layer(3, activation="sigmoid")
    return network

def accuracy(network: Network, num_examples: int = 300) -> float:
    correct = 0
    for _ in range(num_examples):
        label = np.random.randint(3)
        inputs, _ = make_example(label)
        correct += int(np.argmax(network.forward_pass(inputs)) == label)
    return correct / num_examples

if __name__ == "__main__":
    setup_logging(logging.INFO)
    num_examples = int(sys.argv[1]) if len(sys.argv) > 1 else 3000

    network  = build_network()
    reporter = ConsoleReporter(every=500)
    print(network)

    for _ in range(num_examples):
        inputs, target = make_example(np.random.randint(3))
        network.forward_pass(inputs)
        network.backpropagate(target, reporter)

    print(f"Accuracy on fresh examples: {100 * accuracy(network):.1f}%")
