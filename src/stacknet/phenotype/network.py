"""
Network Module

This module implements the Network class, which composes layers into a single
feed-forward chain and drives both of the ways its parameters can be optimized:
    - gradient descent, through forward_pass() and backpropagate()
    - evolution, through get_genome(), set_genome() and mutate()

Both work on the same parameters: the weights of the edges in the network's
NeuronSource and the private parameters of its convolution layers. The genome
lays them out as:
    [edge weights, in edge generation order]
    ++ [for each layer from input to output: that layer's own parameters]

Classes:
    Network: A linear stack of layers with a loss function and a learning rate
"""

import logging
import pickle
import random
import numpy as np
import graphviz  # type: ignore
from pathlib import Path
from typing  import Any, Callable, TYPE_CHECKING

from stacknet.genotype              import crossover, mutate as mutate_genome
from stacknet.losses                import LossFunctionType, losses, resolve_loss_function_type
from stacknet.phenotype.layers      import (ConvolutionLayer, FullyConnectedLayer, InputLayer, Layer,
                                            LayerType, PoolingLayer, ReLULayer, SoftMaxLayer)
from stacknet.phenotype.layer_stack import LayerStack
from stacknet.phenotype.statistics  import TrainingStatistics
from stacknet.store                 import Neuron, NeuronSource

if TYPE_CHECKING:
    from stacknet.run.reporting import ProgressObserver

logger = logging.getLogger(__name__)

# Marker stored in saved networks, checked when loading
_FILE_FORMAT = "stacknet-network/1"

class Network:
    """
    A trainable neural network made of a linear stack of layers.

    Layers are added from the input side: the first layer must be an input
    layer, every following layer reads from the layer added just before it,
    and the last layer added is the output layer. Layers are never removed.

    Public Attributes:
        neuron_source: The parameter store shared by the network's fully connected layers
        statistics:    Running error statistics, updated by 'backpropagate()'

    Public Properties:
        loss_function_type: The loss function selected at construction
        loss, d_loss:       The loss function and its derivative w.r.t. the output
        learning_rate:      Step size used by every layer's backward step
        layers:             The layers, from input to output
        input_layer:        The input layer
        output_layer:       The output layer (the most recently added one)
        number_layers:      Number of layers
        number_parameters:  Length of the genome

    Public Methods:
        add(layer):                       Append a layer built for this network
        add_input_layer(...), add_fully_connected_layer(...), add_convolution_layer(...),
        add_pooling_layer(...), add_relu_layer(), add_softmax_layer():
                                          Build a layer on top of the stack and append it
        set_input(inputs):                Inject an input vector
        forward_pass(inputs):             Evaluate all layers, return the outputs
        backpropagate(targets, observer): One gradient descent step towards 'targets'
        get_genome(), set_genome(genome): Flatten / restore all trainable parameters
        get_copy():                       Independent network with the same topology and genome
        mutate(winners, size):            Breed a new population from a list of networks
        save(path), load(path):           Binary persistence
        visualize(view):                  Graphviz rendering of the layer stack
    """

    def __init__(self,
                 loss_function      : LossFunctionType | str = LossFunctionType.ERROR_SQUARED,
                 learning_rate      : float = 0.1,
                 weight_init_mean   : float = 0.0,
                 weight_init_stdev  : float = 1.0,
                 reset_jobs         : int   = 1,
                 sliding_window_size: int   = 200):
        """
        Parameters:
            loss_function:       The loss function (a LossFunctionType or its name)
            learning_rate:       Step size for gradient descent; fixed for the network's lifetime
            weight_init_mean:    Mean of the initial weights of unscaled fully connected layers
            weight_init_stdev:   Standard deviation of those initial weights
            reset_jobs:          Threads used to clear error signals after a backward pass
                                 (1 = serial)
            sliding_window_size: Number of examples per sliding-window error report

        Raises:
            ValueError: if the loss function is not supported
        """
        self._loss_function_type: LossFunctionType = resolve_loss_function_type(loss_function)
        self._loss, self._d_loss = losses[self._loss_function_type]
        self._learning_rate     : float = float(learning_rate)
        self.weight_init_mean   : float = weight_init_mean
        self.weight_init_stdev  : float = weight_init_stdev
        self._reset_jobs        : int   = reset_jobs

        self.neuron_source: NeuronSource       = NeuronSource()
        self.statistics   : TrainingStatistics = TrainingStatistics(sliding_window_size)

        self._layers     : LayerStack         = LayerStack()
        self._input_layer: InputLayer | None  = None

    # ------------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------------

    @property
    def loss_function_type(self) -> LossFunctionType:
        return self._loss_function_type

    @property
    def loss(self) -> Callable:
        """loss(target, result)"""
        return self._loss

    @property
    def d_loss(self) -> Callable:
        """d_loss(target, result): derivative of the loss w.r.t. 'result'"""
        return self._d_loss

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @property
    def layers(self) -> list[Layer]:
        """The layers, from the input layer to the output layer."""
        return self._layers.forward_order()

    @property
    def input_layer(self) -> InputLayer | None:
        return self._input_layer

    @property
    def output_layer(self) -> Layer:
        return self._layers.top

    @property
    def number_layers(self) -> int:
        return len(self._layers)

    @property
    def number_parameters(self) -> int:
        """Length of the genome."""
        return sum(provider.number_parameters for provider in self._parameter_providers())

    # ------------------------------------------------------------------------
    # Layer composition
    # ------------------------------------------------------------------------

    def add(self, layer: Layer) -> None:
        """
        Append a layer on top of the stack.

        The first layer must be the (only) input layer; every other layer must
        have been built on the current top of the stack.

        Raises:
            ValueError: if the layer belongs to another network, or breaks the
                        feed-forward chain
        """
        if layer.network is not self:
            raise ValueError(f"{layer!r} was built for another network")

        if len(self._layers) == 0:
            if layer.layer_type != LayerType.INPUT:
                raise ValueError(f"The first layer must be an input layer, got {layer!r}")
        elif layer.layer_type == LayerType.INPUT:
            raise ValueError("The network already has an input layer")
        elif layer.source is not self._layers.top:
            raise ValueError(f"{layer!r} does not read from the current top layer")

        logger.debug("Adding %s", layer)
        if layer.layer_type == LayerType.INPUT:
            self._input_layer = layer
        self._layers.push(layer)

    def _top_layer(self) -> Layer:
        if len(self._layers) == 0:
            raise ValueError("Add an input layer first")
        return self._layers.top

    def add_input_layer(self, size: int, extent: tuple[int, int, int] | None = None) -> InputLayer:
        """
        Add the input layer.

        Parameters:
            size:   Number of inputs
            extent: Optional (width, height, depth) of the input, for spatial networks
        """
        if len(self._layers) != 0:
            raise ValueError("The network already has an input layer")
        layer = InputLayer(size, self, extent)
        self.add(layer)
        return layer

    def add_fully_connected_layer(self,
                                  size      : int,
                                  activation: str  = "sigmoid",
                                  scale     : bool = True) -> FullyConnectedLayer:
        """
        Add a fully connected layer on top of the stack.

        Parameters:
            size:       Number of units
            activation: Name of the activation function
            scale:      Whether initial weights are scaled by 1/sqrt(fan_in)
        """
        layer = FullyConnectedLayer(size, self._top_layer(), self, activation, scale)
        self.add(layer)
        return layer

    def add_convolution_layer(self,
                              n_filters   : int,
                              filter_size : int,
                              stride      : int = 1,
                              padding     : int = 0,
                              input_extent: tuple[int, ...] | None = None) -> tuple[int, int, int]:
        """
        Add a convolution layer on top of the stack.

        Parameters:
            n_filters:    Number of filters
            filter_size:  Width and height of each filter
            stride:       Step between filter positions
            padding:      Zero padding around the input
            input_extent: (width, height, depth) of the input; None uses the top layer's extent

        Returns:
            the (width, height, depth) of the new layer's output
        """
        layer = ConvolutionLayer(self._top_layer(), n_filters, filter_size, stride, padding, self, input_extent)
        self.add(layer)
        return layer.output_extent

    def add_pooling_layer(self,
                          tessellation: int,
                          input_extent: tuple[int, ...] | None = None) -> tuple[int, int, int]:
        """
        Add a max-pooling layer on top of the stack.

        Parameters:
            tessellation: Width and height of the pooling windows
            input_extent: (width, height) or (width, height, depth) of the input;
                          None uses the top layer's extent

        Returns:
            the (width, height, depth) of the new layer's output
        """
        layer = PoolingLayer(self._top_layer(), tessellation, self, input_extent)
        self.add(layer)
        return layer.output_extent

    def add_relu_layer(self) -> ReLULayer:
        """Add a ReLU layer on top of the stack."""
        layer = ReLULayer(self._top_layer(), self)
        self.add(layer)
        return layer

    def add_softmax_layer(self) -> SoftMaxLayer:
        """Add a softmax layer on top of the stack."""
        layer = SoftMaxLayer(self._top_layer(), self)
        self.add(layer)
        return layer

    def _replay(self, layer_type: LayerType, blueprint: dict[str, Any]) -> None:
        """Rebuild a layer from its type and blueprint on top of this network."""
        builders = {LayerType.INPUT          : self.add_input_layer,
                    LayerType.FULLY_CONNECTED: self.add_fully_connected_layer,
                    LayerType.CONVOLUTION    : self.add_convolution_layer,
                    LayerType.POOLING        : self.add_pooling_layer,
                    LayerType.RELU           : self.add_relu_layer,
                    LayerType.SOFTMAX        : self.add_softmax_layer}

        if layer_type not in builders:
            raise ValueError(f"Don't know how to build a layer of type {layer_type}")
        builders[layer_type](**blueprint)

    def find_neuron(self, neuron_id: int) -> Neuron:
        """Look up a unit of the parameter store by its ID."""
        return self.neuron_source.find_neuron(neuron_id)

    # ------------------------------------------------------------------------
    # Forward and backward passes
    # ------------------------------------------------------------------------

    def set_input(self, inputs) -> None:
        """
        Inject an input vector into the input layer.

        Raises:
            ValueError: if there is no input layer, or the length of 'inputs'
                        differs from the size of the input layer
        """
        if self._input_layer is None:
            raise ValueError("The network has no input layer")
        self._input_layer.add_input(inputs)

    def forward_pass(self, inputs=None) -> np.ndarray:
        """
        Evaluate every layer, from the input layer up to the output layer.

        Parameters:
            inputs: if given, injected first (see 'set_input()'); otherwise the
                    most recently injected input is used

        Returns:
            the outputs of the output layer
        """
        if inputs is not None:
            self.set_input(inputs)
        if len(self._layers) == 0:
            raise ValueError("The network has no layers")

        for layer in self._layers.forward_order():
            layer.evaluate_all_units()

        return self.output_layer.outputs()

    def backpropagate(self, targets, observer: 'ProgressObserver | None' = None) -> float:
        """
        Perform one gradient descent step towards 'targets'.

        Uses the outputs of the most recent forward pass: the loss is computed
        on them, the output layer seeds its error signal from the derivative of
        the loss, and every layer, from the output down to the input, updates
        its parameters and passes the error signal on. Finally the error signals
        of all units are cleared.

        Parameters:
            targets:  the expected outputs (one per output unit)
            observer: optional progress observer, notified with a TrainingStep

        Returns:
            the loss, summed over the output units

        Raises:
            IndexError: if the network has fewer than two layers
            ValueError: if the number of targets differs from the number of outputs
        """
        if len(self._layers) < 2:
            raise IndexError("Trying to backpropagate with 1 or fewer layers")

        targets = np.asarray(targets, dtype=np.float64)
        outputs = self.output_layer.outputs()
        if targets.shape != outputs.shape:
            raise ValueError(f"Expected {outputs.size} targets, got {targets.size}")

        error = float(np.sum(self._loss(targets, outputs)))
        step  = self.statistics.record(error, outputs, targets)
        if observer is not None:
            observer.on_step(step)

        output_layer, *lower_layers = self._layers.backward_order()
        output_layer.backpropagate(targets)
        for layer in lower_layers:
            layer.backpropagate()

        for layer in self._layers.backward_order():
            layer.reset_deltas(self._reset_jobs)

        return error

    # ------------------------------------------------------------------------
    # Genome
    # ------------------------------------------------------------------------

    def _parameter_providers(self) -> list:
        """Everything holding trainable values, in genome order."""
        providers = [self.neuron_source]
        providers.extend(layer for layer in self._layers.forward_order() if layer.number_parameters > 0)
        return providers

    def get_genome(self) -> np.ndarray:
        """
        All trainable parameters as one flat vector: the edge weights in generation
        order, then the parameters of each convolution layer, from input to output.
        """
        return np.concatenate([provider.get_parameters() for provider in self._parameter_providers()])

    def set_genome(self, genome) -> None:
        """
        Overwrite all trainable parameters from a flat vector laid out as by 'get_genome()'.

        Raises:
            ValueError: if the genome length differs from 'number_parameters'
                        (nothing is written in that case)
        """
        genome   = np.asarray(genome, dtype=np.float64).ravel()
        expected = self.number_parameters
        if genome.size != expected:
            raise ValueError(f"Expected a genome of length {expected}, got {genome.size}")

        logger.debug("Installing a genome of %d parameters", expected)

        cursor = 0
        for provider in self._parameter_providers():
            n = provider.number_parameters
            provider.set_parameters(genome[cursor:cursor + n])
            cursor += n

    def get_copy(self) -> 'Network':
        """
        Create an independent network with the same loss function, learning rate,
        layers and parameters. The copy shares no mutable state with this network.
        """
        copy = Network(self._loss_function_type,
                       self._learning_rate,
                       self.weight_init_mean,
                       self.weight_init_stdev,
                       self._reset_jobs,
                       self.statistics.sliding_window_size)

        for layer in self._layers.forward_order():
            copy._replay(layer.layer_type, layer.blueprint())

        copy.set_genome(self.get_genome())
        return copy

    @staticmethod
    def mutate(winners            : list['Network'],
               new_population_size: int,
               rate               : float = 0.05,
               magnitude          : float = 1.5) -> list['Network']:
        """
        Breed a new population from a list of networks.

        For each offspring, two parents are drawn at random (with replacement)
        from 'winners'; their genomes are crossed over and mutated, and the
        result is installed in a copy of the first parent. Parents are not modified.

        Parameters:
            winners:             The networks allowed to reproduce (same topology)
            new_population_size: Number of offspring to create
            rate:                Fraction of genome elements mutated
            magnitude:           Largest perturbation applied to a mutated element

        Returns:
            the new networks
        """
        if not winners:
            raise ValueError("Need at least one network to breed from")
        if new_population_size < 0:
            raise ValueError(f"Population size must be non-negative, got {new_population_size}")

        next_generation = []
        for _ in range(new_population_size):
            parent_1 = random.choice(winners)
            parent_2 = random.choice(winners)

            genome = mutate_genome(crossover(parent_1.get_genome(), parent_2.get_genome()), rate, magnitude)

            offspring = parent_1.get_copy()
            offspring.set_genome(genome)
            next_generation.append(offspring)

        return next_generation

    # ------------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialize the topology, hyperparameters and genome of this network."""
        payload = {"format"             : _FILE_FORMAT,
                   "loss_function"      : self._loss_function_type.value,
                   "learning_rate"      : self._learning_rate,
                   "weight_init_mean"   : self.weight_init_mean,
                   "weight_init_stdev"  : self.weight_init_stdev,
                   "reset_jobs"         : self._reset_jobs,
                   "sliding_window_size": self.statistics.sliding_window_size,
                   "layers"             : [(layer.layer_type.value, layer.blueprint())
                                           for layer in self._layers.forward_order()],
                   "genome"             : self.get_genome()}
        return pickle.dumps(payload)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Network':
        """Rebuild a network serialized with 'to_bytes()'."""
        payload = pickle.loads(data)
        if not isinstance(payload, dict) or payload.get("format") != _FILE_FORMAT:
            raise ValueError("Not a serialized network")

        network = cls(payload["loss_function"],
                      payload["learning_rate"],
                      payload["weight_init_mean"],
                      payload["weight_init_stdev"],
                      payload["reset_jobs"],
                      payload["sliding_window_size"])
        for layer_type, blueprint in payload["layers"]:
            network._replay(LayerType(layer_type), blueprint)
        network.set_genome(payload["genome"])
        return network

    def save(self, path: str | Path) -> Path:
        """Write this network to a binary file and return its path."""
        path = Path(path)
        logger.info("Writing network to %s", path)
        path.write_bytes(self.to_bytes())
        return path

    @classmethod
    def load(cls, path: str | Path) -> 'Network':
        """Read a network written by 'save()'."""
        return cls.from_bytes(Path(path).read_bytes())

    # ------------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------------

    def visualize(self, view: bool = False) -> graphviz.Digraph:
        """
        Visualize the layer stack using Graphviz.

        Parameters:
            view: If True, automatically open the visualization after rendering

        Returns:
            graphviz.Digraph object with one node per layer, from input to output
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')
        dot.attr('graph', labelloc='t', label=f"loss={self._loss_function_type.value}, "
                                              f"learning rate={self._learning_rate}")

        node_attrs = {'style': 'filled', 'shape': 'box', 'penwidth': '0.5', 'fontsize': '8'}
        colors     = {LayerType.INPUT:           'lightgrey',
                      LayerType.FULLY_CONNECTED: 'lightblue',
                      LayerType.CONVOLUTION:     'lightsalmon',
                      LayerType.POOLING:         'khaki',
                      LayerType.RELU:            'white',
                      LayerType.SOFTMAX:         'white'}

        layers = self._layers.forward_order()
        for index, layer in enumerate(layers):
            label = f"{layer.layer_type.name}\\nunits={layer.size}"
            if layer.output_extent is not None:
                label += f"\\nextent={layer.output_extent}"
            if layer.number_parameters:
                label += f"\\nparameters={layer.number_parameters}"
            dot.node(str(index), label=label, fillcolor=colors[layer.layer_type], **node_attrs)

        for index in range(1, len(layers)):
            dot.edge(str(index - 1), str(index), penwidth='0.5', arrowsize='0.5')

        if view:
            dot.view(cleanup=True)

        return dot

    def __str__(self):
        lines = [repr(layer) for layer in self._layers.forward_order()]
        lines.append(f"{self.neuron_source.number_parameters} edges, {self.number_parameters} parameters")
        return "\n".join(lines)

    def __repr__(self):
        return (f"Network(layers={self.number_layers}, parameters={self.number_parameters}, "
                f"loss={self._loss_function_type.value}, learning_rate={self._learning_rate})")
