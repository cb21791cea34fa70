import configparser
import os
from stacknet.losses import resolve_loss_function_type

class Config:

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config with default values for manual setup.
        """

        # Default config for testing/manual setup
        if config_file is None:

            # Set defaults for the network
            self.loss_function = resolve_loss_function_type('error_squared')
            self.learning_rate = 0.1
            self.reset_jobs    = 1

            # Set defaults for weight initialization
            self.weight_init_mean  = 0.0
            self.weight_init_stdev = 1.0

            # Set defaults for gradient training
            self.num_epochs          = 1
            self.sliding_window_size = 200

            # Set defaults for evolution
            self.population_size        = 50
            self.num_winners            = 10
            self.mutation_rate          = 0.05
            self.mutation_magnitude     = 1.5
            self.max_number_generations = 100
            self.fitness_threshold      = None

            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [NETWORK]

        # The loss function networks are trained with.
        # Allowed values: error_squared, logistical, hinge, square_loss_classification,
        #                 logistic_loss, exponential_loss, cross_entropy_loss
        self.loss_function = resolve_loss_function_type(get_value('NETWORK', 'loss_function', str))

        # The step size of gradient descent (fixed for the lifetime of a network).
        self.learning_rate = get_value('NETWORK', 'learning_rate', float)

        # Threads used to clear the error signals after each backward pass (1 = serial).
        self.reset_jobs = get_value('NETWORK', 'reset_jobs', int, default=1)

        # [INITIALIZATION]

        # The mean and standard deviation of the normal distribution used to
        # initialize the weights of fully connected layers built without scaling.
        self.weight_init_mean  = get_value('INITIALIZATION', 'weight_init_mean' , float, default=0.0)
        self.weight_init_stdev = get_value('INITIALIZATION', 'weight_init_stdev', float, default=1.0)

        # [TRAINING]

        # Number of passes over the training data each time a network is trained.
        self.num_epochs = get_value('TRAINING', 'num_epochs', int, default=1)

        # Number of training examples over which the sliding-window error is averaged.
        self.sliding_window_size = get_value('TRAINING', 'sliding_window_size', int, default=200)

        # [EVOLUTION]

        # The number of networks in each generation.
        self.population_size = get_value('EVOLUTION', 'population_size', int)

        # The number of fittest networks allowed to reproduce.
        self.num_winners = get_value('EVOLUTION', 'num_winners', int)

        # The probability that any single genome element is mutated.
        self.mutation_rate = get_value('EVOLUTION', 'mutation_rate', float, default=0.05)

        # The largest perturbation applied to a mutated genome element.
        self.mutation_magnitude = get_value('EVOLUTION', 'mutation_magnitude', float, default=1.5)

        # The number of generations after which to stop the run.
        self.max_number_generations = get_value('EVOLUTION', 'max_number_generations', int)

        # The fitness which, when reached by the fittest network, ends the run.
        # Use "None" to always run for 'max_number_generations'.
        self.fitness_threshold = get_value('EVOLUTION', 'fitness_threshold', float, default=None)

        if self.num_winners < 1 or self.num_winners > self.population_size:
            raise ValueError("'num_winners' must lie between 1 and 'population_size'")

    def __setattr__(self, name, value):
        """
        Override 'setattr' so that config.loss_function = "hinge" stores the
        matching LossFunctionType (and rejects unsupported names right away).
        """
        if name == 'loss_function':
            value = resolve_loss_function_type(value)
        super().__setattr__(name, value)
