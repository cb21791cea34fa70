"""
Run Package

This package drives training: configuration, progress reporting and the
evolutionary (optionally gradient-assisted) trial loop.

Modules:
    config:     Config class (INI configuration)
    reporting:  ProgressObserver, ConsoleReporter and HistoryRecorder classes
    trial:      Trial abstract base class
    trial_grad: TrialGrad abstract base class

Exported Classes:
    Config:           Configuration parameters
    ProgressObserver: Abstract base class for training progress observers
    ConsoleReporter:  Prints training progress
    HistoryRecorder:  Records training progress
    Trial:            Evolutionary trial
    TrialGrad:        Evolutionary trial with gradient descent
"""

from stacknet.run.config     import Config
from stacknet.run.reporting  import ConsoleReporter, HistoryRecorder, ProgressObserver
from stacknet.run.trial      import Trial
from stacknet.run.trial_grad import TrialGrad

__all__ = ['Config',
           'ConsoleReporter',
           'HistoryRecorder',
           'ProgressObserver',
           'Trial',
           'TrialGrad']
