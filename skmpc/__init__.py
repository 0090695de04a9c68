# flake8: noqa

import importlib.metadata

from skmpc import coordinates
from skmpc import kinematics
from skmpc import msgs
from skmpc import optimizer


try:
    __version__ = importlib.metadata.version('scikit-mpc')
except importlib.metadata.PackageNotFoundError:
    # running from a source tree without installation
    __version__ = '0.0.0'

__all__ = ['coordinates', 'kinematics', 'msgs', 'optimizer']
