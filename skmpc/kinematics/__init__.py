# flake8: noqa

from .model import KinematicModel
from .model import propagate_array
