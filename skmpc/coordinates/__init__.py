# flake8: noqa

from .pose import Pose2D
from .pose import Twist2D

from .so2 import SO2

from .math import normalize_angle
from .math import quaternion_from_yaw
from .math import yaw_from_quaternion
