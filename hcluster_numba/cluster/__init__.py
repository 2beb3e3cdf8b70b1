from .hierarchy import *
from .hierarchy import __all__
