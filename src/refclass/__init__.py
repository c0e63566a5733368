"""
refclass: mutable reference classes for Python

Classes with public and private fields, methods that receive a private
handle, single inheritance with superclass delegation, and explicit
reference-versus-copy semantics.
"""

__version__ = "0.1.0"


from ._error import *
from ._store import *
from ._member import *
from ._classdef import *
from ._instance import *
from ._receiver import *
from ._clone import *
from ._fmt import *
