"""
Mandu Text Template Engine

A tiny embeddable template engine. Text is copied as is, backtick
delimited code segments are evaluated and replaced by their output.
"""

__version__ = "0.1.0"


from ._error import *
from ._lexer import *
from ._value import *
from ._arena import *
from ._store import *
from ._skip import *
from ._eval import *
from ._soup import *
