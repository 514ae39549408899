"""Asset graph service.

Classes (attribute templates), Ativos (nodes of a class) and Vinculos (typed
directed links between ativos), kept referentially consistent.
"""

__version__ = "0.1.0"
