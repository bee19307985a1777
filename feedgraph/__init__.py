"""
Exponential-weights learning with stochastically selected feedback graphs.
"""

__version__ = "0.1.0"
