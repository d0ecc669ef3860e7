"""
algoflow: workflow-driven strategy evaluation and backtesting for Indian brokers.
"""

__version__ = "0.1.0"
