"""
Concrete ModelTrainEngine implementations.

This module is an organizational namespace only; engines are resolved
through cypred.training.engines.registry.
"""
