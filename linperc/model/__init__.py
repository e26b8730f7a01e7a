"""Model implementations for linear binary classification.

This package contains the perceptron building blocks (weight initialisation,
standardisation, training, cross-validated update selection), the single
perceptron estimator and the random-subspace perceptron ensemble.
"""
