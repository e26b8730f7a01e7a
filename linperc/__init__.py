"""Linear perceptron classifiers.

This package contains the perceptron training algorithms, the random-subspace
perceptron ensemble, metrics, datasets, and experiment orchestration tools for
evaluating linear binary classifiers with k-fold cross-validation.
"""
