"""Metrics for evaluating trained perceptron models.

This package contains metric implementations for accuracy, error rate and
training convergence.
"""
