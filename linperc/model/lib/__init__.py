"""Algorithmic building blocks shared by the perceptron estimators."""
