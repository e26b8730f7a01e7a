"""Ensemble estimators built from perceptrons."""
