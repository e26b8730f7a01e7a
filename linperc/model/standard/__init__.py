"""Single perceptron estimators."""
