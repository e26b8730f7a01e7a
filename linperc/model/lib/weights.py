"""weights.py: Initial weight vectors for the perceptron trainer."""
import numpy as np


class WeightInitializer:
    """Produces initial weight vectors.

    Either draws every component uniformly from (-0.5, 0.5) or fills every
    component with a constant. The bias is not part of the weight vector.
    """

    def __init__(self, randomize: bool = True, fill_value: float = 1.0):
        self.randomize = randomize
        self.fill_value = float(fill_value)

    def __call__(self, size: int, rng: np.random.Generator = None) -> np.ndarray:
        """Create a weight vector of ``size`` components.

        Args:
            size (int): Number of weights, one per active feature.
            rng (np.random.Generator): Source of randomness, required when randomizing.

        Returns:
            np.ndarray: float64 weight vector.
        """
        if self.randomize:
            if rng is None:
                raise ValueError("A random generator is required to randomize weights")
            return rng.random(size) - 0.5
        return np.full(size, self.fill_value, dtype=np.float64)

    def __repr__(self):
        if self.randomize:
            return "WeightInitializer(random)"
        return f"WeightInitializer(fill={self.fill_value})"
