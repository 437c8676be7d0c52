"""
Logistic regression over hashed word features.
"""

import logging
from typing import Sequence

import numpy as np

from .optimizer import GradientDescent, TextOptimizer, TrainingSet, extract_features, training_matrix

logger = logging.getLogger(__name__)

CLASSES = (0.0, 1.0)


def sigmoid(z):
    return 1.0 / (1.0 + np.exp(-np.clip(z, -500, 500)))


def probability(words: Sequence[str], coefficients: np.ndarray) -> float:
    """Probability that a tokenized text belongs to class 1."""
    features = extract_features([words], len(coefficients))[0]
    return float(sigmoid(features @ coefficients))


class LogisticGradientDescent(GradientDescent, TextOptimizer):
    """
    Binary logistic regression trained by gradient descent.

    The training set must have exactly the classes 0.0 and 1.0.
    """

    def optimize(self, training_set: TrainingSet, coefficients: np.ndarray) -> None:
        if set(training_set) != set(CLASSES):
            raise ValueError(f"Expected classes {CLASSES}, got {sorted(training_set)}")

        X, y = training_matrix(training_set, len(coefficients))
        rng = np.random.default_rng(self.random_state)

        for epoch in range(self.epochs):
            for batch in self._batches(len(y), rng):
                predicted = sigmoid(X[batch] @ coefficients)
                gradient = X[batch].T @ (predicted - y[batch]) / len(batch) + self.l2 * coefficients
                coefficients -= self.learning_rate * gradient

            if logger.isEnabledFor(logging.DEBUG):
                p = np.clip(sigmoid(X @ coefficients), 1e-12, 1 - 1e-12)
                loss = -np.mean(y * np.log(p) + (1 - y) * np.log(1 - p))
                logger.debug("Epoch %d, log loss %.4f", epoch + 1, loss)
