"""
Softmax (multinomial logistic) regression over hashed word features.
"""

import logging
from typing import Dict, Mapping, Sequence

import numpy as np

from .optimizer import GradientDescent, MultiClassTextOptimizer, TrainingSet, extract_features, training_matrix

logger = logging.getLogger(__name__)


def softmax(scores: np.ndarray) -> np.ndarray:
    """Row-wise softmax of a (n_samples, n_classes) score matrix."""
    shifted = np.exp(scores - scores.max(axis=1, keepdims=True))
    return shifted / shifted.sum(axis=1, keepdims=True)


def _coefficient_length(coefficients: Mapping[float, np.ndarray]) -> int:
    lengths = {len(vector) for vector in coefficients.values()}
    if len(lengths) != 1:
        raise ValueError(f"Coefficient vectors differ in length: {sorted(lengths)}")
    return lengths.pop()


def probabilities(words: Sequence[str], coefficients: Mapping[float, np.ndarray]) -> Dict[float, float]:
    """Probability of every class for a tokenized text."""
    classes = sorted(coefficients)
    features = extract_features([words], _coefficient_length(coefficients))
    weights = np.vstack([coefficients[label] for label in classes])
    p = softmax(features @ weights.T)[0]
    return {label: float(p[i]) for i, label in enumerate(classes)}


class SoftmaxGradientDescent(GradientDescent, MultiClassTextOptimizer):
    """
    Multi-class softmax regression trained by gradient descent.

    Every class of the training set needs its own coefficient vector, and all
    vectors must have the same length.
    """

    def optimize(self, training_set: TrainingSet, coefficients: Mapping[float, np.ndarray]) -> None:
        if not training_set:
            raise ValueError("Training set is empty")
        if set(coefficients) != set(training_set):
            raise ValueError(
                f"Coefficient classes {sorted(coefficients)} do not match "
                f"training classes {sorted(training_set)}"
            )

        classes = sorted(training_set)
        X, y = training_matrix(training_set, _coefficient_length(coefficients))
        targets = (y[:, np.newaxis] == np.asarray(classes)[np.newaxis, :]).astype(np.float64)
        # Shape: (n_classes, n_features)
        weights = np.vstack([coefficients[label] for label in classes]).astype(np.float64)
        rng = np.random.default_rng(self.random_state)

        for epoch in range(self.epochs):
            for batch in self._batches(len(y), rng):
                predicted = softmax(X[batch] @ weights.T)
                gradient = (predicted - targets[batch]).T @ X[batch] / len(batch) + self.l2 * weights
                weights -= self.learning_rate * gradient

            if logger.isEnabledFor(logging.DEBUG):
                p = np.clip(softmax(X @ weights.T), 1e-12, 1.0)
                loss = -np.mean(np.sum(targets * np.log(p), axis=1))
                logger.debug("Epoch %d, cross entropy %.4f", epoch + 1, loss)

        for i, label in enumerate(classes):
            coefficients[label][:] = weights[i]
