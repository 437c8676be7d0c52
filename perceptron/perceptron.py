"""
Perceptron learning rule for binary classification.

The perceptron looks for a hyperplane that puts every sample of one class on
one side and every sample of the other class on the other side. Training is
guaranteed to stop for linearly separable data; for other data it never
stops unless an epoch limit is given.

Weight adjustment rule for a misclassified sample x with desired output d:

    W += d * learning_rate * x
"""

import logging
from typing import Callable, NamedTuple, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_LEARNING_RATE = 0.22

NeuronOutput = Callable[[np.ndarray, np.ndarray], float]


class ConvergenceError(RuntimeError):
    """Training hit its epoch limit with samples still misclassified."""


class LearningSample(NamedTuple):
    """Input vector with its desired output, +1 or -1."""
    input: np.ndarray
    desired_output: float


def sign_output(inputs: np.ndarray, weights: np.ndarray) -> float:
    """Threshold neuron: +1 when the weighted sum is non-negative, -1 otherwise."""
    return 1.0 if np.dot(inputs, weights) >= 0 else -1.0


class Perceptron:
    """
    Teaches a threshold neuron to separate two classes.

    Args:
        learning_rate: step size of the weight adjustment
    """

    def __init__(self, learning_rate: float = DEFAULT_LEARNING_RATE):
        self.learning_rate = learning_rate

    def train(
        self,
        samples: Sequence[LearningSample],
        weights: np.ndarray,
        neuron_output: NeuronOutput = sign_output,
        max_epochs: Optional[int] = None,
    ) -> int:
        """
        Adjust ``weights`` in place until every sample is classified correctly.

        Args:
            samples: training samples
            weights: float weight vector, updated in place
            neuron_output: maps (input, weights) to the predicted class
            max_epochs: stop with :class:`ConvergenceError` after this many
                epochs; None trains until convergence

        Returns:
            Number of epochs it took to converge
        """
        for sample in samples:
            if len(sample.input) != len(weights):
                raise ValueError(
                    f"Sample has {len(sample.input)} features, weights have {len(weights)}"
                )

        epoch = 0
        converged = False
        while not converged:
            if max_epochs is not None and epoch >= max_epochs:
                raise ConvergenceError(f"Not converged after {epoch} epochs")
            epoch += 1
            converged = True
            for sample in samples:
                if neuron_output(sample.input, weights) != sample.desired_output:
                    # At least one sample is misclassified in this epoch
                    converged = False
                    self._adjust_weights(sample, weights)

        logger.info("Converged in %d epochs", epoch)
        return epoch

    def _adjust_weights(self, sample: LearningSample, weights: np.ndarray) -> None:
        weights += self.learning_rate * sample.desired_output * np.asarray(sample.input, dtype=np.float64)
