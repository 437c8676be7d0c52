"""
Perceptron binary classifier.
"""

from .perceptron import (
    DEFAULT_LEARNING_RATE,
    ConvergenceError,
    LearningSample,
    Perceptron,
    sign_output,
)

__all__ = ["Perceptron", "LearningSample", "ConvergenceError", "sign_output", "DEFAULT_LEARNING_RATE"]
