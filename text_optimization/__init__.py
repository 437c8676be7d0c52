"""
Gradient descent optimizers for text classification.

Main Components:
- TextOptimizer / MultiClassTextOptimizer: optimizer interfaces
- LogisticGradientDescent: binary logistic regression
- SoftmaxGradientDescent: multi-class softmax regression
"""

from .logistic import LogisticGradientDescent, probability
from .optimizer import (
    GradientDescent,
    MultiClassTextOptimizer,
    TextOptimizer,
    extract_features,
    normalize_words,
)
from .softmax import SoftmaxGradientDescent, probabilities

__all__ = [
    "TextOptimizer",
    "MultiClassTextOptimizer",
    "GradientDescent",
    "LogisticGradientDescent",
    "SoftmaxGradientDescent",
    "extract_features",
    "normalize_words",
    "probability",
    "probabilities",
]
