"""
Gradient descent optimizers for text classification.

A training set maps a class label to the texts of that class, each text
already broken into words. Words are normalized and hashed into a fixed number
of columns, so the length of the coefficient vector decides the feature space.
Column 0 is a bias term that is always 1.
"""

from abc import ABC, abstractmethod
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from sklearn.feature_extraction import FeatureHasher

from text_utils import is_numeric_msisdn, keep_letters_and_digits, remove_punctuations_and_newline

TrainingSet = Mapping[float, Sequence[Sequence[str]]]

NUMBER_TOKEN = "<number>"


class TextOptimizer(ABC):
    """Optimizes a single coefficient vector, e.g. for logistic regression."""

    @abstractmethod
    def optimize(self, training_set: TrainingSet, coefficients: np.ndarray) -> None:
        """
        Fit ``coefficients`` in place so that they classify ``training_set``.

        Args:
            training_set: class label -> texts broken into words
            coefficients: float vector, updated in place
        """


class MultiClassTextOptimizer(ABC):
    """Optimizes one coefficient vector per class, e.g. for softmax regression."""

    @abstractmethod
    def optimize(self, training_set: TrainingSet, coefficients: Mapping[float, np.ndarray]) -> None:
        """
        Fit the per-class ``coefficients`` in place so that they classify
        ``training_set``.

        Args:
            training_set: class label -> texts broken into words
            coefficients: class label -> float vector, each updated in place
        """


def normalize_words(words: Sequence[str]) -> List[str]:
    """Lower-case words, strip punctuation and fold long numbers into one token."""
    tokens = []
    for word in words:
        token = keep_letters_and_digits(remove_punctuations_and_newline(word)).strip().lower()
        if not token:
            continue
        tokens.append(NUMBER_TOKEN if is_numeric_msisdn(token) else token)
    return tokens


def extract_features(texts: Sequence[Sequence[str]], n_features: int) -> np.ndarray:
    """
    Turn tokenized texts into a dense feature matrix.

    Args:
        texts: texts broken into words
        n_features: number of columns, bias column included

    Returns:
        Array of shape (len(texts), n_features)
    """
    if n_features < 2:
        raise ValueError(f"Need at least 2 features (bias + 1 hashed), got {n_features}")

    features = np.ones((len(texts), n_features))
    if len(texts) == 0:
        return features
    hasher = FeatureHasher(n_features=n_features - 1, input_type='string', alternate_sign=False)
    features[:, 1:] = hasher.transform(normalize_words(words) for words in texts).toarray()
    return features


def training_matrix(training_set: TrainingSet, n_features: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Stack every text of every class into one feature matrix.

    Classes are visited in sorted order, so the row order does not depend on
    the mapping's insertion order.

    Returns:
        Tuple of (features, labels)
    """
    texts = []
    labels = []
    for label in sorted(training_set):
        for words in training_set[label]:
            texts.append(words)
            labels.append(label)
    if not texts:
        raise ValueError("Training set contains no texts")
    return extract_features(texts, n_features), np.asarray(labels, dtype=np.float64)


class GradientDescent:
    """
    Shared settings for the gradient descent optimizers.

    ``batch_size=1`` gives stochastic gradient descent, larger values give
    mini-batch gradient descent and ``batch_size=None`` uses the whole
    training set for every step.

    Args:
        learning_rate: step size
        epochs: number of passes over the training set
        batch_size: samples per gradient step
        l2: L2 regularization strength
        random_state: seed for shuffling the samples every epoch
    """

    def __init__(
        self,
        learning_rate: float = 0.1,
        epochs: int = 100,
        batch_size: Optional[int] = 1,
        l2: float = 0.0,
        random_state: Optional[int] = None,
    ):
        if learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {learning_rate}")
        if epochs < 1:
            raise ValueError(f"epochs must be at least 1, got {epochs}")
        if batch_size is not None and batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        if l2 < 0:
            raise ValueError(f"l2 must be non-negative, got {l2}")
        self.learning_rate = learning_rate
        self.epochs = epochs
        self.batch_size = batch_size
        self.l2 = l2
        self.random_state = random_state

    def _batches(self, n_samples: int, rng: np.random.Generator) -> Iterator[np.ndarray]:
        order = rng.permutation(n_samples)
        size = n_samples if self.batch_size is None else self.batch_size
        for start in range(0, n_samples, size):
            yield order[start:start + size]
