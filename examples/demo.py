#!/usr/bin/env python3
"""
Demo script for the gzip KNN classifier.

This script builds a small synthetic news corpus with four topics and
demonstrates k-nearest-neighbors classification using gzip compression
distance.
"""

import random

import numpy as np

from gzip_knn import GzipKNNClassifier

TOPICS = {
    'world': ["minister", "election", "embassy", "ceasefire", "parliament", "summit"],
    'sports': ["match", "goal", "coach", "season", "tournament", "striker"],
    'business': ["shares", "profit", "quarter", "investors", "merger", "earnings"],
    'science': ["probe", "researchers", "telescope", "genome", "satellite", "study"],
}
FILLER = ["the", "a", "on", "after", "said", "new", "in", "with", "for", "report"]


def create_mock_article(topic: str, rng: random.Random, n_words: int = 30) -> str:
    """
    Create a mock headline-and-summary string for a topic.

    Parameters
    ----------
    topic : str
        One of the keys of TOPICS
    rng : random.Random
        Source of randomness
    n_words : int
        Number of words to generate

    Returns
    -------
    str
        Generated article text
    """
    if topic not in TOPICS:
        raise ValueError(f"Unknown topic: {topic}")

    words = []
    for _ in range(n_words):
        pool = TOPICS[topic] if rng.random() < 0.4 else FILLER
        words.append(rng.choice(pool))
    return " ".join(words)


def generate_data(n_samples_per_class: int, seed: int) -> tuple[list[str], list[int]]:
    """Generate articles and zero-based labels for each topic."""
    rng = random.Random(seed)
    X = []
    y = []

    for label, topic in enumerate(TOPICS):
        for i in range(n_samples_per_class):
            X.append(create_mock_article(topic, rng, n_words=25 + i % 10))
            y.append(label)

    return X, y


def main():
    """Run the demo."""
    print("Gzip KNN Classifier Demo")
    print("=" * 40)

    X_train, y_train = generate_data(n_samples_per_class=25, seed=1)
    X_test, y_test = generate_data(n_samples_per_class=5, seed=2)
    names = list(TOPICS)

    print(f"Training set: {len(X_train)} samples")
    print(f"Test set: {len(X_test)} samples")
    print(f"Classes: {names}")
    print()

    classifier = GzipKNNClassifier(k=5)
    classifier.fit(X_train, y_train)
    print("✓ Classifier fitted successfully")
    print()

    y_pred = classifier.predict(X_test)
    accuracy = np.mean(np.array(y_pred) == np.array(y_test))

    print("Results:")
    print("-" * 20)
    print(f"Accuracy: {accuracy:.2%}")
    print()

    print("Detailed Results:")
    for i, (true_label, pred_label) in enumerate(zip(y_test, y_pred)):
        status = "✓" if true_label == pred_label else "✗"
        print(f"Sample {i+1}: True={names[true_label]}, Predicted={names[pred_label]} {status}")

    print()
    print("Classifier Parameters:")
    for key, value in classifier.get_params().items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
