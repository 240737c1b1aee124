from schooldocs.classification.ai_classifier import AIClassifier
from schooldocs.classification.base import BaseClassifier
from schooldocs.classification.factory import ClassifierFactory
from schooldocs.classification.heuristic import HeuristicClassifier

__all__ = ["AIClassifier", "BaseClassifier", "ClassifierFactory", "HeuristicClassifier"]
