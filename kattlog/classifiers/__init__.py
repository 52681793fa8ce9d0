# kattlog/classifiers/__init__.py
"""Page classifiers and content filters."""

from .base_classifier import BaseClassifier
from .rule_based import RuleBasedClassifier, PageClassification
from .category_filter import clean_category_name, is_valid_category_name
from .image_filter import is_valid_image_url

__all__ = [
    'BaseClassifier',
    'RuleBasedClassifier',
    'PageClassification',
    'clean_category_name',
    'is_valid_category_name',
    'is_valid_image_url',
]
