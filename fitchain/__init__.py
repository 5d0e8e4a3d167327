"""Calorie tracker mini-app backend with World ID sign-in."""

__version__ = "0.1.0"
