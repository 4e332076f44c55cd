"""Tweet Sentiment API - tweets in, keyword emotion scores out."""

__version__ = "1.0.0"
