"""
Tweet text cleanup

Links carry no sentiment and confuse keyword extraction, so they are
stripped before the corpus is sent for analysis.
"""

import re

# A link runs until whitespace or a bracket, so "(http://x.co)" and
# "link:https://t.co/a" are both caught.
LINK_PATTERN = re.compile(r"(?:https?://|www\.|pic\.twitter\.com/)[^\s()<>\[\]]*", re.IGNORECASE)


def is_link(word: str) -> bool:
    """True if `word` contains a link anywhere in it."""
    return bool(LINK_PATTERN.search(word))


def remove_links(text: str) -> list[str]:
    """
    Split text into words with links removed.

    A word that is only a link (or a link wrapped in punctuation) is dropped.
    Otherwise the link is cut out and the rest of the word kept.
    """
    words = []
    for word in text.split():
        stripped = LINK_PATTERN.sub("", word)
        if stripped != word and not any(c.isalnum() for c in stripped):
            continue
        words.append(stripped)
    return words


def preprocess_tweets(tweets: list[str]) -> list[str]:
    """
    Clean each tweet for analysis.

    Links are removed and whitespace is collapsed. The output has one entry
    per input tweet, in the same order.
    """
    return [" ".join(remove_links(tweet)) for tweet in tweets]
