"""Text processing helpers shared by lexical scoring and boosting."""
import re

# Split on anything that is not a letter or digit (underscore included)
_TOKEN_SPLIT = re.compile(r'[\W_]+')

# Minimum token length kept by the tokenizer (tokens of length <= 2 are dropped)
MIN_TOKEN_LENGTH = 3

_STOPWORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'as', 'is', 'was', 'are', 'were', 'be',
    'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did', 'will',
    'would', 'should', 'could', 'may', 'might', 'must', 'can', 'i', 'you',
    'he', 'she', 'it', 'we', 'they', 'my', 'your', 'his', 'her', 'its',
    'our', 'their', 'what', 'when', 'where', 'who', 'why', 'how',
})


def tokenize(text: str) -> list[str]:
    """Lower-case ``text`` and split it into alphanumeric tokens longer than two characters.

    Order and duplicates are preserved; term frequency depends on them.
    """
    return [t for t in _TOKEN_SPLIT.split(text.lower()) if len(t) >= MIN_TOKEN_LENGTH]


def extract_keywords(text: str) -> list[str]:
    """Tokens of ``text`` with stopwords removed."""
    return [t for t in tokenize(text) if t not in _STOPWORDS]


def exact_match_boost(content: str, query: str, base_score: float) -> float:
    """
    Boost ``base_score`` by the fraction of query keywords found verbatim in ``content``.

    The result is ``base_score * (1 + matched / total)``, so a perfect keyword
    match doubles the score. A query with no keywords leaves the score unchanged.
    """
    query_keywords = extract_keywords(query)
    if not query_keywords:
        return base_score

    content_keywords = set(extract_keywords(content))
    matched = sum(1 for keyword in query_keywords if keyword in content_keywords)
    return base_score * (1.0 + matched / len(query_keywords))
