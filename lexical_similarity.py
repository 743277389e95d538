#!/usr/bin/env python3
"""TF-IDF + similitud coseno sobre texto libre de perfiles y vacantes."""

import math
from collections import Counter
from typing import Dict, List, Sequence

from text_normalizer import tokenize

Vector = Dict[str, float]


def term_frequency(tokens: Sequence[str]) -> Vector:
    total = len(tokens)
    if total == 0:
        return {}
    return {term: count / total for term, count in Counter(tokens).items()}


def inverse_document_frequency(documents: Sequence[Sequence[str]]) -> Vector:
    num_docs = len(documents)
    if num_docs == 0:
        return {}
    doc_freq: Counter = Counter()
    for doc in documents:
        doc_freq.update(set(doc))
    # términos ausentes de todo documento no aparecen aquí y valen 0
    return {term: math.log(num_docs / df) for term, df in doc_freq.items() if df > 0}


def tfidf_vector(tokens: Sequence[str], idf: Vector) -> Vector:
    vector: Vector = {}
    for term, tf in term_frequency(tokens).items():
        weight = tf * idf.get(term, 0.0)
        if weight:
            vector[term] = weight
    return vector


def cosine_similarity(v1: Vector, v2: Vector) -> float:
    # orden fijo de términos: el resultado es exactamente simétrico
    dot = sum(v1[term] * v2[term] for term in sorted(v1.keys() & v2.keys()))
    norm1 = math.sqrt(sum(val * val for val in v1.values()))
    norm2 = math.sqrt(sum(val * val for val in v2.values()))
    denominator = norm1 * norm2
    if denominator == 0:
        return 0.0
    return dot / denominator


class LexicalSimilarityEngine:
    def __init__(self, low_confidence_score: float = 0.5):
        self.low_confidence_score = low_confidence_score

    def score_candidates(self, volunteer_text: str, candidate_texts: Sequence[str]) -> List[float]:
        volunteer_tokens = tokenize(volunteer_text)
        if not volunteer_tokens:
            # perfil incompleto: score constante en vez de colapsar el ranking
            return [self.low_confidence_score for _ in candidate_texts]

        candidate_tokens = [tokenize(text) for text in candidate_texts]
        idf = inverse_document_frequency([volunteer_tokens, *candidate_tokens])
        volunteer_vector = tfidf_vector(volunteer_tokens, idf)
        return [cosine_similarity(volunteer_vector, tfidf_vector(tokens, idf)) for tokens in candidate_tokens]
