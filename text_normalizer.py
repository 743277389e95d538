#!/usr/bin/env python3
import re
import unicodedata
from typing import Any, Iterable, List, Union

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
MIN_TOKEN_LENGTH = 3


def normalize_text(text: Any) -> str:
    if not isinstance(text, str):
        text = str(text or "")
    # lower, strip, quitar acentos
    text = text.strip().lower()
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    # colapsar espacios
    text = " ".join(text.split())
    return text


def parse_skills(raw: Union[str, Iterable[Any], None]) -> List[str]:
    """Convierte "Ensino, Comunicação" (o una lista) a skills normalizadas sin duplicados."""
    if raw is None:
        return []
    parts: List[str] = []
    items = [raw] if isinstance(raw, str) else raw
    for item in items:
        if item is None:
            continue
        parts.extend(str(item).split(","))
    skills: List[str] = []
    for part in parts:
        skill = normalize_text(part)
        if skill and skill not in skills:
            skills.append(skill)
    return skills


def tokenize(text: Any) -> List[str]:
    text = _NON_ALNUM.sub(" ", normalize_text(text))
    return [tok for tok in text.split() if len(tok) >= MIN_TOKEN_LENGTH]
