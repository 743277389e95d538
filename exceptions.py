#!/usr/bin/env python3


class MatchingEngineError(Exception):
    pass


class FetchFailed(MatchingEngineError):
    """El almacén de vacantes no pudo entregar candidatos."""

    def __init__(self, message: str, predicates_key: str = ""):
        super().__init__(message)
        self.predicates_key = predicates_key
