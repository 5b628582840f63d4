"""
token_transform_pipeline.py
Defines a pipeline for transforming token streams using a sequence of TokenTransform objects.
"""
from typing import List, Protocol
from token_model import TokenTree

class TokenTransform(Protocol):
    def transform(self, tokens: List[TokenTree]) -> List[TokenTree]:
        ...

def run_token_transform_pipeline(
    tokens: List[TokenTree],
    transforms: List[TokenTransform]
) -> List[TokenTree]:
    """
    Applies a sequence of TokenTransform objects to a token stream.
    Each transform takes a token stream and returns a new one.
    """
    for transform in transforms:
        tokens = transform.transform(tokens)
    return tokens
