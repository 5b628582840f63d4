"""
AppendTypeAliasTerminatorTransform: Appends the `;` a type alias needs when it was written without one.
Lifted type aliases (`field: type = Vec<u8>`) never carry their own terminator.
"""
from typing import List
from token_model import Punct, TokenTree, is_ident, is_punct

DECLARATION_KEYWORDS = ("struct", "enum", "union", "type", "fn", "mod", "trait")

def is_type_alias(tokens: List[TokenTree]) -> bool:
    """True if the first declaration keyword at the top level of the stream is `type`."""
    for tt in tokens:
        if is_ident(tt) and tt.text in DECLARATION_KEYWORDS:
            return tt.text == "type"
    return False

class AppendTypeAliasTerminatorTransform:
    def transform(self, tokens: List[TokenTree]) -> List[TokenTree]:
        if is_type_alias(tokens) and not is_punct(tokens[-1], ';'):
            return tokens + [Punct(';')]
        return tokens
