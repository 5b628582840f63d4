"""
generics.py
Re-projects a lifted declaration's generic parameters for its use site:
`struct Inner<'a, T: Clone, const N: usize>` is referenced as `Inner<'a, T, N>`.
"""
from typing import List

from declaration_model import GenericParam, GenericParamList
from token_model import Delimiter, Group, Punct, TokenTree


def reproject_generics(generics: GenericParamList) -> List[TokenTree]:
    """
    Bounds and defaults are dropped. A prefix is kept only when it is punctuation (the `'` of a
    lifetime); identifier prefixes such as `const` are not part of a reference.
    """
    params = []
    for param, comma in generics.params:
        prefix = param.tk_prefix if isinstance(param.tk_prefix, Punct) else None
        params.append((GenericParam(param.name, prefix), comma))
    projected = GenericParamList(generics.tk_l_bracket, params, generics.tk_r_bracket)
    return [Group(Delimiter.NONE, projected.to_tokens(), generics.tk_l_bracket.span)]
