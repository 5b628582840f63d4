"""
HoistInnerAttributesTransform: Moves inner attributes (`#![...]` at the start of a body) out in front
of the declaration as outer attributes, since the declaration parser only accepts outer ones.
"""
from typing import List
from token_model import Delimiter, Group, Punct, Spacing, TokenTree, is_group, is_punct

def split_inner_attributes(stream: List[TokenTree]):
    """Returns (hoisted outer-attribute tokens, rest of the stream) for one body."""
    hoisted = []
    i = 0
    while i + 2 < len(stream) and is_punct(stream[i], '#') and is_punct(stream[i + 1], '!') \
            and is_group(stream[i + 2], Delimiter.BRACKET):
        hoisted.extend([Punct('#', Spacing.ALONE, stream[i].span), stream[i + 2]])
        i += 3
    return hoisted, stream[i:]

class HoistInnerAttributesTransform:
    def transform(self, tokens: List[TokenTree]) -> List[TokenTree]:
        prefix = []
        ret = []
        for tt in tokens:
            if is_group(tt, Delimiter.BRACE):
                hoisted, rest = split_inner_attributes(tt.stream)
                prefix.extend(hoisted)
                ret.append(Group(tt.delimiter, rest, tt.span, tt.close_span))
            else:
                ret.append(tt)
        return prefix + ret
