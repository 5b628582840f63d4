"""
CollapseTransparentGroupsTransform: Splices the contents of every transparent (Delimiter.NONE) group
into its parent, at every nesting level. Delimited groups are rebuilt around their collapsed
contents and keep their own spans.
"""
from typing import List
from token_model import Delimiter, Group, TokenTree

def collapse_transparent_groups(tokens: List[TokenTree]) -> List[TokenTree]:
    ret = []
    for tt in tokens:
        if isinstance(tt, Group) and tt.delimiter is Delimiter.NONE:
            ret.extend(collapse_transparent_groups(tt.stream))
        elif isinstance(tt, Group):
            ret.append(Group(tt.delimiter, collapse_transparent_groups(tt.stream), tt.span, tt.close_span))
        else:
            ret.append(tt)
    return ret

class CollapseTransparentGroupsTransform:
    def transform(self, tokens: List[TokenTree]) -> List[TokenTree]:
        return collapse_transparent_groups(tokens)
