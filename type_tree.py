"""
type_tree.py
Bracket-aware tokenizer for type expressions.
Angle brackets are plain punctuation in a token stream, so `Map<K, V>` would look like two
comma-separated types. type_tree() groups every `<...>` span into an AngleGroup so that
top-level scans (commas, declaration keywords, colons) never look inside generic arguments.
"""
from typing import Callable, List, Optional, Union, TYPE_CHECKING

from errors import ErrorKind
from token_model import Punct, Spacing, TokenTree, is_punct
if TYPE_CHECKING:
    from diagnostics import Diagnostics


class AngleGroup:
    """`<children>`; close is None when the source never closed the group."""
    def __init__(self, open: Punct, children: List['TypeTreeNode'], close: Optional[Punct]):
        self.open = open
        self.children = children
        self.close = close

    def __repr__(self):
        return f"AngleGroup({self.children!r}, closed={self.close is not None})"


TypeTreeNode = Union[TokenTree, AngleGroup]


def _is_arrow_head(tokens: List[TokenTree], i: int) -> bool:
    if i == 0:
        return False
    prev = tokens[i - 1]
    return is_punct(prev, '-') and prev.spacing is Spacing.JOINT


def type_tree(tokens: List[TokenTree], diagnostics: 'Diagnostics') -> List[TypeTreeNode]:
    """
    Groups angle-bracketed spans of a flat token list.
    An unmatched `>` is reported and kept as a plain token; groups still open at the end are
    reported at their `<` and closed without a closing token.
    """
    stack = []
    current: List[TypeTreeNode] = []
    for i, tt in enumerate(tokens):
        if is_punct(tt, '<'):
            stack.append((tt, current))
            current = []
        elif is_punct(tt, '>') and not _is_arrow_head(tokens, i):
            if stack:
                open_, parent = stack.pop()
                parent.append(AngleGroup(open_, current, tt))
                current = parent
            else:
                diagnostics.report_error(tt.span, ErrorKind.UNCLOSED_OR_UNMATCHED_BRACKET_GROUP, "Unexpected >")
                current.append(tt)
        else:
            current.append(tt)
    while stack:
        open_, parent = stack.pop()
        diagnostics.report_error(open_.span, ErrorKind.UNCLOSED_OR_UNMATCHED_BRACKET_GROUP, "Unclosed group")
        parent.append(AngleGroup(open_, current, None))
        current = parent
    return current


def un_type_tree(tree: List[TypeTreeNode], out: List[TokenTree],
                 inner: Callable[[List[TypeTreeNode], List[TokenTree]], None]) -> None:
    """Writes the tree back out as tokens, delegating the contents of each AngleGroup to inner."""
    for node in tree:
        if isinstance(node, AngleGroup):
            out.append(node.open)
            inner(node.children, out)
            if node.close is not None:
                out.append(node.close)
        else:
            out.append(node)


def un_tree_type(tree: List[TypeTreeNode], out: List[TokenTree]) -> None:
    un_type_tree(tree, out, un_tree_type)


def flatten_type_tree(tree: List[TypeTreeNode]) -> List[TokenTree]:
    out: List[TokenTree] = []
    un_tree_type(tree, out)
    return out
