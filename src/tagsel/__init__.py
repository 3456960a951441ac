from .legacy import from_karate_options_tags
from .tag import Tag, to_result_list
from .tagexpr import TagExpressionError
from .tagset import EMPTY, TagSet, Values, merge

__all__ = [
    'EMPTY',
    'Tag',
    'TagExpressionError',
    'TagSet',
    'Values',
    'from_karate_options_tags',
    'merge',
    'to_result_list',
]
