"""
Conversion of old style tag filters into tag expressions.

Each filter is AND-ed with the others. Inside a filter, comma separated tags
are OR-ed and a leading ``~`` negates the whole filter::

    ['@smoke,@fast', '~@slow']  ->  "anyOf('@smoke','@fast') && not('@slow')"

A filter that already looks like a tag expression (contains ``(``) is
returned as is and all other filters are dropped.
"""

import logging

logger = logging.getLogger(__name__)


def _quote(tag):
    return "'{}'".format(tag)


def from_karate_options_tags(tags):
    if isinstance(tags, str):
        tags = [tags]

    if not tags:
        return None

    for tag_filter in tags:
        if tag_filter is not None and '(' in tag_filter:
            logger.debug("using tag expression as is: %r", tag_filter)
            return tag_filter

    fragments = []

    for tag_filter in tags:
        tag_filter = (tag_filter or '').strip()

        if tag_filter.startswith('~'):
            fragments.append("not({})".format(_quote(tag_filter[1:])))
        else:
            alternatives = [i for i in tag_filter.split(',') if i]
            if not alternatives:
                # anyOf() never matches, so a blank filter deselects every scenario
                logger.debug("blank tag filter %r will not match any scenario", tag_filter)
            fragments.append("anyOf({})".format(",".join(_quote(i) for i in alternatives)))

    expr = " && ".join(fragments)
    logger.debug("converted tag filters %r to %r", list(tags), expr)

    return expr
