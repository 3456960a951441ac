import types

from . import tagexpr
from .tag import remove_tag_prefix


def _remove_tag_prefixes(items):
    return [remove_tag_prefix(i) for i in items]


class Values:
    """
    Values attached to a single tag name, e.g. ``('dev', 'qa')`` for ``@env=dev,qa``.
    """

    __slots__ = ('_values',)

    def __init__(self, values=None):
        self._values = tuple(values) if values else ()

    @property
    def values(self):
        return self._values

    def is_present(self):
        return bool(self.values)

    def is_any_of(self, *args):
        return any(i in self.values for i in args)

    def is_all_of(self, *args):
        return all(i in self.values for i in args)

    def is_only(self, *args):
        # duplicates on either side are ignored
        return set(self.values) == set(args)

    def is_each(self, predicate):
        if not callable(predicate):
            return False

        for value in self.values:
            if predicate(value) is not True:
                return False

        return True

    def __repr__(self):
        return "Values({!r})".format(self.values)


class TagSet:
    """
    Tags of a single scenario indexed by text and by name.

    ``tags`` keeps the tag texts in input order, ``tag_values`` maps each tag
    name to its values, with the last tag winning when several share a name.
    A leading ``@`` is optional in every query.
    """

    __slots__ = ('_original', '_tags', '_tag_values', '_env')

    def __init__(self, tags=None):
        self._original = tuple(tags) if tags else ()
        self._tags = tuple(tag.text for tag in self._original)
        self._tag_values = types.MappingProxyType(dict((tag.name, tag.values) for tag in self._original))
        self._env = tagexpr.Environment(self)

    @property
    def original(self):
        return self._original

    @property
    def tags(self):
        return self._tags

    @property
    def tag_values(self):
        return self._tag_values

    def __iter__(self):
        return iter(self.original)

    def __len__(self):
        return len(self.original)

    def __repr__(self):
        return "TagSet({!r})".format(list(self.tags))

    def evaluate(self, selector):
        if selector is None:
            return True

        return tagexpr.compile(selector)(self._env) is True

    def contains(self, tag_text):
        return remove_tag_prefix(tag_text) in self.tags

    def values_for(self, name):
        return Values(self.tag_values.get(remove_tag_prefix(name)))

    def any_of(self, candidates):
        return not set(self.tags).isdisjoint(_remove_tag_prefixes(candidates))

    def all_of(self, candidates):
        return set(self.tags).issuperset(_remove_tag_prefixes(candidates))

    def not_(self, candidates):
        return not self.any_of(candidates)


EMPTY = TagSet()


def merge(*lists):
    tags = set()
    for tag_list in lists:
        if tag_list is not None:
            tags.update(tag_list)

    return TagSet(tags)
