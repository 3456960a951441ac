TAG_PREFIX = '@'


def remove_tag_prefix(s):
    s = str(s)
    if s.startswith(TAG_PREFIX):
        return s[1:]

    return s


class Tag:
    """
    A single scenario annotation such as ``@smoke`` or ``@env=dev,qa``.

    ``text`` is the annotation without the leading ``@``, ``name`` is the part
    before ``=`` and ``values`` are the comma separated items after it.
    Instances compare equal regardless of the source line.
    """

    __slots__ = ('_text', '_name', '_values', '_line')

    def __init__(self, text, *, name=None, values=(), line=0):
        assert isinstance(text, str), "tag text must be a string"
        assert isinstance(line, int), "tag line must be an integer"

        self._text = text
        self._name = text if name is None else name
        self._values = tuple(values)
        self._line = line

    @classmethod
    def parse(cls, annotation, line=0):
        text = remove_tag_prefix(annotation.strip())
        name, sep, rest = text.partition('=')
        values = [i for i in rest.split(',') if i] if sep else []

        return cls(text, name=name, values=values, line=line)

    @property
    def text(self):
        return self._text

    @property
    def name(self):
        return self._name

    @property
    def values(self):
        return self._values

    @property
    def line(self):
        return self._line

    def _key(self):
        return self._text, self._name, self._values

    def __eq__(self, other):
        if not isinstance(other, Tag):
            return NotImplemented

        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        return TAG_PREFIX + self._text

    def __repr__(self):
        return "Tag({!r}, line={})".format(str(self), self._line)


def to_result_list(tags):
    return [
        dict(line=tag.line, name=TAG_PREFIX + tag.text)
        for tag in tags
    ]
