import pytest

from tagsel import Tag, TagSet


def make_tags(*annotations):
    return [Tag.parse(a, line=i + 1) for i, a in enumerate(annotations)]


@pytest.fixture
def tag_set():
    return TagSet(make_tags('@smoke', '@fast', '@env=dev,qa', '@owner=alice'))
