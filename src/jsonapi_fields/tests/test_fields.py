import dataclasses

import pytest

from ..deferred import Deferred
from ..exceptions import InvalidDeclarationError
from ..fields import (
    Attribute,
    DateAttribute,
    Field,
    FieldKind,
    Relationship,
    RelationshipType,
    ToManyRelationship,
    ToOneRelationship,
    URLAttribute,
)


class Author:
    pass


class Comment:
    pass


class TestField:
    def test_defaults(self):
        f = Attribute()
        assert f.serialized_name_override is None
        assert f.is_read_only is False
        assert f.kind is FieldKind.ATTRIBUTE

    def test_has_no_name(self):
        assert not hasattr(Attribute(), "name")

    def test_serialize_as(self):
        f = Attribute()
        g = f.serialize_as("foo")
        assert g.serialized_name_override == "foo"
        assert f.serialized_name_override is None

    def test_serialize_as_overwrites(self):
        f = Attribute().serialize_as("foo").serialize_as("bar")
        assert f.serialized_name_override == "bar"

    @pytest.mark.parametrize("n", [1, 2, 5])
    def test_read_only_idempotent(self, n):
        f = Attribute()
        for _ in range(n):
            f = f.read_only()
        assert f.is_read_only is True

    def test_chaining_keeps_variant(self):
        f = DateAttribute("yyyy-MM-dd").serialize_as("date").read_only()
        assert isinstance(f, DateAttribute)
        assert f.format == "yyyy-MM-dd"
        assert f.serialized_name_override == "date"
        assert f.is_read_only

    def test_immutable(self):
        f = Attribute()
        with pytest.raises(dataclasses.FrozenInstanceError):
            f.is_read_only = True  # type: ignore

    @pytest.mark.parametrize("class_", [Field, Relationship])
    def test_abstract(self, class_):
        with pytest.raises(TypeError):
            if class_ is Relationship:
                class_(Author)
            else:
                class_()


class TestURLAttribute:
    def test_without_base(self):
        f = URLAttribute()
        assert f.kind is FieldKind.URL_ATTRIBUTE
        assert f.base_url is None
        assert f.resolve("/foo") == "/foo"

    def test_resolve(self):
        f = URLAttribute("https://example.com/api/")
        assert f.resolve("articles/1") == "https://example.com/api/articles/1"
        assert f.resolve("/images/a.png") == "https://example.com/images/a.png"
        assert f.resolve("https://cdn.example.net/x") == "https://cdn.example.net/x"

    def test_builders_keep_base(self):
        f = URLAttribute("https://example.com/").read_only()
        assert f.base_url == "https://example.com/"


class TestDateAttribute:
    def test_default_format(self):
        f = DateAttribute()
        assert f.kind is FieldKind.DATE_ATTRIBUTE
        assert f.format == "yyyy-MM-dd'T'HH:mm:ss.SSSZZZZZ"

    def test_invalid_format(self):
        with pytest.raises(InvalidDeclarationError):
            DateAttribute("yyyy-QQ")

    def test_parse_and_render(self):
        import datetime

        f = DateAttribute("yyyy-MM-dd")
        assert f.parse("2015-03-01") == datetime.datetime(2015, 3, 1)
        assert f.render(datetime.date(2015, 3, 1)) == "2015-03-01"


class TestRelationship:
    def test_to_one(self):
        f = ToOneRelationship(Author)
        assert f.kind is FieldKind.TO_ONE
        assert f.type is RelationshipType.TO_ONE
        assert f.linked_type is Author

    def test_to_many(self):
        f = ToManyRelationship(Comment)
        assert f.kind is FieldKind.TO_MANY
        assert f.type is RelationshipType.TO_MANY
        assert f.linked_type is Comment

    def test_deferred(self):
        calls = []

        def yielder():
            calls.append(1)
            return Comment

        f = ToManyRelationship(Deferred(yielder))
        assert calls == []
        assert f.linked_type is Comment
        assert f.linked_type is Comment
        assert calls == [1]

    def test_builders_keep_target(self):
        f = ToOneRelationship(Author).serialize_as("writer").read_only()
        assert isinstance(f, ToOneRelationship)
        assert f.linked_type is Author
        assert f.serialized_name_override == "writer"
