import datetime
import logging

import pytest

from ..exceptions import InvalidDeclarationError, ValueConversionError
from ..fields import (
    Attribute,
    DateAttribute,
    FieldKind,
    RelationshipType,
    ToManyRelationship,
    ToOneRelationship,
    URLAttribute,
)


class Author:
    pass


class Comment:
    pass


@pytest.fixture
def target():
    from ..binding import fields_from_mapping

    return fields_from_mapping


class TestFieldsFromMapping:
    def test_names(self, target):
        mapping = {
            "firstName": Attribute(),
            "createdAt": DateAttribute(),
            "homePage": URLAttribute(),
        }
        result = target(mapping)
        assert len(result) == len(mapping)
        for bound in result:
            assert bound.field is mapping[bound.name]

    def test_declarations_untouched(self, target):
        decl = Attribute().serialize_as("given-name").read_only()
        (bound,) = target({"firstName": decl})
        assert bound.field == Attribute().serialize_as("given-name").read_only()
        assert bound.field.serialized_name_override == "given-name"
        assert bound.is_read_only

    def test_empty(self, target):
        assert target({}) == []

    def test_empty_name(self, target):
        with pytest.raises(InvalidDeclarationError):
            target({"": Attribute()})

    def test_not_a_field(self, target):
        with pytest.raises(InvalidDeclarationError):
            target({"a": "not a field"})

    def test_same_declaration_under_two_names(self, target):
        decl = Attribute()
        a, b = target({"a": decl, "b": decl})
        assert a.name == "a"
        assert b.name == "b"
        assert a.field is b.field

    def test_logs(self, target, caplog):
        with caplog.at_level(logging.DEBUG, logger="jsonapi_fields.binding"):
            target({"a": Attribute()})
        assert "bound 1 field(s)" in caplog.text


class TestBoundField:
    def test_serialized_name_defaults_to_name(self, target):
        (bound,) = target({"firstName": Attribute()})
        assert bound.serialized_name == "firstName"

    def test_serialized_name_override(self, target):
        (bound,) = target({"firstName": Attribute().serialize_as("a").serialize_as("given")})
        assert bound.serialized_name == "given"
        assert bound.name == "firstName"

    def test_relationship_cardinality(self, target):
        fields = {
            f.name: f
            for f in target(
                {
                    "author": ToOneRelationship(Author),
                    "comments": ToManyRelationship(Comment),
                    "title": Attribute(),
                }
            )
        }
        assert fields["author"].kind is FieldKind.TO_ONE
        assert fields["author"].relationship_type is RelationshipType.TO_ONE
        assert fields["author"].field.linked_type is Author
        assert fields["comments"].kind is FieldKind.TO_MANY
        assert fields["comments"].relationship_type is RelationshipType.TO_MANY
        assert fields["comments"].field.linked_type is Comment
        assert fields["title"].relationship_type is None
        assert fields["author"].is_relationship
        assert not fields["title"].is_relationship
        assert fields["title"].is_attribute

    def test_frozen(self, target):
        import dataclasses

        (bound,) = target({"a": Attribute()})
        with pytest.raises(dataclasses.FrozenInstanceError):
            bound.name = "b"  # type: ignore


class TestValueConversion:
    def test_date(self, target):
        (bound,) = target({"createdAt": DateAttribute()})
        value = bound.parse_value("2015-01-02T03:04:05.678+09:00")
        tz = datetime.timezone(datetime.timedelta(hours=9))
        assert value == datetime.datetime(2015, 1, 2, 3, 4, 5, 678000, tzinfo=tz)
        assert bound.render_value(value) == "2015-01-02T03:04:05.678+09:00"

    def test_date_none(self, target):
        (bound,) = target({"createdAt": DateAttribute()})
        assert bound.parse_value(None) is None
        assert bound.render_value(None) is None

    def test_date_mismatch(self, target):
        (bound,) = target({"createdAt": DateAttribute("yyyy-MM-dd")})
        with pytest.raises(ValueConversionError) as e:
            bound.parse_value("01/02/2015")
        assert e.value.field is bound
        assert '"createdAt"' in e.value.message
        assert e.value.value == "01/02/2015"
        assert "yyyy-MM-dd" in e.value.reason

    def test_date_not_a_string(self, target):
        (bound,) = target({"createdAt": DateAttribute()})
        with pytest.raises(ValueConversionError):
            bound.parse_value(12345)

    def test_date_render_not_a_date(self, target):
        (bound,) = target({"createdAt": DateAttribute()})
        with pytest.raises(ValueConversionError):
            bound.render_value("2015-01-01")

    def test_url(self, target):
        (bound,) = target({"avatar": URLAttribute("https://example.com/")})
        assert bound.parse_value("/a.png") == "https://example.com/a.png"
        assert bound.render_value("https://example.com/a.png") == "https://example.com/a.png"

    def test_plain(self, target):
        (bound,) = target({"count": Attribute()})
        assert bound.parse_value(3) == 3
        assert bound.render_value([1, 2]) == [1, 2]
