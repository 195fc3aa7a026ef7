import datetime

import pytest
import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ....fields import (
    Attribute,
    DateAttribute,
    FieldKind,
    ToManyRelationship,
    ToOneRelationship,
)


@pytest.fixture
def models():
    Base = orm.declarative_base()

    class Author(Base):
        __tablename__ = "authors"
        id = sa.Column(sa.Integer(), primary_key=True, nullable=False)
        name = sa.Column(sa.String(), nullable=False)
        birthday = sa.Column(sa.Date(), nullable=True)
        books = orm.relationship("Book", back_populates="author")

    class Book(Base):
        __tablename__ = "books"
        id = sa.Column(sa.Integer(), primary_key=True, nullable=False)
        title = sa.Column(sa.String(), nullable=False)
        published_at = sa.Column(sa.DateTime(timezone=True), nullable=True)
        author_id = sa.Column(sa.Integer(), sa.ForeignKey(Author.id), nullable=False)
        author = orm.relationship(Author, back_populates="books")

    orm.configure_mappers()
    return Author, Book


@pytest.fixture
def target():
    from ..core import fields_from_sqla_mapper

    return fields_from_sqla_mapper


def test_attributes(target, models):
    Author, Book = models
    fields = target(Author)
    assert set(fields) == {"name", "birthday", "books"}
    assert type(fields["name"]) is Attribute
    assert isinstance(fields["birthday"], DateAttribute)
    assert fields["birthday"].format == "yyyy-MM-dd"

    fields = target(Book)
    assert set(fields) == {"title", "published_at", "author_id", "author"}
    assert isinstance(fields["published_at"], DateAttribute)
    assert fields["published_at"].format == "yyyy-MM-dd'T'HH:mm:ss.SSSZZZZZ"
    assert type(fields["author_id"]) is Attribute


def test_relationships(target, models):
    Author, Book = models
    books = target(Author)["books"]
    assert isinstance(books, ToManyRelationship)
    assert books.kind is FieldKind.TO_MANY
    assert books.linked_type is Book

    author = target(Book)["author"]
    assert isinstance(author, ToOneRelationship)
    assert author.linked_type is Author


def test_include_primary_key(target, models):
    Author, _ = models
    fields = target(sa.inspect(Author), include_primary_key=True)
    assert "id" in fields
    assert type(fields["id"]) is Attribute


def test_values_through_bound_fields(target, models):
    from ....binding import fields_from_mapping

    Author, _ = models
    bound = {f.name: f for f in fields_from_mapping(target(Author))}
    assert bound["birthday"].render_value(datetime.date(1970, 1, 2)) == "1970-01-02"
    assert bound["birthday"].parse_value("1970-01-02") == datetime.datetime(1970, 1, 2)
