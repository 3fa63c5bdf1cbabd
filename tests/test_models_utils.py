from dataclasses import dataclass

import pytest

from kate.orm.models_utils import (
    get_column_name,
    get_full_name,
    get_table_name,
    get_table_suffix,
    is_sharded,
    parse_struct_tag,
    snake_string,
)


@dataclass
class ShardedPerson:
    person_id: int = 0

    def table_name(self):
        return "person"

    def table_suffix(self):
        return str(self.person_id)


@dataclass
class PlainModel:
    name: str = ""


def test_snake_string_camel_case():
    assert snake_string("ShardedPerson") == "sharded_person"


@pytest.mark.parametrize("name", ["person", "already_snake", "x"])
def test_snake_string_keeps_snake_names(name):
    assert snake_string(name) == name


@pytest.mark.parametrize("name", ["ABC", "SomeName", "_Leading", "a_B_c"])
def test_snake_string_is_lower_case(name):
    result = snake_string(name)
    assert result == result.lower()
    assert result.replace("_", "") == name.replace("_", "").lower()


def test_full_name_same_for_class_and_instance():
    assert get_full_name(PlainModel) == get_full_name(PlainModel())
    assert get_full_name(PlainModel).endswith(".PlainModel")


def test_table_name_from_hook():
    assert get_table_name(ShardedPerson()) == "person"
    assert get_table_name(ShardedPerson) == "person"


def test_table_name_from_class_name():
    assert get_table_name(PlainModel()) == snake_string("PlainModel")


def test_sharding_hooks():
    assert is_sharded(ShardedPerson)
    assert not is_sharded(PlainModel())
    assert get_table_suffix(ShardedPerson(person_id=3)) == "3"
    assert get_table_suffix(PlainModel()) == ""


def test_column_name():
    assert get_column_name("whatever", "col") == "col"
    assert get_column_name("person", "") == "person"


def test_parse_pk_and_column():
    attrs, tags = parse_struct_tag("m", "pk;column(id)")
    assert attrs == {"pk": True}
    assert tags == {"column": "id"}


def test_parse_json_optional_args():
    assert parse_struct_tag("m", "json(omitempty)") == ({"json": True}, {"json": "omitempty"})
    assert parse_struct_tag("m", "json") == ({"json": True}, {})


def test_parse_trims_and_skips_empty_parts():
    assert parse_struct_tag("m", " pk ;; auto") == ({"pk": True, "auto": True}, {})


@pytest.mark.parametrize("data", ["foo;pk", "pk(x);auto", "column;pk", "column(a)b;pk"])
def test_parse_stops_at_invalid_part(data):
    attrs, tags = parse_struct_tag("m", data)
    assert "pk" not in attrs
    assert "auto" not in attrs
    assert tags == {}


def test_parse_keeps_parts_before_invalid_one():
    assert parse_struct_tag("m", "pk;bogus;auto") == ({"pk": True}, {})