import json
from dataclasses import dataclass, field
from typing import Optional

import pytest

from kate.orm.errors import MissingPKError, NoTableSuffixError
from kate.orm.json_value import JSONValue
from kate.orm.model_info import ModelInfo, quote, quote_all


@dataclass
class ShardedPerson:
    id: Optional[int] = field(default=None, metadata={"orm": "column(id);pk;auto"})
    person_id: int = field(default=0, metadata={"orm": "column(person_id)"})
    name: str = field(default="", metadata={"orm": "column(name)"})
    age: int = field(default=0, metadata={"orm": "column(age)"})
    birth_time: str = field(default="", metadata={"orm": "-"})
    _hidden: int = 0

    def table_name(self):
        return "person"

    def table_suffix(self):
        return str(self.person_id % 4)


@dataclass
class Obj:
    name: str = ""
    value: int = 0


@dataclass
class AnyObj:
    id: Optional[int] = field(default=None, metadata={"orm": "column(id);pk"})
    obj_omit: Obj = field(default_factory=Obj, metadata={"orm": "column(obj_omit);json(omitempty)"})
    obj: Obj = field(default_factory=Obj, metadata={"orm": "column(obj);json"})

    def table_name(self):
        return "any_obj"


@dataclass
class EmptySuffix:
    id: int = field(default=0, metadata={"orm": "pk"})

    def table_suffix(self):
        return ""


@pytest.fixture
def person_mi():
    return ModelInfo(ShardedPerson)


def test_quote():
    assert quote("id") == "`id`"
    assert quote_all(["id", "name"]) == [quote("id"), quote("name")]


def test_fields_collected(person_mi):
    assert person_mi.fields.dbcols == ["id", "person_id", "name", "age"]
    assert person_mi.fields.get_by_name("birth_time") is None
    assert person_mi.fields.get_by_name("_hidden") is None
    assert person_mi.fields.pk is person_mi.fields.auto
    assert person_mi.fields.pk.column == "id"
    assert person_mi.fields.get_by_name("name").full_name == f"{person_mi.full_name}.name"
    assert person_mi.table == "person"
    assert person_mi.sharded


def test_sharded_tables(person_mi):
    assert person_mi.get_table(ShardedPerson(person_id=5)) == "person_1"
    assert person_mi.get_table_by_suffix("") == person_mi.table
    assert person_mi.get_table_by_suffix("2") == "person_2"


def test_missing_suffix():
    mi = ModelInfo(EmptySuffix)
    with pytest.raises(NoTableSuffixError):
        mi.get_table(EmptySuffix())


def test_unsharded_tables():
    mi = ModelInfo(AnyObj())
    assert mi.get_table(AnyObj()) == "any_obj"
    assert mi.get_table_by_suffix("") == "any_obj"
    with pytest.raises(ValueError):
        mi.get_table_by_suffix("1")


def test_pk_and_auto(person_mi):
    person = ShardedPerson(id=7)
    assert person_mi.get_existing_pk(person) == ("id", 7)
    with pytest.raises(MissingPKError):
        person_mi.get_existing_pk(ShardedPerson())
    fresh = ShardedPerson()
    person_mi.set_auto_field(fresh, 42)
    assert fresh.id == 42


def test_columns_and_values(person_mi):
    assert person_mi.get_columns(["person_id", "NAME", "age"]) == ["person_id", "name", "age"]
    person = ShardedPerson(person_id=21, name="zhangsan", age=30)
    assert person_mi.get_values(person, ["person_id", "name"]) == [21, "zhangsan"]
    assert person_mi.get_field_info("age").column == "age"
    with pytest.raises(ValueError):
        person_mi.get_columns(["nope"])
    with pytest.raises(ValueError):
        person_mi.get_field_info("nope")


def test_json_values_wrapped():
    mi = ModelInfo(AnyObj)
    obj_omit, obj = mi.get_values(AnyObj(id=1), ["obj_omit", "obj"])
    assert isinstance(obj_omit, JSONValue) and isinstance(obj, JSONValue)
    assert obj_omit.value() == ""
    assert json.loads(obj.value()) == {"name": "", "value": 0}


def test_parse_exprs(person_mi):
    fi, op = person_mi.parse_exprs(["name", "startswith"])
    assert fi.column == "name" and op == "startswith"
    assert person_mi.parse_exprs(["id"])[1] == "exact"
    assert person_mi.parse_exprs(["unknown"]) is None
    assert person_mi.parse_exprs([]) is None


def test_order_and_group_cols(person_mi):
    assert person_mi.get_order_by_cols(["-age", "+name", "id"]) == [
        "`age` DESC",
        "`name` ASC",
        "`id` ASC",
    ]
    assert person_mi.get_order_by_cols([]) == []
    assert person_mi.get_group_cols(["age", "name__exact"]) == [quote("age"), quote("name")]
    with pytest.raises(ValueError):
        person_mi.get_order_by_cols(["-missing"])
    with pytest.raises(ValueError):
        person_mi.get_group_cols(["missing"])


def test_duplicate_column_rejected():
    @dataclass
    class Dup:
        a: int = field(default=0, metadata={"orm": "pk;column(x)"})
        b: int = field(default=0, metadata={"orm": "column(x)"})

    with pytest.raises(ValueError, match="duplicate column name"):
        ModelInfo(Dup)


def test_two_pks_rejected():
    @dataclass
    class TwoPk:
        a: int = field(default=0, metadata={"orm": "pk"})
        b: int = field(default=0, metadata={"orm": "pk"})

    with pytest.raises(ValueError, match="one pk field only"):
        ModelInfo(TwoPk)


def test_dynamic_requires_hook():
    @dataclass
    class NoHook:
        id: int = field(default=0, metadata={"orm": "pk"})
        content: object = field(default=None, metadata={"orm": "json", "dynamic": True})

    with pytest.raises(TypeError):
        ModelInfo(NoHook)

    @dataclass
    class WithHook(NoHook):
        def new_dynamic_field(self, name):
            return {}

    assert ModelInfo(WithHook).fields.get_by_name("content").dynamic


def test_non_dataclass_rejected():
    class NotAModel:
        pass

    with pytest.raises(TypeError):
        ModelInfo(NotAModel)