import pytest

from kate.orm.params import ColOp, ColValue, col_value


def test_col_value_from_int():
    result = col_value(ColOp.SUB, 1)
    assert result == ColValue(value=1, op=ColOp.SUB)


def test_col_value_from_numeric_string():
    result = col_value(ColOp.ADD, "10")
    assert result.value == 10
    assert result.op is ColOp.ADD


@pytest.mark.parametrize("op", list(ColOp))
def test_col_value_keeps_operator(op):
    assert col_value(op, -7).op is op


def test_col_value_negative_string():
    assert col_value(ColOp.MUL, "-3").value == -3


@pytest.mark.parametrize("bad", ["abc", 1.5, True, "", None])
def test_col_value_rejects_non_integer(bad):
    with pytest.raises(ValueError, match="non string/numeric"):
        col_value(ColOp.ADD, bad)


def test_col_value_rejects_out_of_range():
    with pytest.raises(ValueError):
        col_value(ColOp.ADD, 2**63)


def test_col_value_rejects_unknown_operator():
    with pytest.raises(ValueError, match="wrong operator"):
        col_value("add", 1)


def test_col_value_is_immutable():
    result = col_value(ColOp.DIV, 2)
    with pytest.raises(AttributeError):
        result.value = 3
    assert result.value == 2
    assert result.op is ColOp.DIV