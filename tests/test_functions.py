import pytest

from functions import parse_id_list


@pytest.mark.parametrize("ids_csv, expected", [
    ("1,2,3", [1, 2, 3]),
    (" 4 , 5 ", [4, 5]),
    ("abc,1.5,,7", [7]),
    ("1_000,8", [8]),
    ("٣,9", [9]),
    ("", []),
    (None, []),
])
def test_parse_id_list_keeps_plain_decimal_integers(ids_csv, expected):
    assert parse_id_list(ids_csv) == expected
