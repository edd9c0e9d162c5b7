import pytest

from trainfinder.index.identity import TRAIN_TYPES, digits_only, extract_train_number, extract_train_type


@pytest.mark.parametrize(
    "label, expected",
    [
        ("ICE 513", "513"),
        ("IC 2023", "2023"),
        ("RE 5 4711", "5"),
        ("  ICE   77  ", "77"),
        ("FLX 1234", "1234"),
        ("S-Bahn", None),
        ("ICE", None),
        ("ICE513", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_train_number(label, expected):
    assert extract_train_number(label) == expected


def test_extract_train_number_ignores_non_ascii_digits():
    assert extract_train_number("RE ²3") is None


@pytest.mark.parametrize(
    "label, expected",
    [
        ("ICE 513", "ICE"),
        ("ice 513", "ICE"),
        ("IC 2023", "IC"),
        ("EC 7", "EC"),
        ("IRE 3", "IRE"),
        ("RB 12", "RB"),
        ("TGV 9571", "TGV"),
        ("RJX 60", "RJ"),
        ("NJ 40470", "NJ"),
        ("Bus X1", None),
        ("S 1", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_train_type(label, expected):
    assert extract_train_type(label) == expected


def test_extracted_type_is_always_a_known_type():
    for label in ["ICE 1", "ECE 9", "REX 2", "IC 5", "Bus 5", "ICx 3"]:
        t = extract_train_type(label)
        assert t is None or t in TRAIN_TYPES


def test_digits_only():
    assert digits_only("ICE 513") == "513"
    assert digits_only("ice-5 13") == "513"
    assert digits_only("ICE") == ""
