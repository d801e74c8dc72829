import pytest

from gotenberg.alphanumeric import alphanumeric_less, alphanumeric_sorted, extract_number


@pytest.mark.parametrize(
    "values, expected",
    [
        (
            ["10qux.pdf", "2_baz.txt", "2_aza.txt", "1bar.pdf", "Afoo.txt", "Bbar.docx", "25zeta.txt", "3.pdf", "4_foo.pdf"],
            ["1bar.pdf", "2_aza.txt", "2_baz.txt", "3.pdf", "4_foo.pdf", "10qux.pdf", "25zeta.txt", "Afoo.txt", "Bbar.docx"],
        ),
        (
            ["sample1_10.pdf", "sample1_11.pdf", "sample1_4.pdf", "sample1_3.pdf", "sample1_1.pdf", "sample1_2.pdf"],
            ["sample1_1.pdf", "sample1_2.pdf", "sample1_3.pdf", "sample1_4.pdf", "sample1_10.pdf", "sample1_11.pdf"],
        ),
        (
            ["sample1_10", "sample1_11", "sample1_4", "sample1_3", "sample1_1", "sample1_2"],
            ["sample1_1", "sample1_2", "sample1_3", "sample1_4", "sample1_10", "sample1_11"],
        ),
        (
            ["245654773395259", "245654773395039", "245654773394919", "245654773394369"],
            ["245654773394369", "245654773394919", "245654773395039", "245654773395259"],
        ),
    ],
)
def test_alphanumeric_sorted(values, expected):
    assert alphanumeric_sorted(values) == expected


def test_sorted_returns_new_list():
    values = ["2.pdf", "1.pdf"]
    result = alphanumeric_sorted(values)
    assert result == ["1.pdf", "2.pdf"]
    assert values == ["2.pdf", "1.pdf"]


def test_sort_uses_base_name():
    assert alphanumeric_sorted(["a/2.pdf", "b/1.pdf"]) == ["b/1.pdf", "a/2.pdf"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("3.pdf", (3, ".pdf")),
        ("10qux.pdf", (10, "qux.pdf")),
        ("sample1_10.pdf", (10, "sample1_.pdf")),
        ("sample1_10", (10, "sample1_")),
        ("Afoo.txt", (-1, "Afoo.txt")),
        ("dir/sub/7_page.pdf", (7, "_page.pdf")),
        ("99999999999999999999", (-1, "99999999999999999999")),
    ],
)
def test_extract_number(value, expected):
    assert extract_number(value) == expected


def test_alphanumeric_less():
    assert alphanumeric_less("2.pdf", "10.pdf") is True
    assert alphanumeric_less("10.pdf", "2.pdf") is False
    assert alphanumeric_less("1.pdf", "Afoo.txt") is True
    assert alphanumeric_less("Afoo.txt", "1.pdf") is False
    assert alphanumeric_less("Afoo.txt", "Bbar.docx") is True
    assert alphanumeric_less("2_aza.txt", "2_baz.txt") is True