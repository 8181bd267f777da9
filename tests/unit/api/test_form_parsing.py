"""Tests for decoding bracketed form names into nested values."""

from cms.api.form_parsing import decode_form, split_key


def test_split_key():
    assert split_key("title") == ["title"]
    assert split_key("relation[pages][]") == ["relation", "pages", ""]
    assert split_key("broken[") == ["broken["]


def test_plain_names_keep_last_value():
    assert decode_form([("title", "a"), ("title", "b")]) == {"title": "b"}


def test_brackets_build_nested_lists_and_dicts():
    form = decode_form(
        [
            ("audience[]", "staff"),
            ("audience[]", "public"),
            ("taxonomy[tags][]", "news"),
            ("taxonomy[categories][]", "events"),
            ("relation[pages][]", "3"),
            ("meta[seo][title]", "T"),
        ]
    )
    assert form == {
        "audience": ["staff", "public"],
        "taxonomy": {"tags": ["news"], "categories": ["events"]},
        "relation": {"pages": ["3"]},
        "meta": {"seo": {"title": "T"}},
    }


def test_list_of_dicts():
    assert decode_form([("rows[][name]", "a"), ("rows[][name]", "b")]) == {
        "rows": [{"name": "a"}, {"name": "b"}]
    }
