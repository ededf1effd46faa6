import pytest

from sosrelay.core.slug import humanize, slugify


@pytest.mark.parametrize(
    "raw,slug",
    [
        ("São Paulo!", "sao_paulo"),
        ("Bengaluru Urban", "bengaluru_urban"),
        ("  New   Delhi  ", "new_delhi"),
        ("Île-de-France", "ile_de_france"),
        ("Thiruvananthapuram (Trivandrum)", "thiruvananthapuram_trivandrum"),
        ("__already_slugged__", "already_slugged"),
        ("Zürich", "zurich"),
    ],
)
def test_slugify_normalizes_free_text(raw, slug):
    assert slugify(raw) == slug


@pytest.mark.parametrize("raw", ["São Paulo!", "Île-de-France", "MiXeD CaSe--42"])
def test_slugify_is_idempotent(raw):
    once = slugify(raw)
    assert slugify(once) == once


@pytest.mark.parametrize("raw", [None, "", "!!!", "日本", "   "])
def test_slugify_returns_empty_when_nothing_usable_remains(raw):
    assert slugify(raw) == ""


def test_humanize_title_cases_each_word():
    assert humanize("bengaluru_urban") == "Bengaluru Urban"
    assert humanize("new_delhi") == "New Delhi"
    assert humanize("india_general") == "India General"
