import pytest

from pressroom.adapters.soup_parser import SoupMarkupParser
from pressroom.components.sanitizer.models import MarkupPolicy

POLICY = MarkupPolicy(
    allowed_tags=frozenset({"p", "a", "img", "div", "span", "b"}),
    allowed_attrs=frozenset({"href", "src", "alt", "target", "rel"}),
    drop_with_content=frozenset({"script", "style"}),
    forbidden_protocols=frozenset({"javascript:", "data:"}),
)


@pytest.fixture
def soup() -> SoupMarkupParser:
    return SoupMarkupParser()


class TestClean:
    def test_drop_with_content(self, soup):
        assert soup.clean("<p>a</p><style>p{}</style><script>x</script>", POLICY) == "<p>a</p>"

    def test_unwrap_keeps_children(self, soup):
        assert soup.clean("<article><p>a<em>b</em></p></article>", POLICY) == "<p>ab</p>"

    def test_nested_script_inside_unwrapped_tag(self, soup):
        assert soup.clean("<section><script>x</script>ok</section>", POLICY) == "ok"

    def test_url_with_control_characters(self, soup):
        out = soup.clean('<a href="java&#10;script:alert(1)">x</a>', POLICY)
        assert out == "<a>x</a>"

    def test_uppercase_protocol(self, soup):
        out = soup.clean('<img src="DATA:text/html,x" alt="a">', POLICY)
        assert out == '<img alt="a"/>'

    def test_existing_rel_extended(self, soup):
        out = soup.clean('<a href="/x" target="_blank" rel="nofollow">x</a>', POLICY)
        assert 'rel="nofollow noopener noreferrer"' in out

    def test_cdata_and_doctype_removed(self, soup):
        assert soup.clean("<!DOCTYPE html><p>a</p>", POLICY) == "<p>a</p>"


class TestPrune:
    def test_innermost_first(self, soup):
        tags = frozenset({"div", "span", "p"})
        assert soup.prune_empty("<div><p><span></span></p></div>text", tags) == "text"

    def test_only_listed_tags_pruned(self, soup):
        assert soup.prune_empty("<b></b><p></p>", frozenset({"p"})) == "<b></b>"

    def test_media_keeps_parent(self, soup):
        assert soup.prune_empty("<p><br/></p>", frozenset({"p"})) == "<p><br/></p>"


def test_text_content(soup):
    assert soup.text_content("<p>Hello <b>big</b></p><p>world</p>") == "Hello big world"
