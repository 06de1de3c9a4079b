import pytest
import yaml

from loyalteez_mcp.config import DEFAULT_DOCS_PATH
from loyalteez_mcp.docs_index import DocsCache, load_documentation, parse_frontmatter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def docs_root(tmp_path):
    (tmp_path / "guides").mkdir()
    (tmp_path / "guides" / "setup.md").write_text(
        "---\ntitle: Setup Guide\ndescription: Getting started\n---\nInstall the SDK.\n"
    )
    (tmp_path / "overview.md").write_text("# Overview\n\nNo frontmatter here.\n")
    (tmp_path / "broken.md").write_text("---\ntitle: [unclosed\n---\nbody\n")
    (tmp_path / "notes.txt").write_text("not markdown")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "readme.md").write_text("vendored")
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "secret.md").write_text("hidden")
    return tmp_path


def test_parse_frontmatter():
    data, body = parse_frontmatter("---\ntitle: Hello\nlabel: Hi\n---\nBody text\n")
    assert data == {"title": "Hello", "label": "Hi"}
    assert body == "Body text\n"


def test_parse_frontmatter_absent():
    assert parse_frontmatter("Just text") == ({}, "Just text")


def test_parse_frontmatter_must_be_mapping():
    with pytest.raises(yaml.YAMLError):
        parse_frontmatter("---\n- a\n- b\n---\nbody\n")


def test_load_documentation(docs_root):
    index = load_documentation(docs_root)

    assert sorted(index) == ["loyalteez://docs/guides/setup", "loyalteez://docs/overview"]
    setup = index["loyalteez://docs/guides/setup"]
    assert setup.title == "Setup Guide"
    assert setup.category == "guides"
    assert setup.content == "Install the SDK.\n"
    overview = index["loyalteez://docs/overview"]
    assert overview.title == "overview"
    assert overview.category is None


def test_load_documentation_missing_directory(tmp_path):
    assert load_documentation(tmp_path / "missing") == {}


def test_render_includes_remaining_frontmatter(docs_root):
    doc = load_documentation(docs_root)["loyalteez://docs/guides/setup"]
    assert doc.render() == "# Setup Guide\n\n---\ndescription: Getting started\n---\n\nInstall the SDK.\n"


def test_cache_reloads_after_ttl(docs_root):
    clock = FakeClock()
    cache = DocsCache(docs_root, ttl=300, clock=clock)

    assert len(cache.index()) == 2
    (docs_root / "new.md").write_text("---\ntitle: New\n---\nfresh\n")

    clock.now += 299
    assert cache.get("loyalteez://docs/new") is None

    clock.now += 1
    assert cache.get("loyalteez://docs/new").title == "New"


def test_cache_clear_and_stats(docs_root):
    clock = FakeClock()
    cache = DocsCache(docs_root, clock=clock)
    assert cache.stats() == {"cached": False, "age": None, "docCount": 0}

    cache.index()
    clock.now += 12
    assert cache.stats() == {"cached": True, "age": 12, "docCount": 2}

    cache.clear()
    assert cache.stats()["cached"] is False


def test_search_matches_title_body_and_uri(docs_root):
    cache = DocsCache(docs_root)

    assert [d.uri for d in cache.search("SETUP")] == ["loyalteez://docs/guides/setup"]
    assert [d.uri for d in cache.search("frontmatter")] == ["loyalteez://docs/overview"]
    assert cache.search("nothing matches this") == []


def test_bundled_docs_have_titles():
    index = load_documentation(DEFAULT_DOCS_PATH)

    assert "loyalteez://docs/api/gas-relayer" in index
    for doc in index.values():
        assert doc.title != doc.path.stem, f"{doc.uri} has no frontmatter title"
        assert doc.frontmatter.get("description"), f"{doc.uri} has no description"
