from speakers.hypermedia import add_hypermedia, build_links
from speakers.schemas.speaker import SpeakerOut

BASE = "http://conference.example/speaker"


def test_persisted_speaker_gets_all_relations():
    links = build_links(BASE, "abc")
    assert links == {
        "self": f"{BASE}/retrieve/abc",
        "remove": f"{BASE}/remove/abc",
        "update": f"{BASE}/update",
        "add": f"{BASE}/add",
        "search": f"{BASE}/search",
    }


def test_transient_speaker_gets_collection_relations_only():
    assert build_links(BASE, None) == {
        "add": f"{BASE}/add",
        "search": f"{BASE}/search",
    }


def test_trailing_slash_on_base_is_ignored():
    assert build_links(BASE + "/", None)["add"] == f"{BASE}/add"


def test_add_hypermedia_mutates_and_returns_same_object():
    speaker = SpeakerOut(id="abc", name="Ada")
    result = add_hypermedia(speaker, BASE)
    assert result is speaker
    assert set(speaker.links) == {"self", "remove", "update", "add", "search"}


def test_add_hypermedia_passes_none_through():
    assert add_hypermedia(None, BASE) is None
