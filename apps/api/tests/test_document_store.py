from docqa.services.documents import DocumentPair, DocumentStore


def _pair(tag: str) -> DocumentPair:
    return DocumentPair(
        source_text=f"{tag} source",
        target_text=f"{tag} target",
        source_ref=f"https://docs.example.com/{tag}/source.pdf",
        target_ref=f"https://docs.example.com/{tag}/target.pdf",
    )


def test_new_store_starts_empty() -> None:
    store = DocumentStore()

    snapshot = store.snapshot()

    assert snapshot == DocumentPair.empty()
    assert snapshot.is_ready is False


def test_replace_swaps_whole_pair_and_returns_previous() -> None:
    store = DocumentStore()
    first = _pair("a")
    second = _pair("b")

    assert store.replace(first) == DocumentPair.empty()
    assert store.replace(second) == first
    assert store.snapshot() == second


def test_snapshot_is_unaffected_by_later_replace() -> None:
    store = DocumentStore(_pair("a"))

    snapshot = store.snapshot()
    store.replace(_pair("b"))

    assert snapshot == _pair("a")


def test_stores_are_independent() -> None:
    first = DocumentStore()
    second = DocumentStore()

    first.replace(_pair("a"))

    assert second.snapshot() == DocumentPair.empty()
