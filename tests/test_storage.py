"""Tests for the post storage layer."""

import pytest

from post_uploader import FileInfo, InvalidFilenameError, PostNotFoundError, PostStorage


@pytest.fixture
def storage(tmp_path):
    """Create a storage rooted in a temporary posts directory."""
    store = PostStorage(tmp_path / "_posts")
    store.initialize()
    return store


class TestPostStorage:
    """Tests for PostStorage."""

    def test_initialize_creates_directory(self, tmp_path):
        store = PostStorage(tmp_path / "nested" / "_posts")
        assert not store.is_available()
        store.initialize()
        assert (tmp_path / "nested" / "_posts").is_dir()
        assert store.is_available()

    def test_save_and_read(self, storage):
        """Test that saved content is written verbatim."""
        info = storage.save("2024-03-26-hello.md", b"---\ntitle: x\n---\n")
        assert isinstance(info, FileInfo)
        assert info.filename == "2024-03-26-hello.md"
        assert info.size == 17
        assert info.content_type == "text/markdown"
        assert storage.get_path("2024-03-26-hello.md").read_bytes() == b"---\ntitle: x\n---\n"

    def test_save_overwrites(self, storage):
        storage.save("a.md", b"first")
        storage.save("a.md", b"second")
        assert storage.get_path("a.md").read_bytes() == b"second"

    def test_save_rejects_non_markdown(self, storage):
        with pytest.raises(InvalidFilenameError):
            storage.save("notes.txt", b"x")

    @pytest.mark.parametrize("name", ["", ".", "..", "../escape.md", "sub/dir.md", "a\\b.md", "nul\x00.md"])
    def test_rejects_unsafe_names(self, storage, name):
        """Test that names escaping the posts directory are refused."""
        with pytest.raises(InvalidFilenameError):
            storage.save(name, b"x")
        with pytest.raises(InvalidFilenameError):
            storage.get_path(name)

    def test_list_posts(self, storage):
        """Test that only markdown files are listed, sorted by name."""
        storage.save("b.md", b"bb")
        storage.save("a.MD", b"a")
        (storage.posts_dir / "ignored.txt").write_text("x")
        (storage.posts_dir / "folder.md").mkdir()

        posts = storage.list_posts()
        assert [p.filename for p in posts] == ["a.MD", "b.md"]
        assert [p.size for p in posts] == [1, 2]

    def test_list_missing_directory(self, tmp_path):
        store = PostStorage(tmp_path / "missing")
        with pytest.raises(OSError):
            store.list_posts()

    def test_get_missing(self, storage):
        with pytest.raises(PostNotFoundError):
            storage.get_path("missing.md")

    def test_delete(self, storage):
        storage.save("gone.md", b"x")
        storage.delete("gone.md")
        assert not (storage.posts_dir / "gone.md").exists()
        with pytest.raises(PostNotFoundError):
            storage.delete("gone.md")
