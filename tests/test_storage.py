import asyncio
import pytest
from storage.storage import InMemoryStorageProvider, StorageError, StorageProvider


def test_build_key_keeps_filename():
    key = StorageProvider.build_key("policy.pdf")
    assert key.startswith("documents/")
    assert key.endswith("/policy.pdf")
    assert StorageProvider.build_key("policy.pdf") != key


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("policy.PDF", "application/pdf"),
        ("notes.md", "text/markdown"),
        ("contract.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
        ("archive", "application/octet-stream"),
    ],
)
def test_guess_content_type(filename, expected):
    assert StorageProvider.guess_content_type(filename) == expected


def test_in_memory_storage_lifecycle():
    storage = InMemoryStorageProvider()

    key = asyncio.run(storage.upload_file(b"hello", "hello.txt"))
    assert storage.files[key] == (b"hello", "text/plain")
    assert asyncio.run(storage.get_file_url(key)) == f"memory://{key}"

    assert asyncio.run(storage.delete_file(key)) is True
    assert key not in storage.files
    # Deleting an absent key still succeeds
    assert asyncio.run(storage.delete_file(key)) is True


def test_in_memory_url_for_missing_file():
    with pytest.raises(StorageError):
        asyncio.run(InMemoryStorageProvider().get_file_url("documents/missing"))
