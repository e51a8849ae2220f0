import io
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import Headers

from helpmate.errors import InvalidInput
from helpmate.services.attachments import AttachmentStore


def upload(name, content, media_type):
    return UploadFile(file=io.BytesIO(content), filename=name, headers=Headers({"content-type": media_type}))


@pytest.fixture
def store(tmp_path):
    return AttachmentStore(str(tmp_path), max_bytes=1024)


async def test_save_writes_file_and_describes_it(store, tmp_path):
    attachment = await store.save(upload("report.pdf", b"%PDF-1.4 body", "application/pdf"))

    assert attachment.original_name == "report.pdf"
    assert attachment.media_type == "application/pdf"
    assert attachment.size == len(b"%PDF-1.4 body")
    assert attachment.filename.startswith("attachment-") and attachment.filename.endswith(".pdf")
    assert attachment.path == f"/uploads/{attachment.filename}"
    assert (tmp_path / attachment.filename).read_bytes() == b"%PDF-1.4 body"


async def test_client_path_is_stripped(store):
    attachment = await store.save(upload("../../etc/notes.txt", b"hello", "text/plain"))
    assert attachment.original_name == "notes.txt"


@pytest.mark.parametrize(
    "name,media_type",
    [
        ("virus.exe", "application/octet-stream"),
        ("photo.png", "application/x-msdownload"),
        ("script.sh", "text/plain"),
    ],
)
async def test_rejects_unsupported_types(store, name, media_type):
    with pytest.raises(InvalidInput):
        await store.save(upload(name, b"data", media_type))


async def test_rejects_oversized_and_empty(store, tmp_path):
    with pytest.raises(InvalidInput):
        await store.save(upload("big.png", b"x" * 1025, "image/png"))
    with pytest.raises(InvalidInput):
        await store.save(upload("empty.png", b"", "image/png"))
    assert list(tmp_path.iterdir()) == []


async def test_discard_removes_file(store, tmp_path):
    attachment = await store.save(upload("a.gif", b"GIF89a", "image/gif"))
    store.discard(attachment)
    store.discard(attachment)
    assert not (tmp_path / attachment.filename).exists()


async def test_write_happens_off_the_event_loop(store, tmp_path):
    with patch("helpmate.services.attachments.run_in_threadpool", AsyncMock(wraps=run_in_threadpool)) as threadpool:
        attachment = await store.save(upload("notes.txt", b"hello", "text/plain"))

    threadpool.assert_awaited_once()
    assert (tmp_path / attachment.filename).read_bytes() == b"hello"
