from http import HTTPStatus

import pytest

from sampletools.uploads import UploadError, path_is_valid, stream_to_file


@pytest.mark.parametrize(
    "path",
    ["file.txt", "report", "a/", "name.tar.gz", "a/."],
)
def test_single_component_paths_are_valid(path):
    assert path_is_valid(path) is True


@pytest.mark.parametrize(
    "path",
    ["", "/abs", "..", "../x", ".", "./a", "a/b", "a/../b", "//a"],
)
def test_unsafe_paths_are_rejected(path):
    assert path_is_valid(path) is False


async def _agen(*chunks):
    for chunk in chunks:
        yield chunk


async def _broken_body():
    yield b"start"
    raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_stream_to_file_writes_all_chunks(tmp_path):
    written = await stream_to_file("out.bin", _agen(b"hello ", b"world"), tmp_path)
    assert written == tmp_path / "out.bin"
    assert written.read_bytes() == b"hello world"


@pytest.mark.asyncio
async def test_stream_to_file_accepts_plain_iterables(tmp_path):
    await stream_to_file("plain.txt", [b"a", b"b", b"c"], tmp_path)
    assert (tmp_path / "plain.txt").read_bytes() == b"abc"


@pytest.mark.asyncio
async def test_stream_to_file_truncates_existing_file(tmp_path):
    target = tmp_path / "again.txt"
    target.write_bytes(b"a much longer old body")
    await stream_to_file("again.txt", [b"new"], tmp_path)
    assert target.read_bytes() == b"new"


@pytest.mark.asyncio
async def test_invalid_path_is_a_bad_request(tmp_path):
    with pytest.raises(UploadError) as info:
        await stream_to_file("../escape.txt", [b"x"], tmp_path)
    assert info.value.status == HTTPStatus.BAD_REQUEST
    assert info.value.message == "Invalid path"
    assert not (tmp_path.parent / "escape.txt").exists()


@pytest.mark.asyncio
async def test_missing_directory_is_a_server_error(tmp_path):
    with pytest.raises(UploadError) as info:
        await stream_to_file("f.txt", [b"x"], tmp_path / "absent")
    assert info.value.status == HTTPStatus.INTERNAL_SERVER_ERROR


@pytest.mark.asyncio
async def test_failing_body_is_a_server_error(tmp_path):
    with pytest.raises(UploadError) as info:
        await stream_to_file("partial.txt", _broken_body(), tmp_path)
    assert info.value.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert info.value.message == "boom"