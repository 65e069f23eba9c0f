"""
Media intake tests.

Attachments are stored as <media_id><ext>; every failure becomes the
generic apology reply and nothing propagates.
"""

import threading

import pytest

from bot.errors import ResolutionError
from bot.media import (
    MEDIA_SAVE_FAILED_TEXT,
    MediaIntake,
    extension_for,
    media_filename,
)


class TestExtensions:

    @pytest.mark.parametrize("content_type,ext", [
        ("image/jpeg", ".jpg"),
        ("image/png", ".png"),
        ("video/mp4", ".mp4"),
        ("audio/mpeg", ".mp3"),
        ("application/pdf", ".pdf"),
        ("IMAGE/JPEG", ".jpg"),
        ("image/jpeg; charset=binary", ".jpg"),
        ("audio/ogg; codecs=opus", ""),
        ("image/webp", ""),
        ("", ""),
        (None, ""),
    ])
    def test_extension_table(self, content_type, ext):
        assert extension_for(content_type) == ext

    def test_filename_is_id_plus_extension(self):
        assert media_filename("987", "image/jpeg") == "987.jpg"
        assert media_filename("987", "application/zip") == "987"


class TestMediaSave:

    @pytest.mark.asyncio
    async def test_jpeg_stored_with_jpg_extension(self, fake_client, tmp_path):
        fake_client.media["M1"] = (b"\xff\xd8jpeg", "image/jpeg")
        intake = MediaIntake(fake_client, tmp_path / "media")

        reply = await intake.save_and_reply("M1", "image")

        assert reply == "✅ Saved your image as M1.jpg"
        assert (tmp_path / "media" / "M1.jpg").read_bytes() == b"\xff\xd8jpeg"

    @pytest.mark.asyncio
    async def test_unknown_type_stored_without_extension(self, fake_client, tmp_path):
        fake_client.media["M2"] = (b"webp", "image/webp")
        intake = MediaIntake(fake_client, tmp_path)

        reply = await intake.save_and_reply("M2", "sticker")

        assert reply == "✅ Saved your sticker as M2"
        assert (tmp_path / "M2").read_bytes() == b"webp"

    @pytest.mark.asyncio
    async def test_missing_header_falls_back_to_resolved_type(self, fake_client, tmp_path):
        class ResolvingClient(type(fake_client)):
            async def resolve_media(self, media_id):
                location = await super().resolve_media(media_id)
                return location.model_copy(update={"mime_type": "application/pdf"})

        client = ResolvingClient()
        client.media["D1"] = (b"%PDF", None)

        path = await MediaIntake(client, tmp_path).save("D1", "document")

        assert path.name == "D1.pdf"

    @pytest.mark.asyncio
    async def test_same_id_overwrites(self, fake_client, tmp_path):
        intake = MediaIntake(fake_client, tmp_path)
        fake_client.media["M1"] = (b"first", "video/mp4")
        await intake.save("M1", "video")
        fake_client.media["M1"] = (b"second", "video/mp4")

        await intake.save("M1", "video")

        assert (tmp_path / "M1.mp4").read_bytes() == b"second"
        assert len(list(tmp_path.iterdir())) == 1

    @pytest.mark.asyncio
    async def test_resolution_failure_raises_from_save(self, fake_client, tmp_path):
        with pytest.raises(ResolutionError):
            await MediaIntake(fake_client, tmp_path).save("unknown", "image")

    @pytest.mark.asyncio
    async def test_resolution_failure_becomes_apology(self, fake_client, tmp_path):
        reply = await MediaIntake(fake_client, tmp_path).save_and_reply("unknown", "image")

        assert reply == MEDIA_SAVE_FAILED_TEXT
        assert not any(tmp_path.iterdir())

    @pytest.mark.asyncio
    async def test_fetch_failure_becomes_apology(self, fake_client, tmp_path):
        fake_client.media["M1"] = (b"x", "image/png")
        fake_client.fail_download = True

        reply = await MediaIntake(fake_client, tmp_path).save_and_reply("M1", "image")

        assert reply == MEDIA_SAVE_FAILED_TEXT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("media_id", ["../escape", "a/b", "..", "a\\b"])
    async def test_path_like_ids_are_refused(self, fake_client, tmp_path, media_id):
        fake_client.media[media_id] = (b"x", "image/png")
        media_dir = tmp_path / "media"

        reply = await MediaIntake(fake_client, media_dir).save_and_reply(media_id, "image")

        assert reply == MEDIA_SAVE_FAILED_TEXT
        assert not media_dir.exists()

    @pytest.mark.asyncio
    async def test_file_written_off_the_event_loop_thread(self, fake_client, tmp_path):
        fake_client.media["M7"] = (b"pdf", "application/pdf")
        writer_threads = []

        class RecordingIntake(MediaIntake):
            def _write(self, path, content):
                writer_threads.append(threading.current_thread())
                super()._write(path, content)

        reply = await RecordingIntake(fake_client, tmp_path).save_and_reply("M7", "document")

        assert reply == "✅ Saved your document as M7.pdf"
        assert writer_threads and writer_threads[0] is not threading.current_thread()

    @pytest.mark.asyncio
    async def test_write_failure_becomes_apology(self, fake_client, tmp_path):
        fake_client.media["M8"] = (b"x", "image/png")
        media_dir = tmp_path / "media"
        media_dir.write_text("not a directory", encoding="utf-8")

        reply = await MediaIntake(fake_client, media_dir).save_and_reply("M8", "image")

        assert reply == MEDIA_SAVE_FAILED_TEXT
