from __future__ import annotations

from fastapi import UploadFile

from carlot.domain.car import StagedFile


class UploadMapper:
    """Reads multipart uploads into in-memory staged files."""

    @staticmethod
    def to_staged(upload: UploadFile) -> StagedFile:
        return StagedFile(
            filename=upload.filename or "",
            content=upload.file.read(),
            content_type=upload.content_type,
        )

    @staticmethod
    def to_staged_list(uploads: list[UploadFile] | None) -> list[StagedFile]:
        # browsers send an empty part when no file was picked
        return [UploadMapper.to_staged(upload) for upload in uploads or [] if upload.filename]
