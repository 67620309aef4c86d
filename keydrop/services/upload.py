import os
import shutil
from typing import BinaryIO

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from ..errors import ErrorKind, Outcome, failure, success
from ..models import IncomingFile
from . import paths
from .files import FileValidator
from .keys import KeyRegistry

FILE_FIELD = "data"


def _measure(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def write_file(stream: BinaryIO, destination: str) -> None:
    # truncate-and-copy onto the fixed target; not an atomic replace
    stream.seek(0)
    with open(destination, "wb") as fh:
        shutil.copyfileobj(stream, fh)


class UploadPipeline:
    def __init__(self, registry: KeyRegistry, validator: FileValidator,
                 max_file_size: int | None = None, max_files: int = 1):
        self.registry = registry
        self.validator = validator
        self.max_file_size = max_file_size
        self.max_files = max_files

    def extract(self, form: FormData) -> Outcome[IncomingFile]:
        uploads = [v for v in form.getlist(FILE_FIELD) if isinstance(v, UploadFile)]
        if not uploads:
            return failure(ErrorKind.NO_FILE)
        if len(uploads) > self.max_files:
            return failure(ErrorKind.UNSUPPORTED_REQUEST, f"{len(uploads)} files in {FILE_FIELD!r}")
        upload = uploads[0]

        size = _measure(upload)
        if self.max_file_size is not None and size > self.max_file_size:
            return failure(ErrorKind.SIZE_LIMIT_EXCEEDED, f"{size} bytes > {self.max_file_size}")

        return success(IncomingFile(
            name=upload.filename or "",
            media_type=upload.content_type or "",
            size=size,
            stream=upload.file,
        ))

    async def persist(self, file: IncomingFile, destination: str) -> Outcome[str]:
        try:
            await run_in_threadpool(write_file, file.stream, destination)
        except OSError as exc:
            return failure(ErrorKind.IO_FAILURE, f"{type(exc).__name__}: {exc}")
        return success(destination)

    async def handle(self, form: FormData, raw_key: str | None) -> Outcome[str]:
        extracted = self.extract(form)
        if not extracted.ok:
            return extracted

        checked = self.validator.validate(extracted.value)
        if not checked.ok:
            return checked

        resolved = paths.resolve(self.registry, raw_key)
        if not resolved.ok:
            return resolved

        return await self.persist(extracted.value, resolved.value)
