from dataclasses import dataclass
from typing import BinaryIO


@dataclass(frozen=True)
class IncomingFile:
    name: str
    media_type: str
    size: int
    stream: BinaryIO

    @property
    def extension(self) -> str:
        # "report.PDF" -> "pdf", "archive" -> ""
        base = self.name.replace("\\", "/").rsplit("/", 1)[-1]
        stem, dot, ext = base.rpartition(".")
        if not dot or not stem:
            return ""
        return ext.lower()
