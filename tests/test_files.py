import io

import pytest

from keydrop.errors import ErrorKind
from keydrop.models import IncomingFile
from keydrop.services.files import FileValidator


def make_file(name="report.txt", media_type="text/plain"):
    return IncomingFile(name=name, media_type=media_type, size=5, stream=io.BytesIO(b"hello"))


@pytest.mark.parametrize(
    "name, ext",
    [("report.TXT", "txt"), ("a.tar.gz", "gz"), ("noext", ""), (".bashrc", ""), ("dir/x.Png", "png"), ("", "")],
)
def test_extension(name, ext):
    assert make_file(name=name).extension == ext


def test_no_allow_lists_accept_anything():
    assert FileValidator().validate(make_file("x.exe", "application/x-msdownload")).ok


def test_media_type_allow_list():
    validator = FileValidator(allowed_media_types=["text/plain", "image/png"])
    assert validator.validate(make_file()).ok
    outcome = validator.validate(make_file(media_type="application/pdf"))
    assert outcome.error is ErrorKind.UNSUPPORTED_TYPE


def test_extension_allow_list_is_case_insensitive():
    validator = FileValidator(allowed_extensions=["txt", ".CSV"])
    assert validator.validate(make_file("A.TXT")).ok
    assert validator.validate(make_file("data.csv")).ok
    outcome = validator.validate(make_file("script.sh"))
    assert outcome.error is ErrorKind.UNSUPPORTED_EXTENSION


def test_media_type_checked_before_extension():
    validator = FileValidator(allowed_media_types=["text/plain"], allowed_extensions=["txt"])
    outcome = validator.validate(make_file("bad.sh", "application/x-sh"))
    assert outcome.error is ErrorKind.UNSUPPORTED_TYPE
