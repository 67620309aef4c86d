import pytest

from keydrop.config import Settings
from keydrop.errors import ConfigError
from keydrop.services.keys import KeyRegistry, is_contained, is_valid_key, sanitize_key


@pytest.mark.parametrize("key", ["TEST", "a", "under_score", "dash-ed", "Mixed09"])
def test_valid_keys(key):
    assert is_valid_key(key)


@pytest.mark.parametrize(
    "key",
    ["", "../TEST", "a/b", "a.b", "has space", "tab\t", "INVALID$$", "ключ", "new\nline", None],
)
def test_invalid_keys(key):
    assert not is_valid_key(key)


def test_every_character_outside_alphabet_is_rejected():
    allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-")
    for code in range(0, 256):
        ch = chr(code)
        if ch not in allowed:
            assert not is_valid_key(f"ok{ch}ok"), repr(ch)


def test_sanitize_strips_foreign_characters():
    assert sanitize_key("../TE ST$") == "TEST"
    assert sanitize_key(None) == ""


def test_containment(tmp_path):
    root = tmp_path / "root"
    assert is_contained(root, root)
    assert is_contained(root / "a" / "b.txt", root)
    assert not is_contained(root / ".." / "escape.txt", root)
    assert not is_contained(tmp_path / "rootfoo" / "x.txt", root)


def test_load_registry(tmp_path):
    target = tmp_path / "t.txt"
    registry = KeyRegistry.load(Settings(allowed_upload_dir=str(tmp_path), keys={"TEST": str(target)}))
    assert "TEST" in registry
    assert len(registry) == 1
    assert "OTHER" not in registry
    assert registry.get("TEST") == str(target)
    assert registry.get("OTHER") is None


def test_load_rejects_bad_key_name(tmp_path):
    settings = Settings(allowed_upload_dir=str(tmp_path), keys={"BAD.KEY": str(tmp_path / "x")})
    with pytest.raises(ConfigError) as err:
        KeyRegistry.load(settings)
    assert err.value.reason == ConfigError.INVALID_KEY_FORMAT
    assert "KEY_BAD.KEY" in str(err.value)


def test_load_rejects_path_outside_root(tmp_path):
    root = tmp_path / "allowed"
    root.mkdir()
    settings = Settings(
        allowed_upload_dir=str(root),
        keys={"GOOD": str(root / "ok.txt"), "EVIL": str(tmp_path / "elsewhere.txt")},
    )
    with pytest.raises(ConfigError) as err:
        KeyRegistry.load(settings)
    assert err.value.reason == ConfigError.PATH_NOT_CONTAINED
    assert err.value.key == "KEY_EVIL"


def test_load_rejects_traversal_in_destination(tmp_path):
    root = tmp_path / "allowed"
    root.mkdir()
    settings = Settings(allowed_upload_dir=str(root), keys={"T": f"{root}/../escape.txt"})
    with pytest.raises(ConfigError):
        KeyRegistry.load(settings)


def test_load_rejects_empty_destination(tmp_path):
    with pytest.raises(ConfigError) as err:
        KeyRegistry.load(Settings(allowed_upload_dir=str(tmp_path), keys={"T": ""}))
    assert err.value.reason == ConfigError.PATH_NOT_CONTAINED


@pytest.mark.parametrize("root", [None, "relative/dir"])
def test_load_requires_absolute_root(root):
    with pytest.raises(ConfigError) as err:
        KeyRegistry.load(Settings(allowed_upload_dir=root))
    assert err.value.reason == ConfigError.MISSING_ALLOWED_ROOT


def test_registry_is_read_only(tmp_path):
    registry = KeyRegistry.load(Settings(allowed_upload_dir=str(tmp_path), keys={"T": str(tmp_path / "t")}))
    assert not hasattr(registry, "__setitem__")
    with pytest.raises(TypeError):
        registry._entries["X"] = "/etc/passwd"
