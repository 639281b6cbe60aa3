"""Tests for xacro flattening."""

import posixpath

import pytest
from hypothesis import given
from hypothesis import strategies as st

from robot_loader.config import LoaderConfig
from robot_loader.errors import NoMainFileFoundError, SourceReadError
from robot_loader.io.xacro import (
    find_main_xacro,
    flatten_xacro,
    inline_includes,
    resolve_package_paths,
    strip_document_wrapper,
    write_flattened,
)

package_names = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=20)
plain_text = st.text().filter(lambda s: "$(find" not in s and "<xacro:include" not in s)


@given(plain_text)
def test_resolution_is_identity_without_tokens(text):
    """Text without package or include tokens passes through unchanged."""
    assert resolve_package_paths(text, "/models") == text
    assert inline_includes(text, "/models") == text


@given(st.lists(package_names, min_size=1, max_size=5))
def test_every_find_token_is_replaced(packages):
    """Every $(find pkg) becomes <models_root>/pkg."""
    text = " ".join(f"$(find {pkg})/urdf/a.xacro" for pkg in packages)
    resolved = resolve_package_paths(text, "assets/models")

    assert "$(find" not in resolved
    expected = " ".join(posixpath.join("assets/models", pkg) + "/urdf/a.xacro" for pkg in packages)
    assert resolved == expected


def test_strip_document_wrapper():
    """Only the first declaration and outer robot tags are removed."""
    text = '<?xml version="1.0" ?>\n<robot name="r" xmlns:xacro="x">\n<link name="a"/>\n</robot>\n'
    stripped = strip_document_wrapper(text)

    assert "<?xml" not in stripped
    assert "<robot" not in stripped
    assert "</robot>" not in stripped
    assert '<link name="a"/>' in stripped


def test_include_is_inlined(tmp_path):
    """Included files are resolved and inlined without their wrapper."""
    models = tmp_path / "models"
    (models / "pkg").mkdir(parents=True)
    (models / "pkg" / "part.xacro").write_text(
        '<?xml version="1.0"?><robot name="part">'
        '<link name="$(find pkg)/inner"/></robot>'
    )

    text = '<robot name="main"><xacro:include filename="$(find pkg)/part.xacro"/></robot>'
    flattened = inline_includes(resolve_package_paths(text, models), models)

    inner = posixpath.join(str(models), "pkg") + "/inner"
    assert flattened == f'<robot name="main"><link name="{inner}"/></robot>'


def test_unreadable_include_contributes_nothing(tmp_path):
    """A missing include is replaced by the empty string."""
    text = '<robot><xacro:include filename="/does/not/exist.xacro" /><link name="a"/></robot>'
    assert inline_includes(text, tmp_path) == '<robot><link name="a"/></robot>'


def test_find_main_xacro_skips_fragments(config):
    """Materials and transmission fragments are never the main file."""
    model_dir = config.models_root / "robot_description"
    assert find_main_xacro(model_dir, config) == model_dir / "urdf" / "robot.xacro"


def test_find_main_xacro_empty_directory(config):
    with pytest.raises(NoMainFileFoundError):
        find_main_xacro(config.models_root / "empty_description", config)


def test_find_main_xacro_only_fragments(tmp_path):
    """A directory holding only fragments has no main file."""
    (tmp_path / "materials.xacro").write_text("<robot/>")
    (tmp_path / "robot.trans.xacro").write_text("<robot/>")
    (tmp_path / "notes.txt").write_text("")

    with pytest.raises(NoMainFileFoundError):
        find_main_xacro(tmp_path, LoaderConfig())


def test_flatten_fixture(config):
    """The fixture robot flattens into one document with the transmission inlined."""
    main = config.models_root / "robot_description" / "urdf" / "robot.xacro"
    flattened = flatten_xacro(main, config.models_root)

    assert "<xacro:include" not in flattened
    assert "$(find" not in flattened
    assert "wheel_joint_tran" in flattened
    assert 'name="silver"' in flattened
    # One wrapper survives: the main file's own
    assert flattened.count("</robot>") == 1


def test_flatten_missing_main_file(tmp_path):
    with pytest.raises(SourceReadError):
        flatten_xacro(tmp_path / "missing.xacro", tmp_path)


def test_write_flattened(tmp_path):
    """The flattened text lands beside the source with a .urdf suffix."""
    source = tmp_path / "robot.xacro"
    written = write_flattened(source, "<robot/>")

    assert written == tmp_path / "robot.urdf"
    assert written.read_text() == "<robot/>"


def test_write_flattened_failure_is_not_fatal(tmp_path):
    """A write failure is reported as None."""
    source = tmp_path / "missing_dir" / "robot.xacro"
    assert write_flattened(source, "<robot/>") is None


def test_includes_decode_independently(tmp_path):
    """A Shift-JIS include is decoded on its own inside a UTF-8 main file."""
    models = tmp_path / "models"
    urdf_dir = models / "cart_description" / "urdf"
    urdf_dir.mkdir(parents=True)

    (urdf_dir / "cart.trans.xacro").write_bytes(
        '<?xml version="1.0" encoding="Shift_JIS"?>\n'
        '<robot name="cart"><!-- 駆動輪 --><transmission name="車輪_tran"/></robot>'.encode("cp932")
    )
    main = urdf_dir / "cart.xacro"
    main.write_bytes(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<robot name="台車" xmlns:xacro="http://www.ros.org/wiki/xacro">'
        '<xacro:include filename="$(find cart_description)/urdf/cart.trans.xacro"/>'
        '<link name="本体"/></robot>'.encode("utf-8")
    )

    flattened = flatten_xacro(main, models)

    assert '<robot name="台車"' in flattened
    assert '<!-- 駆動輪 --><transmission name="車輪_tran"/>' in flattened
    assert '<link name="本体"/>' in flattened
    assert "Shift_JIS" not in flattened
    assert "\ufffd" not in flattened
