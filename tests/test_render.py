import io

import numpy as np
import pytest
import requests
from PIL import Image

from img2mc import image_io
from img2mc.cli import main
from img2mc.core_types import ConfigurationError, RenderOptions
from img2mc.image_io import derive_grid_size, load_source_image
from img2mc.render import output_kind, render
from img2mc.structure import decode_block_grid, read_litematic

NOW = 1_700_000_000_000
PALETTE = ["stone", "white_wool", "black_wool"]


@pytest.fixture
def split_image(tmp_path):
    """8x4 px, left half black, right half white."""
    arr = np.zeros((4, 8, 4), dtype=np.uint8)
    arr[..., 3] = 255
    arr[:, 4:, :3] = 255
    path = tmp_path / "split.png"
    Image.fromarray(arr).save(path)
    return path


def options(texture_dir, src, out, **kw):
    base = dict(
        textures_path=texture_dir,
        input_image=str(src),
        output_path=out,
        block_height=2,
        chunk_resolution=2,
        dithering="FloydSteinberg",
        block_palette=PALETTE,
        progress=False,
    )
    base.update(kw)
    return RenderOptions(**base)


def test_output_kind():
    assert output_kind("a.litematic") == "structure"
    assert output_kind("a.SCHEMATIC") == "structure"
    assert output_kind("a.png") == "image"
    with pytest.raises(ConfigurationError):
        output_kind("no_extension")


def test_render_structure(texture_dir, split_image, tmp_path):
    out = tmp_path / "split.litematic"
    grid = render(options(texture_dir, split_image, out), now_ms=NOW)

    row = ["black_wool", "black_wool", "white_wool", "white_wool"]
    assert grid.tolist() == [row, row]

    doc = read_litematic(out.read_bytes())
    assert doc["Metadata"]["Name"] == "split"
    assert doc["Metadata"]["TimeCreated"] == NOW
    assert doc["Metadata"]["TotalBlocks"] == 8
    assert doc["Regions"]["Unnamed"]["Size"] == {"x": 4, "y": 2, "z": 1}
    names = [f"minecraft:{i}" for i in row]
    assert decode_block_grid(doc).tolist() == [names, names]


def test_render_image(texture_dir, split_image, tmp_path):
    out = tmp_path / "split.png"
    render(options(texture_dir, split_image, out, block_width=4, workers=2))
    with Image.open(out) as im:
        assert im.size == (64, 32)
        arr = np.array(im.convert("RGBA"))
    assert tuple(arr[0, 0]) == (0, 0, 0, 255)
    assert tuple(arr[31, 63]) == (255, 255, 255, 255)


def test_render_without_extension_fails_early(texture_dir, tmp_path):
    with pytest.raises(ConfigurationError):
        render(options(texture_dir, tmp_path / "missing.png", tmp_path / "out"))


def test_derive_grid_size():
    assert derive_grid_size((100, 50), 10) == (20, 10)
    assert derive_grid_size((3, 1000), 10) == (1, 10)
    assert derive_grid_size((100, 50), 10, 7) == (7, 10)
    with pytest.raises(ConfigurationError):
        derive_grid_size((100, 50), 0)
    with pytest.raises(ConfigurationError):
        derive_grid_size((100, 50), 10, 0)


class FakeResponse:
    def __init__(self, content, status_error=None):
        self.content = content
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error is not None:
            raise self._status_error


def png_bytes(size=(3, 2)):
    buf = io.BytesIO()
    Image.new("RGB", size, (10, 20, 30)).save(buf, format="PNG")
    return buf.getvalue()


def test_load_source_image_from_url(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(png_bytes())

    monkeypatch.setattr(image_io.requests, "get", fake_get)
    im = load_source_image("https://example.com/pic.png")
    assert im.mode == "RGBA"
    assert im.size == (3, 2)
    assert calls == [("https://example.com/pic.png", 30)]


def test_network_failures_surface_as_oserror(monkeypatch):
    def refused(url, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(image_io.requests, "get", refused)
    with pytest.raises(OSError, match="example.com"):
        load_source_image("http://example.com/pic.png")

    monkeypatch.setattr(
        image_io.requests,
        "get",
        lambda url, timeout: FakeResponse(b"", requests.HTTPError("404")),
    )
    with pytest.raises(OSError):
        load_source_image("http://example.com/pic.png")


def cli_args(texture_dir, src, out, *extra):
    return [
        "-t", str(texture_dir),
        "-i", str(src),
        "-o", str(out),
        "-H", "2",
        "-r", "2",
        "-p", ",".join(PALETTE),
        "--no-progress",
        *extra,
    ]


def test_cli_success(texture_dir, split_image, tmp_path):
    out = tmp_path / "cli.schematic"
    assert main(cli_args(texture_dir, split_image, out, "--workers", "2", "--dither", "FloydSteinberg")) == 0
    assert out.read_bytes()[:2] == b"\x1f\x8b"


def test_cli_reports_configuration_errors(texture_dir, split_image, tmp_path, capsys):
    out = tmp_path / "cli.png"
    args = cli_args(texture_dir, split_image, out)
    args[args.index("-r") + 1] = "3"
    assert main(args) == 1
    assert "[error]" in capsys.readouterr().err
    assert not out.exists()


def test_cli_reports_missing_input(texture_dir, tmp_path, capsys):
    out = tmp_path / "cli.png"
    assert main(cli_args(texture_dir, tmp_path / "nope.png", out)) == 1
    assert "[error]" in capsys.readouterr().err
