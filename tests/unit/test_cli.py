import io

from PIL import Image

from pressroom.cli import main


def test_validate_prints_sanitized(tmp_path, rules_path, capsys):
    src = tmp_path / "post.html"
    src.write_text("<p>Hi</p><script>x()</script>", encoding="utf-8")

    code = main(["--rules", str(rules_path), "validate", str(src)])

    assert code == 0
    assert capsys.readouterr().out.strip() == "<p>Hi</p>"


def test_validate_writes_out_file(tmp_path, rules_path):
    src = tmp_path / "post.html"
    src.write_text('<p class="MsoNormal">Hi</p>', encoding="utf-8")
    out = tmp_path / "clean.html"

    code = main(["--rules", str(rules_path), "validate", str(src), "--out", str(out)])

    assert code == 0
    assert out.read_text(encoding="utf-8") == "<p>Hi</p>"


def test_validate_bad_title_fails(tmp_path, rules_path, capsys):
    src = tmp_path / "post.html"
    src.write_text("<p>Hi</p>", encoding="utf-8")

    code = main(["--rules", str(rules_path), "validate", str(src), "--title", ""])

    assert code == 1
    assert "error: Title is required" in capsys.readouterr().err


def test_validate_without_rules_file_uses_defaults(tmp_path):
    src = tmp_path / "post.html"
    src.write_text("<p>Hi</p>", encoding="utf-8")

    assert main(["--rules", str(tmp_path / "missing.yaml"), "validate", str(src)]) == 0


def test_compress_small_image(tmp_path, rules_path, capsys):
    image = tmp_path / "avatar.png"
    Image.new("RGB", (32, 32), (0, 128, 0)).save(image)
    out = tmp_path / "out.png"

    code = main(
        ["--rules", str(rules_path), "compress", str(image), "--context", "profile", "--out", str(out)]
    )

    assert code == 0
    assert "no compression needed" in capsys.readouterr().out
    assert out.read_bytes() == image.read_bytes()


def test_compress_large_image(tmp_path, rules_path, capsys):
    image = tmp_path / "hero.png"
    Image.linear_gradient("L").convert("RGB").resize((1000, 800)).save(image, compress_level=0)

    code = main(["--rules", str(rules_path), "compress", str(image), "--context", "profile"])

    assert code == 0
    assert "Compressed" in capsys.readouterr().out


def test_compress_quota_exceeded(tmp_path, rules_path, capsys):
    image = tmp_path / "pic.png"
    buf = io.BytesIO()
    Image.new("RGB", (8, 8)).save(buf, format="PNG")
    image.write_bytes(buf.getvalue())

    code = main(["--rules", str(rules_path), "compress", str(image), "--current-count", "2"])

    assert code == 1
    assert "quota_exceeded" in capsys.readouterr().err


def test_compress_unknown_context(tmp_path, rules_path, capsys):
    image = tmp_path / "pic.png"
    Image.new("RGB", (8, 8)).save(image)

    code = main(["--rules", str(rules_path), "compress", str(image), "--context", "banner"])

    assert code == 1
    assert "Unknown image context" in capsys.readouterr().err
