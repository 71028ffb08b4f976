import io
import json
from pathlib import Path

import pytest
from PIL import Image

from campaign_creatives.cli import main
from campaign_creatives.exceptions import ConfigurationError, InvalidCampaignError
from campaign_creatives.imaging.variants import ASPECT_RATIOS
from campaign_creatives.pipeline import RunConfig, run_pipeline


def _write_brief(path: Path, names: list[str]) -> Path:
    brief_file = path / "brief.yaml"
    product_lines = "\n".join(f"  - name: {name}\n    description: {name} in autumn" for name in names)
    brief_file.write_text(
        f"""campaign_message: Your cozy fall ritual starts here.
target_region: US
target_audience: Active adults 18-50
products:
{product_lines}
""",
        encoding="utf-8",
    )
    return brief_file


def _write_png(path: Path, size: tuple[int, int]) -> None:
    Image.new("RGB", size, (120, 80, 40)).save(path, format="PNG")


def test_pipeline_reuses_and_generates_assets(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    assets.mkdir()
    _write_png(assets / "coffee_mug.png", (800, 600))
    output = tmp_path / "output"

    config = RunConfig(
        brief_path=_write_brief(tmp_path, ["Coffee", "Scented Candle"]),
        assets=str(assets),
        output_root=output,
    )
    manifest, metrics = run_pipeline(config)

    for product_dir in ("Coffee", "Scented_Candle"):
        for aspect_key, size in ASPECT_RATIOS.items():
            creative = output / product_dir / aspect_key / "creative.png"
            assert creative.exists()
            assert Image.open(creative).size == size

    assert (assets / "Scented_Candle_gen.png").exists()
    assert [entry["provenance"] for entry in manifest["products"]] == ["found", "generated"]
    assert metrics["assets_reused"] == 1
    assert metrics["assets_generated"] == 1
    assert metrics["total_creatives_produced"] == 6
    assert json.loads((output / "metrics.json").read_text(encoding="utf-8"))["total_products_processed"] == 2
    assert (output / "manifest.json").exists()
    assert "Scented Candle: source image generated" in (output / "README.md").read_text(encoding="utf-8")


def test_second_run_reuses_written_back_asset(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    assets.mkdir()
    config = RunConfig(
        brief_path=_write_brief(tmp_path, ["Coffee", "Candle"]),
        assets=str(assets),
        output_root=tmp_path / "output",
    )

    run_pipeline(config)
    _, metrics = run_pipeline(config)

    assert metrics["assets_reused"] == 2
    assert metrics["assets_generated"] == 0
    assert sorted(path.name for path in assets.iterdir()) == ["Candle_gen.png", "Coffee_gen.png"]


def test_single_product_brief_fails_before_output(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    assets.mkdir()
    config = RunConfig(
        brief_path=_write_brief(tmp_path, ["Coffee"]),
        assets=str(assets),
        output_root=tmp_path / "output",
    )

    with pytest.raises(InvalidCampaignError):
        run_pipeline(config)
    assert not (tmp_path / "output").exists()
    assert list(assets.iterdir()) == []


def test_s3_store_requires_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CREATIVES_S3_BUCKET", raising=False)
    config = RunConfig(
        brief_path=_write_brief(tmp_path, ["Coffee", "Candle"]),
        assets="assets",
        output_root=tmp_path / "output",
        asset_store="s3",
    )
    with pytest.raises(ConfigurationError):
        run_pipeline(config)


def test_cli_runs_end_to_end(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assets = tmp_path / "assets"
    assets.mkdir()
    output = tmp_path / "output"

    main(
        [
            "--brief",
            str(_write_brief(tmp_path, ["Coffee", "Candle"])),
            "--assets",
            str(assets),
            "--output",
            str(output),
            "--no-write-back",
        ]
    )

    assert "Total creatives produced: 6" in capsys.readouterr().out
    assert list(assets.iterdir()) == []
    creative = output / "Candle" / "9_16" / "creative.png"
    assert Image.open(io.BytesIO(creative.read_bytes())).size == (1440, 2560)


def test_cli_exits_nonzero_on_invalid_brief(tmp_path: Path) -> None:
    brief_file = tmp_path / "brief.json"
    brief_file.write_text("[]", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--brief", str(brief_file), "--assets", str(tmp_path), "--output", str(tmp_path / "out")])
    assert "Validation error" in str(exc.value.code)


def test_product_name_with_parent_segments_stays_inside_output_root(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    assets.mkdir()
    output = tmp_path / "run" / "output"

    config = RunConfig(
        brief_path=_write_brief(tmp_path, ["../escaped", "Candle"]),
        assets=str(assets),
        output_root=output,
    )
    manifest, _ = run_pipeline(config)

    assert not (tmp_path / "run" / "escaped").exists()
    assert (output / ".._escaped" / "1_1" / "creative.png").exists()
    for entry in manifest["products"]:
        for written in entry["output_files"].values():
            assert Path(written).resolve().is_relative_to(output.resolve())
