import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from campaign_creatives.assets.resolver import ResolvedSource
from campaign_creatives.exceptions import GenerationError, InvalidCampaignError
from campaign_creatives.imaging.compositor import Creative, compose
from campaign_creatives.imaging.variants import ASPECT_RATIOS
from campaign_creatives.models.brief import CampaignBrief
from campaign_creatives.output.writer import OutputSink
from campaign_creatives.pipeline import DEFAULT_CAMPAIGN_MESSAGE, creative_path, run_campaign


class RecordingSink(OutputSink):
    def __init__(self) -> None:
        self.writes: list[tuple[str, bytes]] = []

    def write(self, logical_path: str, data: bytes) -> str:
        self.writes.append((logical_path, data))
        return logical_path


def _png_bytes(size: tuple[int, int] = (64, 48)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (90, 60, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def _brief(*names: str, message: str | None = "Hello") -> CampaignBrief:
    return CampaignBrief.model_validate(
        {
            "campaign_message": message,
            "target_region": "US",
            "products": [{"name": name, "description": f"{name} on a table"} for name in names],
        }
    )


def _resolver() -> MagicMock:
    resolver = MagicMock()
    resolver.resolve.side_effect = lambda product: ResolvedSource(product, _png_bytes(), "found", "x.png")
    return resolver


def test_single_product_campaign_is_rejected_before_any_work() -> None:
    resolver = _resolver()
    compositor = MagicMock()
    sink = RecordingSink()

    with pytest.raises(InvalidCampaignError):
        run_campaign(_brief("Coffee"), resolver, sink, compositor=compositor)

    resolver.resolve.assert_not_called()
    compositor.assert_not_called()
    assert sink.writes == []


def test_two_products_produce_six_creatives_in_order() -> None:
    sink = RecordingSink()

    manifest = run_campaign(_brief("Coffee", "Candle"), _resolver(), sink)

    assert [path for path, _ in sink.writes] == [
        "Coffee/1_1/creative.png",
        "Coffee/16_9/creative.png",
        "Coffee/9_16/creative.png",
        "Candle/1_1/creative.png",
        "Candle/16_9/creative.png",
        "Candle/9_16/creative.png",
    ]
    for path, data in sink.writes:
        aspect_key = path.split("/")[1]
        assert Image.open(io.BytesIO(data)).size == ASPECT_RATIOS[aspect_key]
    assert [entry.product_name for entry in manifest.products] == ["Coffee", "Candle"]
    assert manifest.products[0].output_files["16_9"] == "Coffee/16_9/creative.png"


def test_resolver_called_once_per_product() -> None:
    resolver = _resolver()
    run_campaign(_brief("Coffee", "Candle", "Jacket"), resolver, RecordingSink())
    assert [call.args[0].name for call in resolver.resolve.call_args_list] == ["Coffee", "Candle", "Jacket"]


def test_missing_message_falls_back_to_placeholder() -> None:
    compositor = MagicMock(side_effect=lambda source, aspect_key, message: compose(source, aspect_key, message))

    manifest = run_campaign(_brief("Coffee", "Candle", message="  "), _resolver(), RecordingSink(), compositor=compositor)

    assert manifest.campaign_message == DEFAULT_CAMPAIGN_MESSAGE
    assert {call.args[2] for call in compositor.call_args_list} == {DEFAULT_CAMPAIGN_MESSAGE}


def test_first_failure_aborts_the_run() -> None:
    resolver = MagicMock()
    resolver.resolve.side_effect = [
        ResolvedSource(MagicMock(), _png_bytes(), "found"),
        GenerationError("quota exceeded"),
        ResolvedSource(MagicMock(), _png_bytes(), "found"),
    ]
    sink = RecordingSink()

    with pytest.raises(GenerationError):
        run_campaign(_brief("Coffee", "Candle", "Jacket"), resolver, sink)

    assert len(sink.writes) == 3
    assert resolver.resolve.call_count == 2


def test_creative_path_replaces_whitespace() -> None:
    assert creative_path("Autumn  Jacket", "9_16") == "Autumn_Jacket/9_16/creative.png"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("../escaped", ".._escaped/1_1/creative.png"),
        ("Mugs/Cups", "Mugs_Cups/1_1/creative.png"),
        ("Mugs\\Cups", "Mugs_Cups/1_1/creative.png"),
        ("..", "product/1_1/creative.png"),
        (".", "product/1_1/creative.png"),
    ],
)
def test_creative_path_keeps_each_product_in_one_directory(name: str, expected: str) -> None:
    assert creative_path(name, "1_1") == expected


def test_compositor_output_is_handed_to_sink_verbatim() -> None:
    compositor = MagicMock(return_value=Creative("1_1", 1, 1, b"encoded"))
    sink = RecordingSink()

    run_campaign(_brief("Coffee", "Candle"), _resolver(), sink, compositor=compositor)

    assert {data for _, data in sink.writes} == {b"encoded"}
