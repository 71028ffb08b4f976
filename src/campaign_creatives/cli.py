from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from campaign_creatives.brief_loader import BriefValidationError
from campaign_creatives.pipeline import RunConfig, run_pipeline


def _load_env_file(env_path: Path) -> None:
    """Export ``KEY=value`` pairs from *env_path*; variables already set win."""
    if not env_path.is_file():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        os.environ.setdefault(key, value)


def _env_file_candidates() -> list[Path]:
    # Checkout root first, then the invocation directory.
    candidates = [Path(__file__).resolve().parents[2] / ".env", Path.cwd() / ".env"]
    return list(dict.fromkeys(candidates))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate campaign creatives for every product and aspect ratio")
    parser.add_argument("--brief", "-b", required=True, help="Path to campaign brief (.yaml/.yml/.json)")
    parser.add_argument(
        "--assets",
        "-a",
        required=True,
        help="Input assets folder (a local path, or a key prefix with --asset-store s3)",
    )
    parser.add_argument("--output", "-o", required=True, help="Output root folder")
    parser.add_argument("--provider", choices=["mock", "real"], default="mock", help="Provider mode")
    parser.add_argument(
        "--backend",
        choices=["developer", "vertex", "openai"],
        default="developer",
        help="Image generation backend used when --provider real",
    )
    parser.add_argument(
        "--model",
        default=os.getenv("IMAGE_MODEL"),
        help="Image model name (defaults per backend)",
    )
    parser.add_argument(
        "--asset-store",
        choices=["local", "s3"],
        default="local",
        help="Where the asset collection lives.",
    )
    parser.add_argument(
        "--mirror-output",
        action="store_true",
        help="Also upload every creative to the S3 bucket configured in the environment.",
    )
    parser.add_argument(
        "--no-write-back",
        dest="write_back",
        action="store_false",
        help="Do not store generated product images back into the asset collection.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    for env_path in _env_file_candidates():
        _load_env_file(env_path)
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")

    config = RunConfig(
        brief_path=Path(args.brief),
        assets=args.assets,
        output_root=Path(args.output),
        provider_mode=args.provider,
        image_backend=args.backend,
        image_model=args.model,
        asset_store=args.asset_store,
        mirror_output=args.mirror_output,
        write_back=args.write_back,
    )

    try:
        _, metrics = run_pipeline(config)
    except BriefValidationError as exc:
        raise SystemExit(f"Validation error:\n{exc}") from exc
    except Exception as exc:
        raise SystemExit(f"Pipeline failed: {exc}") from exc

    print("Run metrics")
    print(f"- Total products processed: {metrics['total_products_processed']}")
    print(f"- Assets reused: {metrics['assets_reused']}")
    print(f"- Assets generated: {metrics['assets_generated']}")
    print(f"- Total creatives produced: {metrics['total_creatives_produced']}")
    print(f"- Execution time (s): {metrics['execution_time_seconds']}")


if __name__ == "__main__":
    main()
