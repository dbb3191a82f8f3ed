import argparse
import logging
import mimetypes
import os
import sys
from pathlib import Path

from pressroom.adapters.pillow_codec import PillowImageCodec
from pressroom.adapters.soup_parser import SoupMarkupParser
from pressroom.components.imagegate import create_gate
from pressroom.components.sanitizer import (
    ValidateContentInput,
    ValidateMetadataInput,
    run_validate,
    run_validate_metadata,
)
from pressroom.core.errors import ImageRejected
from pressroom.rules.loader import load_rules
from pressroom.rules.provider import RulesProvider

logger = logging.getLogger("cli")

RULES_PATH = os.environ.get("PRESSROOM_RULES_PATH", "rules.yaml")


def get_rules(path: str) -> RulesProvider | None:
    rules_path = Path(path)
    if not rules_path.exists():
        logger.warning("Rules file %s not found, using built-in defaults.", rules_path)
        return None
    return RulesProvider(load_rules(rules_path))


def handle_validate(args: argparse.Namespace) -> int:
    rules = get_rules(args.rules)
    parser = SoupMarkupParser()
    raw_body = Path(args.file).read_text(encoding="utf-8")

    result = run_validate(ValidateContentInput(raw_body=raw_body), parser=parser, rules=rules)
    errors = list(result.errors)
    warnings = list(result.warnings)

    if args.title is not None:
        meta = run_validate_metadata(
            ValidateMetadataInput(title=args.title, excerpt=args.excerpt, slug=args.slug),
            parser=parser,
            rules=rules,
        )
        errors.extend(meta.errors)
        warnings.extend(meta.warnings)

    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)
    for error in errors:
        print(f"error: {error}", file=sys.stderr)

    if errors:
        return 1

    if args.out:
        Path(args.out).write_text(result.processed_content or "", encoding="utf-8")
        print(f"Sanitized content written to {args.out}")
    else:
        print(result.processed_content or "")
    return 0


def handle_compress(args: argparse.Namespace) -> int:
    rules = get_rules(args.rules)
    image_path = Path(args.image)
    mime_type = args.mime_type or mimetypes.guess_type(image_path.name)[0] or ""

    gate = create_gate(PillowImageCodec(), rules)
    try:
        asset = gate.ingest(image_path.read_bytes(), mime_type, args.context, args.current_count)
    except ImageRejected as e:
        print(f"error [{e.code}]: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if asset.was_compressed:
        print(
            f"Compressed {asset.original_size_label} -> {asset.new_size_label} "
            f"({asset.width}x{asset.height}, {asset.encode_passes} pass(es))"
        )
    else:
        print(f"Within budget ({asset.original_size_label}), no compression needed")

    if args.out:
        Path(args.out).write_bytes(asset.compressed_bytes)
        print(f"Written to {args.out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pressroom content pipeline CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate
    validate_parser = subparsers.add_parser("validate", help="Sanitize and validate a body")
    validate_parser.add_argument("file", help="HTML file to validate")
    validate_parser.add_argument("--title", help="Also validate this title")
    validate_parser.add_argument("--excerpt", help="Excerpt to validate with --title")
    validate_parser.add_argument("--slug", help="Slug to validate with --title")
    validate_parser.add_argument("--out", help="Write sanitized content here")

    # compress
    compress_parser = subparsers.add_parser("compress", help="Fit an image into a budget")
    compress_parser.add_argument("image", help="Image file")
    compress_parser.add_argument(
        "--context", default="content", help="Budget context (profile, content)"
    )
    compress_parser.add_argument("--mime-type", help="Override the guessed MIME type")
    compress_parser.add_argument(
        "--current-count", type=int, default=0, help="Images already attached"
    )
    compress_parser.add_argument("--out", help="Write the resulting image here")

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    if args.command == "validate":
        return handle_validate(args)
    elif args.command == "compress":
        return handle_compress(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
