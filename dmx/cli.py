"""DM-X CLI: encode text to pixel barcodes and decode them back."""

import argparse
import sys

from dmx.canvas import Canvas
from dmx.codec import Codec
from dmx.logging import audit, get_logger, setup_logging
from dmx.samples import DEMO_MESSAGES, SAMPLES

log = get_logger("cli")


def _decode_and_show(codec: Codec, canvas: Canvas):
    codec.load_pattern(canvas)
    if codec.decode():
        codec.render_pattern()
    codec.render_text()


def _encode_and_show(codec: Codec, text: str) -> bool:
    if not codec.load_text(text):
        print(f"error: cannot encode {text!r}", file=sys.stderr)
        return False
    if codec.encode():
        codec.render_pattern()
    codec.render_text()
    return True


def cmd_encode(args) -> int:
    """Encode TEXT and print the pattern."""
    return 0 if _encode_and_show(Codec(), args.text) else 1


def cmd_decode(args) -> int:
    """Decode a built-in sample or pattern rows read from stdin."""
    rows = SAMPLES[args.sample] if args.sample else sys.stdin.read().splitlines()
    try:
        canvas = Canvas.from_rows(rows)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    _decode_and_show(Codec(), canvas)
    return 0


def cmd_demo(args) -> int:
    """Decode both samples, then encode the demo messages."""
    codec = Codec()
    for name in sorted(SAMPLES):
        _decode_and_show(codec, Canvas.from_rows(SAMPLES[name]))
    ok = all([_encode_and_show(codec, message) for message in DEMO_MESSAGES])
    return 0 if ok else 1


def cmd_map(args) -> int:
    """Print how the pixels of an encoded TEXT are assigned."""
    from dmx.modulemap import get_module_map

    codec = Codec()
    if not codec.load_text(args.text) or not codec.encode():
        print(f"error: cannot encode {args.text!r}", file=sys.stderr)
        return 1

    module_map = get_module_map(codec)
    print(f"Signal {module_map['width']}x{module_map['height']} ({module_map['char_count']} chars)")
    print(f"  Frame:   {len(module_map['frame_positions']):4d} pixels")
    print(f"  Timing:  {len(module_map['timing_positions']):4d} pixels")
    print(f"  Data:    {len(module_map['data_positions']):4d} pixels")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dmx", description="DM-X: stacked pixel barcode codec")

    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--json-logs", action="store_true", help="Use JSON log format on stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    p_enc = subparsers.add_parser("encode", help="Encode text into a pattern")
    p_enc.add_argument("text", help="Text to encode (8-bit characters)")

    p_dec = subparsers.add_parser("decode", help="Decode a pattern (stdin unless --sample)")
    p_dec.add_argument("--sample", default=None, choices=sorted(SAMPLES), help="Decode a built-in sample")

    subparsers.add_parser("demo", help="Decode the samples and encode the demo messages")

    p_map = subparsers.add_parser("map", help="Summarize the pixel map of encoded text")
    p_map.add_argument("text", help="Text to encode")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    else:
        level = "INFO"
    setup_logging(level=level, log_file=args.log_file, json_format=args.json_logs)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "encode": cmd_encode,
        "decode": cmd_decode,
        "demo": cmd_demo,
        "map": cmd_map,
    }
    status = commands[args.command](args)
    audit("cli.done", logger=log, command=args.command, status=status)
    return status


if __name__ == "__main__":
    sys.exit(main())
