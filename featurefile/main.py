# FILE: featurefile/main.py
# ------------------------------------------------------------------------------
import argparse
import json
import math
import sys

from featurefile.config import LOG_FORMATS, Config
from featurefile.decode.parser import FeatureFileDecoder
from featurefile.diagnostics.sink import LoggingSink
from featurefile.errors.fatal import ConfigError, FeatureFileError, SchemaError
from featurefile.metrics.counters import Metrics
from featurefile.schema.loader import load_schema
from featurefile_logging import setup_logging

EXIT_OK = 0
EXIT_DECODE_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="featurefile", description="Decode binary per-frame feature files")
    parser.add_argument("files", nargs="+", help="Feature files to decode")
    parser.add_argument("--schema", help="JSON/YAML feature schema (default: $FEATURE_SCHEMA_PATH)")
    parser.add_argument("--json", action="store_true", help="Print decoded values as JSON (NaN/inf become null)")
    parser.add_argument("--log-format", choices=LOG_FORMATS, help="Override LOG_FORMAT")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    return parser


def _json_values(values):
    if values.dtype.kind != "f":
        return values.tolist()
    # Strict JSON has no NaN/Infinity tokens.
    return [v if math.isfinite(v) else None for v in values.tolist()]


def _summarize(path, features):
    return {
        "file": path,
        "frames": max(0, features.frame_count),
        "features": {name: str(values.dtype) for name, values in features.items()},
        "skipped": list(features.skipped),
    }


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = Config()
        logger = setup_logging(
            "featurefile",
            level=args.log_level or config.log_level,
            log_format=args.log_format or config.log_format,
            log_dir=config.log_dir,
            max_bytes=config.log_max_bytes,
            backup_count=config.log_backup_count,
        )
        schema_path = args.schema or config.require_schema_path()
        decoder = FeatureFileDecoder(load_schema(schema_path), sink=LoggingSink(logger.getChild("decoder")))
    except (ConfigError, SchemaError) as e:
        print(f"featurefile: {e.message} | Context: {e.context}", file=sys.stderr)
        return EXIT_USAGE

    metrics = Metrics()
    results = []
    for path in args.files:
        try:
            features = decoder.decode_file(path)
        except (FeatureFileError, OSError) as e:
            metrics.inc_failed()
            results.append({"file": path, "error": str(e)})
            continue

        summary = _summarize(path, features)
        metrics.inc_skipped(len(features.skipped))
        metrics.inc_decoded(summary["frames"])
        if args.json:
            summary["values"] = {name: _json_values(values) for name, values in features.items()}
        results.append(summary)

    if args.json:
        print(json.dumps({"results": results, "metrics": metrics.as_dict()}, indent=2, allow_nan=False))
    else:
        for item in results:
            if "error" in item:
                print(f"{item['file']}: FAILED ({item['error']})")
            else:
                print(f"{item['file']}: {item['frames']} frames, {len(item['features'])} features")
        print(" ".join(f"{k}={v}" for k, v in metrics.as_dict().items()))

    return EXIT_DECODE_FAILED if metrics.files_failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
