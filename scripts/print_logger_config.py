import argparse
import json
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from logline.config import load_settings


def parse_args():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default=None)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = load_settings(args.config)
    payload = {
        "output": settings.output,
        "detached": settings.detached,
        "json_mode": settings.json_mode.value,
        "ensure_ascii": settings.ensure_ascii,
        "stack_filters": list(settings.stack_filters),
        "fields": settings.fields,
    }
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
