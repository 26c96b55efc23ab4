import argparse
import os
import sys
import threading

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from logline.app import load_logger


def parse_args():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default=None)
    parser.add_argument("--threads", type=int, default=2)
    return parser.parse_args()


def _worker(logger, index: int) -> None:
    logger.add_isolated_fields({"worker": index})
    logger.info_with_data("worker started", {"index": index})
    try:
        raise RuntimeError(f"worker {index} failed")
    except RuntimeError as exc:
        logger.exception(exc, data={"index": index})


def main() -> None:
    args = parse_args()
    with load_logger(args.config) as logger:
        logger.add_fields({"script": "emit_sample_lines"})
        logger.info("sample run started")
        threads = [
            threading.Thread(target=_worker, args=(logger, index)) for index in range(args.threads)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        logger.warn("sample run finished")


if __name__ == "__main__":
    main()
