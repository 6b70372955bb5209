#!/usr/bin/env python3
import logging
import sys

from device import query_device
from errors import DeviceFailure, InvalidInput
from monte_carlo import DEFAULT_SAMPLES, build_plan, monte_carlo_operation, report
from plan import MAX_SAMPLES


def parse_sample_count(text):
    # ASCII digits only; int() also accepts underscores, spaces and other scripts
    if not (text.isascii() and text.isdigit()):
        raise InvalidInput(f"invalid sample count: {text!r}")
    value = int(text)
    if value > MAX_SAMPLES:
        raise InvalidInput(f"sample count out of range: {text!r}")
    return value


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1:
        print(f"Usage: {sys.argv[0]} [samples]", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.WARNING,
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        total_samples = parse_sample_count(args[0]) if args else DEFAULT_SAMPLES
    except InvalidInput as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    try:
        device = query_device()
        plan = build_plan(total_samples, device)
        result = monte_carlo_operation(total_samples, plan, processes=device.compute_units)
    except DeviceFailure as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    report(device, plan, result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
