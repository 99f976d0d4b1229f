# lineshift/main.py

import argparse
import logging

from lineshift.api.schemas import SimulationConfig
from lineshift.simulation.pipeline import ManufacturingSystem


def prompt_int(label: str) -> int:
    return int(input(label).strip())


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="lineshift (DES model of a five-stage production line)")
    parser.add_argument("--shift-length", type=int, help="Shift duration in hours")
    parser.add_argument("--shifts", type=int, help="Number of shifts")
    parser.add_argument("--seed", type=int, default=None, help="Seed for machine breakdowns")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every DES event")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Configure logging: show timestamp + level
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    shift_length = args.shift_length if args.shift_length is not None else prompt_int("Enter shift duration (in hours): ")
    shifts = args.shifts if args.shifts is not None else prompt_int("Enter number of shifts: ")

    config = SimulationConfig(shift_length_hours=shift_length, total_shifts=shifts, seed=args.seed)
    system = ManufacturingSystem(config)
    results = system.run()

    print("\nSimulation Results:")
    print("-------------------")
    print(f"Total Products Completed: {results.completed_count}")
    print(f"Total Simulation Time: {results.elapsed_time:.2f}")
    print("-------------------")
    return results


if __name__ == "__main__":
    main()
