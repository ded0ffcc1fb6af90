"""Command-line entry point: build a model from an input directory and report it."""
from __future__ import annotations

import argparse
import logging
import sys

from .base.model import Model
from .errors import ModelBuildError
from .rng import make_rng


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lsqt-build',
        description='Build the tight-binding model and disorder fields described by an input directory.',
    )
    parser.add_argument('input_dir', help='directory holding para.in, energy.in and the model files')
    parser.add_argument('--seed', type=int, default=None,
                        help='fixed random seed (default: seed from system entropy)')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')
    rng = make_rng(args.seed)
    try:
        Model.from_directory(args.input_dir, rng)
    except ModelBuildError as exc:
        logging.error(str(exc))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
