#!/usr/bin/env python3
"""
Utility script to run NEAT examples easily.

Usage:
    python scripts/run_example.py cartpole
    python scripts/run_example.py cartpole --generations 10 --log-level DEBUG
    python scripts/run_example.py cartpole --resume
"""

import sys
import argparse
from pathlib import Path

from loguru import logger

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from neatris import Config, Trainer
from neatris.utils import setup_logger
from examples.trial_cartpole import CartPoleSimulation


EXAMPLES = {
    'cartpole': {
        'simulation': CartPoleSimulation,
        'input_size': CartPoleSimulation.INPUT_SIZE,
        'config': 'examples/configs/config_cartpole.ini',
        'description': 'CartPole control problem'
    }
}


def main():
    parser = argparse.ArgumentParser(description='Run NEAT examples')
    parser.add_argument('example', choices=EXAMPLES.keys(),
                        help='Example to run')
    parser.add_argument('--config', type=str, default=None,
                        help='Configuration file (defaults to the example configuration)')
    parser.add_argument('--generations', type=int, default=None,
                        help='Number of generations (defaults to the configured number)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed of the pool random generator')
    parser.add_argument('--resume', action='store_true',
                        help='Resume from the configured pool file')
    parser.add_argument('--log-dir', type=str, default='logs',
                        help='Directory for log files')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')

    args = parser.parse_args()

    setup_logger(log_dir=args.log_dir, level=args.log_level)

    example = EXAMPLES[args.example]
    logger.info("Running {}...", example['description'])

    config  = Config(args.config or example['config'])
    trainer = Trainer(config, example['input_size'], example['simulation'], seed=args.seed)
    trainer.init()

    if args.resume and not trainer.load():
        logger.error("Could not resume from '{}'", config.pool_file)
        sys.exit(1)

    trainer.run(max_generations=args.generations)
    trainer.save()

    logger.info("Best fitness: {} after {} generations", trainer.max_fitness, trainer.generation)


if __name__ == '__main__':
    main()
