"""
Command line entry point.

Usage:
    python -m layernet datasets
    python -m layernet train --dataset xor --hidden 3 --epochs 2000
    python -m layernet serve --port 5000
"""

import argparse
import logging
import sys

from .config import DATA_PATH, DEFAULT_EPOCHS, DEFAULT_LEARNING_RATE
from .core.builders import build_network
from .core.errors import NetworkError
from .core.initializers import get_generator
from .core.training import Trainer, TrainingConfig, evaluate
from .datasets.toy import DATASETS, get_dataset, list_datasets
from .logging_config import setup_logging


def cmd_datasets(args) -> int:
    for name, info in list_datasets().items():
        print(f"{name:<10} inputs={info['n_inputs']}  {info['description']}")
    return 0


def cmd_train(args) -> int:
    X, y = get_dataset(args.dataset)
    sizes = [X.shape[1]] + args.hidden + [1]

    network = build_network(
        sizes,
        hidden_activation=args.activation,
        output_activation='sigmoid',
        generator=get_generator('uniform', low=-args.init_range, high=args.init_range, seed=args.seed),
    )
    print(f"Created: {network}")
    print(f"Dataset: {args.dataset} ({len(y)} samples)")

    config = TrainingConfig(
        epochs=args.epochs,
        learning_rate=args.rate,
        seed=args.seed,
        target_loss=args.target_loss,
    )
    history = Trainer(network, config).train(X, y)

    final = evaluate(network, X, y)
    print(f"Final loss: {final['loss']:.4f}")
    print(f"Final accuracy: {final['accuracy'] * 100:.1f}%")

    if args.save:
        from .core.persistence import NetworkStore
        store = NetworkStore(str(args.data_dir))
        network_id = store.save(
            network,
            name=f"{args.dataset}-{'_'.join(str(s) for s in sizes)}",
            history=history,
            metadata={'dataset': args.dataset, 'learning_rate': args.rate},
        )
        print(f"Saved as {network_id} in {args.data_dir}")

    if args.plot:
        from .visualization.plots import plot_training_history
        fig = plot_training_history(history, title=f"{args.dataset}: {network!r}")
        fig.savefig(args.plot, dpi=100, bbox_inches='tight')
        print(f"Plot written to {args.plot}")

    return 0


def cmd_serve(args) -> int:
    from .web.app import main as serve
    serve(host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='layernet',
        description='Layered feed-forward networks trained with backpropagation',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log training progress')
    subparsers = parser.add_subparsers(dest='command')

    datasets_parser = subparsers.add_parser('datasets', help='List toy datasets')
    datasets_parser.set_defaults(func=cmd_datasets)

    train_parser = subparsers.add_parser('train', help='Train a network on a toy dataset')
    train_parser.add_argument('--dataset', choices=sorted(DATASETS), default='xor')
    train_parser.add_argument('--hidden', type=int, nargs='*', default=[3],
                              help='Hidden layer sizes, e.g. --hidden 4 4')
    train_parser.add_argument('--activation', choices=['sigmoid', 'threshold', 'identity'],
                              default='sigmoid', help='Hidden layer activation')
    train_parser.add_argument('--epochs', type=int, default=DEFAULT_EPOCHS)
    train_parser.add_argument('--rate', type=float, default=DEFAULT_LEARNING_RATE)
    train_parser.add_argument('--init-range', type=float, default=0.5,
                              help='Initial weights are drawn from [-r, r)')
    train_parser.add_argument('--target-loss', type=float, default=None)
    train_parser.add_argument('--seed', type=int, default=None)
    train_parser.add_argument('--save', action='store_true', help='Save the trained network')
    train_parser.add_argument('--data-dir', default=str(DATA_PATH))
    train_parser.add_argument('--plot', metavar='PATH', help='Write a training history plot')
    train_parser.set_defaults(func=cmd_train)

    serve_parser = subparsers.add_parser('serve', help='Start the JSON web API')
    serve_parser.add_argument('--host', default='127.0.0.1')
    serve_parser.add_argument('--port', type=int, default=5000)
    serve_parser.add_argument('--debug', action='store_true')
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, 'func', None):
        parser.print_help()
        return 0

    setup_logging(logging.INFO if args.verbose else logging.WARNING)
    try:
        return args.func(args)
    except NetworkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
