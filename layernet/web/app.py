"""
Flask web application for layernet.

A JSON API to build networks, run them forward, train them on toy
datasets and save them to a NetworkStore.
"""

import logging
import uuid
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, request

from ..config import DATA_PATH, DEFAULT_LEARNING_RATE
from ..core.activations import Activation, list_activations
from ..core.builders import build_network
from ..core.errors import InvalidArgument
from ..core.initializers import get_generator
from ..core.network import Network
from ..core.persistence import NetworkStore
from ..core.training import Trainer, TrainingConfig, evaluate
from ..datasets.toy import get_dataset, list_datasets

logger = logging.getLogger(__name__)

MAX_EPOCHS = 5000


def _param(data: Dict[str, Any], key: str, default: Any, cast: Callable[[Any], Any]):
    """Read an optional request field, reporting bad values as InvalidArgument."""
    value = data.get(key, default)
    if value is None:
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"Invalid value for '{key}': {value!r}") from None


def _parse_activation(value: Any):
    """Accept a registry name or a serialized Activation."""
    if isinstance(value, dict):
        return Activation.from_dict(value)
    return value


def _network_card(network_id: str, network: Network) -> Dict[str, Any]:
    return {
        'id': network_id,
        'architecture': [len(layer) for layer in network.layers],
        'n_connections': network.n_connections,
        'network': network.to_dict(),
    }


def create_app(store_path: Optional[str] = None, use_store: bool = True):
    """
    Create and configure the Flask application.

    Args:
        store_path: Directory for saved networks (defaults to config.DATA_PATH)
        use_store: Set False to run without any on-disk storage
    """
    app = Flask(__name__)

    store = NetworkStore(str(store_path or DATA_PATH)) if use_store else None

    # Networks built during this app's lifetime
    networks: Dict[str, Network] = {}

    def get_network(network_id: str) -> Optional[Network]:
        return networks.get(network_id)

    def not_found(network_id: str):
        return jsonify({'error': f'Network {network_id} not found'}), 404

    @app.errorhandler(ValueError)
    def handle_value_error(e):
        # NetworkError subclasses ValueError; registry lookups raise plain ValueError
        return jsonify({'error': str(e), 'type': type(e).__name__}), 400

    @app.route('/api/activations')
    def api_activations():
        """List available activation functions."""
        return jsonify(list_activations())

    @app.route('/api/datasets')
    def api_datasets():
        """List available datasets."""
        return jsonify(list_datasets())

    @app.route('/api/networks', methods=['GET'])
    def api_list_networks():
        """List networks built in this session."""
        return jsonify({
            'networks': [
                {'id': net_id, 'architecture': [len(layer) for layer in net.layers]}
                for net_id, net in networks.items()
            ]
        })

    @app.route('/api/networks', methods=['POST'])
    def api_create_network():
        """Build a fully connected network."""
        data = request.get_json(silent=True) or {}

        generator = None
        if data.get('generator'):
            params = dict(data.get('generator_params', {}))
            if 'seed' in data and data['generator'] != 'constant':
                params.setdefault('seed', data['seed'])
            generator = get_generator(data['generator'], **params)

        network = build_network(
            data.get('layers', [2, 2, 1]),
            hidden_activation=_parse_activation(data.get('hidden_activation', 'sigmoid')),
            output_activation=_parse_activation(data.get('output_activation', 'sigmoid')),
            generator=generator,
        )

        network_id = uuid.uuid4().hex[:8]
        networks[network_id] = network
        logger.info("Created network %s: %r", network_id, network)
        return jsonify(_network_card(network_id, network)), 201

    @app.route('/api/networks/<network_id>')
    def api_network(network_id):
        """Get topology and weights of a network."""
        network = get_network(network_id)
        if network is None:
            return not_found(network_id)
        return jsonify(_network_card(network_id, network))

    @app.route('/api/networks/<network_id>/forward', methods=['POST'])
    def api_forward(network_id):
        """Run one input vector through a network."""
        network = get_network(network_id)
        if network is None:
            return not_found(network_id)

        data = request.get_json(silent=True) or {}
        outputs = network.forward(data.get('inputs', []))
        return jsonify({'outputs': outputs})

    @app.route('/api/networks/<network_id>/train', methods=['POST'])
    def api_train(network_id):
        """Train a network on a named dataset or on explicit samples."""
        network = get_network(network_id)
        if network is None:
            return not_found(network_id)

        data = request.get_json(silent=True) or {}
        if 'X' in data:
            X, y = data['X'], data.get('y', [])
        else:
            params = data.get('dataset_params') or {}
            if not isinstance(params, dict):
                raise InvalidArgument(f"dataset_params must be an object, got {params!r}")
            try:
                X, y = get_dataset(data.get('dataset', 'xor'), **params)
            except TypeError as e:
                raise InvalidArgument(f"Invalid dataset parameters: {e}") from None

        epochs = _param(data, 'epochs', 500, int)
        if epochs is None:
            raise InvalidArgument("epochs must be an integer, got None")
        config = TrainingConfig(
            epochs=min(epochs, MAX_EPOCHS),
            learning_rate=_param(data, 'learning_rate', DEFAULT_LEARNING_RATE, float),
            seed=_param(data, 'seed', None, int),
            record_every=_param(data, 'record_every', 10, int),
            target_loss=_param(data, 'target_loss', None, float),
        )
        history = Trainer(network, config).train(X, y)

        return jsonify({
            'history': history,
            'final': evaluate(network, X, y),
            'weights': network.get_weights(),
        })

    @app.route('/api/networks/<network_id>/save', methods=['POST'])
    def api_save(network_id):
        """Persist a network to the store."""
        if store is None:
            return jsonify({'error': 'No network store configured'}), 400
        network = get_network(network_id)
        if network is None:
            return not_found(network_id)

        data = request.get_json(silent=True) or {}
        saved_id = store.save(
            network,
            name=data.get('name', network_id),
            history=data.get('history'),
            metadata=data.get('metadata'),
        )
        return jsonify({'saved_id': saved_id}), 201

    @app.route('/api/saved')
    def api_saved():
        """List networks in the store."""
        if store is None:
            return jsonify({'networks': []})
        return jsonify({'networks': store.list_networks()})

    @app.route('/api/saved/<saved_id>/load', methods=['POST'])
    def api_load(saved_id):
        """Load a stored network into this session."""
        if store is None:
            return jsonify({'error': 'No network store configured'}), 400
        network = store.load(saved_id)
        if network is None:
            return jsonify({'error': f'Saved network {saved_id} not found'}), 404

        network_id = uuid.uuid4().hex[:8]
        networks[network_id] = network
        return jsonify(_network_card(network_id, network)), 201

    return app


def main(host: str = '127.0.0.1', port: int = 5000, debug: bool = False):
    """Run the Flask development server."""
    app = create_app()
    print("\n" + "=" * 60)
    print("layernet - feed-forward networks over HTTP")
    print("=" * 60)
    print(f"\nStarting server at http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    main()
