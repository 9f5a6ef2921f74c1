"""
Persistence layer for trained networks.

Provides JSON file-based storage for network topologies, weights and
training histories.
"""

import os
import json
import hashlib
import shutil
from datetime import datetime
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
from filelock import FileLock

from .network import Network


@dataclass
class NetworkMetadata:
    """Metadata stored alongside a saved network."""
    network_id: str
    name: str
    created_at: str
    architecture: List[int]
    n_connections: int
    history: Dict[str, List[float]] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)


class NetworkStore:
    """
    File-based storage for networks.

    Storage structure:
        data/
        ├── index.json              # Quick lookup index
        └── networks/
            └── net_<timestamp>_<hash>/
                ├── metadata.json   # Name, architecture, history
                └── network.json    # Topology and weights
    """

    def __init__(self, base_path: str):
        self.base_path = Path(base_path)
        self.networks_dir = self.base_path / 'networks'
        self.index_file = self.base_path / 'index.json'

        self.networks_dir.mkdir(parents=True, exist_ok=True)

        if not self.index_file.exists():
            with self._get_lock(self.index_file):
                if not self.index_file.exists():
                    self._write_index({'version': '1.0', 'networks': {}})

    def _get_lock(self, file_path: Path) -> FileLock:
        """Get a file lock for atomic operations."""
        return FileLock(str(file_path) + '.lock')

    def _read_index(self) -> Dict:
        """Read the index file (caller should hold lock for read-modify-write)."""
        if self.index_file.exists():
            return json.loads(self.index_file.read_text())
        return {'version': '1.0', 'networks': {}}

    def _write_index(self, index: Dict):
        """Write the index file (caller should hold lock for read-modify-write)."""
        self.index_file.write_text(json.dumps(index, indent=2))

    def _update_index(self, network_id: str, entry: Optional[Dict]):
        """Set or remove (entry=None) one index entry under the lock."""
        with self._get_lock(self.index_file):
            index = self._read_index()
            if entry is None:
                index['networks'].pop(network_id, None)
            else:
                index['networks'][network_id] = entry
            self._write_index(index)

    def generate_network_id(self) -> str:
        """Generate a unique network ID."""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        random_hash = hashlib.sha256(os.urandom(16)).hexdigest()[:8]
        return f'net_{timestamp}_{random_hash}'

    def _get_network_dir(self, network_id: str) -> Path:
        return self.networks_dir / network_id

    def save(
        self,
        network: Network,
        name: str,
        history: Optional[Dict[str, List[float]]] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Save a network with its metadata.

        Returns:
            The new network ID.
        """
        network_id = self.generate_network_id()
        net_dir = self._get_network_dir(network_id)
        net_dir.mkdir(parents=True, exist_ok=True)

        meta = NetworkMetadata(
            network_id=network_id,
            name=name,
            created_at=datetime.now().isoformat(),
            architecture=[len(layer) for layer in network.layers],
            n_connections=network.n_connections,
            history=history or {},
            extra=metadata or {},
        )

        (net_dir / 'network.json').write_text(json.dumps(network.to_dict(), indent=2))
        (net_dir / 'metadata.json').write_text(json.dumps(asdict(meta), indent=2))

        self._update_index(network_id, {
            'name': name,
            'created_at': meta.created_at,
            'architecture': meta.architecture,
            'final_loss': meta.history['loss'][-1] if meta.history.get('loss') else None,
        })
        return network_id

    def load(self, network_id: str) -> Optional[Network]:
        """Load a saved network, or None if it does not exist."""
        network_file = self._get_network_dir(network_id) / 'network.json'
        if not network_file.exists():
            return None
        return Network.from_dict(json.loads(network_file.read_text()))

    def load_metadata(self, network_id: str) -> Optional[NetworkMetadata]:
        metadata_file = self._get_network_dir(network_id) / 'metadata.json'
        if not metadata_file.exists():
            return None
        return NetworkMetadata(**json.loads(metadata_file.read_text()))

    def list_networks(self, limit: int = 100, offset: int = 0) -> List[Dict]:
        """
        List saved networks, newest first.

        Returns index entries (not full metadata) for efficiency.
        """
        index = self._read_index()
        networks = [
            {'network_id': net_id, **info}
            for net_id, info in index['networks'].items()
        ]
        networks.sort(key=lambda x: x.get('created_at', ''), reverse=True)
        return networks[offset:offset + limit]

    def delete(self, network_id: str) -> bool:
        """Delete a network and its files."""
        net_dir = self._get_network_dir(network_id)
        if not net_dir.exists():
            return False

        shutil.rmtree(net_dir)
        self._update_index(network_id, None)
        return True

    def get_statistics(self) -> Dict:
        """Get aggregate statistics about stored networks."""
        index = self._read_index()
        networks = index['networks']

        stats = {
            'total': len(networks),
            'by_architecture': {},
        }
        for info in networks.values():
            arch = '-'.join(str(n) for n in info.get('architecture', [])) or 'unknown'
            stats['by_architecture'][arch] = stats['by_architecture'].get(arch, 0) + 1

        return stats
