#!/usr/bin/env python3
"""
Quick Start - Minimal example to get started with layernet.

Run this script to watch a small network learn XOR.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from layernet.core.builders import build_network
from layernet.core.initializers import uniform
from layernet.core.training import Trainer, TrainingConfig, evaluate
from layernet.datasets.toy import get_dataset

print("layernet - Quick Start")
print("=" * 40)

# 2 inputs, 3 sigmoid hidden units, 1 sigmoid output
network = build_network([2, 3, 1], generator=uniform(-1, 1, seed=0))
print(f"\nCreated: {network}")

X, y = get_dataset('xor')
print(f"Dataset: XOR ({len(y)} samples)")

print("\nTraining...")
history = Trainer(network, TrainingConfig(epochs=5000, learning_rate=0.5, seed=0)).train(X, y)

final = evaluate(network, X, y)
print(f"\nFinal loss: {final['loss']:.4f}")
print(f"Final accuracy: {final['accuracy'] * 100:.1f}%")

for x, target in zip(X, y):
    print(f"  {x.tolist()} -> {network.forward(x)[0]:.3f} (target {target})")
