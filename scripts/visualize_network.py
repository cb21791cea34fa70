#!/usr/bin/env python3
"""
Utility script to visualize a saved network.

Usage:
    python scripts/visualize_network.py --network xor_network.bin
"""

import sys
import argparse
from pathlib import Path

from stacknet.phenotype import Network


def main():
    parser = argparse.ArgumentParser(description='Visualize a saved network')
    parser.add_argument('--network', type=str, required=True,
                        help='Path to a file written by Network.save()')
    parser.add_argument('--output', type=str, default='network',
                        help='Output filename (without extension)')
    parser.add_argument('--format', type=str, default='png',
                        choices=['png', 'pdf', 'svg'],
                        help='Output format')
    parser.add_argument('--no-view', action='store_true',
                        help='Do not automatically open the generated file')

    args = parser.parse_args()

    # Load network
    try:
        network = Network.load(args.network)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(network)

    # Visualize
    dot = network.visualize()
    dot.format = args.format
    dot.render(args.output, view=not args.no_view, cleanup=True)
    print(f"Network visualization saved to {Path(args.output)}.{args.format}")


if __name__ == '__main__':
    main()
