"""Command-line interface for multiverse exploration."""

import argparse
import logging
import sys
from typing import List, Optional

from ..core.codec import BoardId, decode
from ..core.metrics import ExpansionMetrics
from ..core.rulesets import RulesetCatalog
from ..core.runner import ExplorerConfig, run_exploration
from ..core.store import GraphStore, StorageError


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Explore the multiverse of symmetric cellular automata boards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seed a new store and expand its first 100 boards
  multiverse-cli --db multiverse.db --max-nodes 100

  # Resume expanding an existing store until nothing is left
  multiverse-cli --db multiverse.db

  # Show store statistics
  multiverse-cli --db multiverse.db --stats

  # Show a stored board and its children
  multiverse-cli --db multiverse.db --show 80
        """,
    )

    parser.add_argument(
        "-d",
        "--db",
        type=str,
        default="multiverse.db",
        help="Path of the store file (default: multiverse.db)",
    )

    parser.add_argument(
        "-n",
        "--max-nodes",
        type=int,
        help="Maximum number of boards to expand (default: no limit)",
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print store statistics and exit",
    )

    parser.add_argument(
        "--show",
        type=str,
        metavar="HEX",
        help="Print the board with this hex identifier and its children, then exit",
    )

    parser.add_argument(
        "--list-rulesets",
        action="store_true",
        help="List all rulesets with their ids and exit",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Returns:
        True if arguments are valid
    """
    errors = []

    if not args.db:
        errors.append("Store path must not be empty")

    if args.max_nodes is not None and args.max_nodes <= 0:
        errors.append("Max nodes must be positive")

    if args.show is not None:
        try:
            BoardId(bytes.fromhex(args.show))
        except ValueError:
            errors.append(f"'{args.show}' is not a valid board identifier")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def list_rulesets(catalog: RulesetCatalog) -> None:
    """Print every ruleset with its id."""
    print(f"Total valid rulesets: {catalog.count()}")
    print("  id  u/b0-b1/o")
    for ruleset_id, ruleset in enumerate(catalog):
        print(f"  {ruleset_id:3d} {ruleset}")


def print_store_statistics(store: GraphStore) -> None:
    """Print board counts for a store."""
    total = store.total_boards()
    unexpanded = store.unexpanded_count()
    print(f"Store: {store.path}")
    print(f"Total boards: {total}")
    print(f"Expanded: {total - unexpanded}")
    print(f"Unexpanded: {unexpanded}")


def print_board(store: GraphStore, board_id: BoardId, verbose: bool = False) -> bool:
    """Print a stored board, its parents and its children.

    Returns:
        True if the board is in the store
    """
    if not store.exists(board_id):
        print(f"Error: Board {board_id.hex()} not found in {store.path}")
        return False

    board = decode(board_id, board_id.size)
    print(f"Board {board_id.hex()} ({board.size}x{board.size}, population {board.population})")
    if store.is_root(board_id):
        print("Root board")
    print(board)

    parents = store.get_parents(board_id)
    print(f"\nParents: {len(parents)}")
    if verbose:
        for parent in parents:
            print(f"  {parent.hex()}")

    children = store.get_all_evolutions(board_id)
    if children is None:
        print("Not expanded")
        return True

    distinct = sorted(set(children))
    print(f"Children: {len(distinct)} distinct")
    for child in distinct:
        ruleset_ids = [i for i, c in enumerate(children) if c == child]
        if verbose:
            print(f"  {child.hex()}: rulesets {', '.join(str(i) for i in ruleset_ids)}")
        else:
            print(f"  {child.hex()}: {len(ruleset_ids)} rulesets")
    return True


def print_results(metrics: ExpansionMetrics, verbose: bool) -> None:
    """Print the outcome of an exploration run."""
    print(f"Expanded {metrics.nodes_expanded} boards in {metrics.passes} passes")
    print(f"Total boards: {metrics.total_boards} ({metrics.unexpanded_boards} unexpanded)")

    if verbose:
        print(f"New boards discovered: {metrics.boards_discovered}")
        print(f"Children computed: {metrics.children_computed}")
        if metrics.nodes_failed:
            print(f"Failed expansions: {metrics.nodes_failed}")
        print(f"Duration: {metrics.duration:.2f}s ({metrics.nodes_per_second:.1f} boards/s)")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    catalog = RulesetCatalog()

    if args.list_rulesets:
        list_rulesets(catalog)
        return 0

    if not validate_args(args):
        return 1

    try:
        if args.stats or args.show:
            with GraphStore(args.db, catalog) as store:
                if args.stats:
                    print_store_statistics(store)
                    return 0
                found = print_board(store, BoardId(bytes.fromhex(args.show)), args.verbose)
                return 0 if found else 1

        config = ExplorerConfig(db_path=args.db, max_nodes=args.max_nodes)
        metrics = run_exploration(config, catalog)
        print_results(metrics, args.verbose)
        return 0

    except KeyboardInterrupt:
        print("\nExploration interrupted by user")
        return 1
    except StorageError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
