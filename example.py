#!/usr/bin/env python3
"""
Example usage of the multiverse package.
"""

from multiverse import Board, ExpansionDriver, GraphStore, RulesetCatalog, decode
from multiverse.core.evolution import evolve
from multiverse.core.rulesets import CONWAY


def main():
    """Demonstrate programmatic usage of the multiverse package."""
    catalog = RulesetCatalog()

    # A single ruleset applied to a plus shape
    plus = Board.from_list([[0, 1, 0], [1, 0, 1], [0, 1, 0]])
    print("Initial board:")
    print(plus)
    print()

    child = evolve(plus, CONWAY)
    print(f"After one step of {CONWAY} (ruleset {catalog.to_id(CONWAY)}):")
    print(child if child is not None else "(empty)")
    print()

    # Explore the multiverse from the single live cell
    with GraphStore(":memory:", catalog) as store:
        driver = ExpansionDriver(store, catalog)
        root_id = driver.seed()
        driver.expand_all_nodes(limit=20)

        children = store.get_all_evolutions(root_id)
        print(f"Root {root_id.hex()} has {len(set(children))} distinct children")

        # Show the largest board found so far
        largest = max(store.get_unexpanded_boards())
        board = decode(largest, largest.size)
        print(f"Largest unexpanded board {largest.hex()} ({board.size}x{board.size}):")
        print(board)
        print(f"Parents: {store.parent_count(largest)}")

        # Show statistics
        print("Final statistics:")
        for key, value in driver.metrics.to_dict().items():
            print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
