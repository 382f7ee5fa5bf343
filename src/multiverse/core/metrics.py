"""Run statistics for multiverse expansion."""

import time
from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class ExpansionMetrics:
    """Counters collected while expanding a graph store."""

    # Timing
    start_time: float = 0.0
    end_time: float = 0.0
    duration: float = 0.0

    # Work done
    passes: int = 0
    nodes_expanded: int = 0
    nodes_failed: int = 0
    children_computed: int = 0
    boards_discovered: int = 0

    # Store state when the run finished
    total_boards: int = 0
    unexpanded_boards: int = 0

    def start(self) -> None:
        """Mark the start of a run."""
        self.start_time = time.time()

    def finish(self, total_boards: int, unexpanded_boards: int) -> None:
        """Mark the end of a run and record the final store counts."""
        self.end_time = time.time()
        self.duration = self.end_time - self.start_time
        self.total_boards = total_boards
        self.unexpanded_boards = unexpanded_boards

    @property
    def nodes_per_second(self) -> float:
        """Expansion throughput."""
        return self.nodes_expanded / self.duration if self.duration > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary."""
        data = asdict(self)
        data["nodes_per_second"] = self.nodes_per_second
        return data
