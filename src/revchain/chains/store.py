"""ChainStore — durable ledger of review chains.

Chains are keyed by the agent that started them. A secondary identity index
maps every participant agent id to its chain key so lookups by any iteration's
agent are O(1). The index is derived state: it is rebuilt from the chain map on
load and never persisted.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from revchain.chains.models import Chain, Iteration, IterationStatus
from revchain.chains.storage import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class ChainStoreError(Exception):
    """Base error for chain ledger operations."""


class ChainNotFound(ChainStoreError):
    """Raised when a chain key does not exist."""

    def __init__(self, original_agent_id: str) -> None:
        self.original_agent_id = original_agent_id
        super().__init__(f"Chain not found: {original_agent_id}")


class DuplicateChain(ChainStoreError):
    """Raised when creating a chain for an agent that already has one."""

    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id
        super().__init__(f"Agent {agent_id} already belongs to a chain")


class ChainConflict(ChainStoreError):
    """Raised when an agent would join a second chain."""

    def __init__(self, agent_id: str, existing_key: str, requested_key: str) -> None:
        self.agent_id = agent_id
        self.existing_key = existing_key
        self.requested_key = requested_key
        super().__init__(
            f"Agent {agent_id} belongs to chain {existing_key}, cannot join {requested_key}"
        )


class ChainStore:
    """Chain ledger persisted as one JSON document.

    Every mutating call rewrites the whole document atomically. A failed write
    is logged and swallowed: the in-memory ledger stays correct for the life of
    the process, but the change is lost on restart.
    """

    def __init__(self, path: Path, legacy_path: Path | None = None) -> None:
        """Load the ledger.

        Args:
            path: Canonical ledger location
            legacy_path: Older location read only when ``path`` does not exist;
                the next save writes to ``path``

        Raises:
            ChainStoreError: If an existing ledger file cannot be parsed
        """
        self.path = path
        self.legacy_path = legacy_path
        self._chains: dict[str, Chain] = {}
        self._index: dict[str, str] = {}
        self._load()

    # Persistence

    def _load(self) -> None:
        source: Path | None = None
        if self.path.exists():
            source = self.path
        elif self.legacy_path is not None and self.legacy_path.exists():
            source = self.legacy_path
            logger.info("Loading chain ledger from legacy path %s", source)

        if source is None:
            return

        try:
            raw = read_json(source)
            self._chains = {key: Chain.model_validate(value) for key, value in raw.items()}
        except (json.JSONDecodeError, ValidationError, AttributeError) as e:
            raise ChainStoreError(f"Cannot load chain ledger {source}: {e}") from e

        self._rebuild_index()

    def _rebuild_index(self) -> None:
        self._index.clear()
        for key, chain in self._chains.items():
            self._index[chain.original_agent_id] = key
            for iteration in chain.iterations:
                self._index[iteration.agent_id] = key

    def _save(self) -> None:
        data = {
            key: chain.model_dump(mode="json", by_alias=True, exclude_none=True)
            for key, chain in self._chains.items()
        }
        try:
            write_json_atomic(self.path, data)
        except OSError as e:
            logger.error("Failed to persist chain ledger to %s: %s", self.path, e)

    def flush(self) -> None:
        """Write the current ledger to disk."""
        self._save()

    # Mutations

    def create_chain(self, agent_id: str, branch: str) -> Chain:
        """Start a chain with a single pending iteration.

        Raises:
            DuplicateChain: If ``agent_id`` already belongs to a chain
        """
        if agent_id in self._chains or agent_id in self._index:
            raise DuplicateChain(agent_id)

        chain = Chain(
            original_agent_id=agent_id,
            current_agent_id=agent_id,
            iterations=[Iteration(agent_id=agent_id, branch=branch)],
        )
        self._chains[agent_id] = chain
        self._index[agent_id] = agent_id
        self._save()
        return chain

    def add_iteration(
        self,
        original_agent_id: str,
        new_agent_id: str,
        branch: str,
        feedback: str,
    ) -> Chain:
        """Append a revision attempt to an existing chain.

        ``new_agent_id`` may already be a participant of the same chain (an
        agent revising its own branch in place).

        Raises:
            ChainNotFound: If no chain is keyed by ``original_agent_id``
            ChainConflict: If ``new_agent_id`` belongs to another chain
        """
        chain = self._chains.get(original_agent_id)
        if chain is None:
            raise ChainNotFound(original_agent_id)

        existing_key = self._index.get(new_agent_id)
        if existing_key is not None and existing_key != original_agent_id:
            raise ChainConflict(new_agent_id, existing_key, original_agent_id)

        chain.iterations.append(
            Iteration(agent_id=new_agent_id, branch=branch, feedback=feedback)
        )
        chain.current_agent_id = new_agent_id
        self._index[new_agent_id] = original_agent_id
        self._save()
        return chain

    def approve_agent(self, agent_id: str, pr_url: str) -> None:
        """Mark the agent's latest iteration approved and record the PR."""
        chain = self.get_chain(agent_id)
        if chain is None:
            return
        iteration = chain.latest_iteration_for(agent_id)
        if iteration is None:
            return
        iteration.status = IterationStatus.approved
        chain.final_pr_url = pr_url
        self._save()

    def set_iteration_status(
        self,
        agent_id: str,
        status: IterationStatus,
        feedback: str | None = None,
    ) -> None:
        """Update the status (and optionally feedback) of the agent's latest iteration."""
        chain = self.get_chain(agent_id)
        if chain is None:
            return
        iteration = chain.latest_iteration_for(agent_id)
        if iteration is None:
            return
        iteration.status = status
        if feedback is not None:
            iteration.feedback = feedback
        self._save()

    def set_final_pr_url(self, agent_id: str, pr_url: str) -> None:
        chain = self.get_chain(agent_id)
        if chain is None:
            return
        chain.final_pr_url = pr_url
        self._save()

    def set_check_run_id(self, agent_id: str, check_run_id: int) -> None:
        chain = self.get_chain(agent_id)
        if chain is None:
            return
        iteration = chain.latest_iteration_for(agent_id)
        if iteration is None:
            return
        iteration.check_run_id = check_run_id
        self._save()

    def set_head_sha(self, agent_id: str, head_sha: str) -> None:
        """Record the commit the agent's latest iteration is reviewed at."""
        chain = self.get_chain(agent_id)
        if chain is None:
            return
        iteration = chain.latest_iteration_for(agent_id)
        if iteration is None:
            return
        iteration.head_sha = head_sha
        self._save()

    # Reads

    def get_check_run_id(self, agent_id: str) -> int | None:
        chain = self.get_chain(agent_id)
        if chain is None:
            return None
        iteration = chain.latest_iteration_for(agent_id)
        return iteration.check_run_id if iteration else None

    def get_chain(self, agent_id: str) -> Chain | None:
        """Find the chain ``agent_id`` participates in.

        Falls back to a scan (and repairs the index) when the id is present in
        an iteration but missing from the index.
        """
        key = self._index.get(agent_id)
        if key is not None:
            return self._chains.get(key)

        for key, chain in self._chains.items():
            if any(i.agent_id == agent_id for i in chain.iterations):
                logger.warning(
                    "Repaired missing index entry for agent %s (chain %s)", agent_id, key
                )
                self._index[agent_id] = key
                return chain
        return None

    def get_all_chains(self) -> list[Chain]:
        """Snapshot of every chain; mutating the result does not touch the ledger."""
        return [chain.model_copy(deep=True) for chain in self._chains.values()]

    def __len__(self) -> int:
        return len(self._chains)
