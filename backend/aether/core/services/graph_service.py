from __future__ import annotations

from itertools import combinations
from typing import TYPE_CHECKING

from aether.core.schemas.graph import GraphData, GraphLink, GraphNode
from aether.utils.logging import get_logger
from aether.utils.markdown import extract_tags, slugify

if TYPE_CHECKING:
    from aether.core.services.vault_service import VaultService

logger = get_logger(__name__)

UNTAGGED = "untagged"


class GraphService:
    """Build graph payloads from the current (non-archived) note corpus.

    Graphs are recomputed from scratch on every call. Errors from the vault
    propagate unchanged.
    """

    def __init__(self, vault: VaultService) -> None:
        self._vault = vault

    async def build_graph(self) -> GraphData:
        """Tag co-occurrence graph.

        One node per tag with ``frequency`` = number of notes carrying it. Two
        tags are linked once if they appear together in at least one note. Notes
        without tags count towards the synthetic ``untagged`` node.
        """
        notes = await self._vault.read_all_thoughts()
        nodes: dict[str, GraphNode] = {}
        links: list[GraphLink] = []
        seen_pairs: set[tuple[str, str]] = set()

        for note in notes:
            tags = sorted(extract_tags(note.body)) or [UNTAGGED]
            for tag in tags:
                node = nodes.get(tag)
                if node is None:
                    node = nodes[tag] = GraphNode(id=tag, label=tag)
                node.frequency += 1

            # tags is sorted, so each pair is already canonical
            for a, b in combinations(tags, 2):
                if (a, b) in seen_pairs:
                    continue
                seen_pairs.add((a, b))
                links.append(GraphLink(source=a, target=b))
                nodes[a].backlinks.append(b)
                nodes[b].backlinks.append(a)

        logger.debug("Built tag graph", extra={"nodes": len(nodes), "links": len(links)})
        return GraphData(nodes=list(nodes.values()), links=links)

    async def build_note_graph(self) -> GraphData:
        """Wiki-link graph: one node per note, one directed link per resolvable ``[[Target]]``."""
        notes = await self._vault.read_all_thoughts()
        nodes: dict[str, GraphNode] = {n.id: GraphNode(id=n.id, label=n.title) for n in notes}
        links: list[GraphLink] = []
        seen: set[tuple[str, str]] = set()

        for note in notes:
            for target in note.links:
                try:
                    target_id = slugify(target)
                except ValueError:
                    continue
                if target_id == note.id or target_id not in nodes:
                    continue
                if (note.id, target_id) in seen:
                    continue
                seen.add((note.id, target_id))
                links.append(GraphLink(source=note.id, target=target_id))
                nodes[target_id].backlinks.append(note.id)
                nodes[target_id].frequency += 1

        return GraphData(nodes=list(nodes.values()), links=links)
