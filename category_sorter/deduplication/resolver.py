"""
Duplicate Resolver
==================

Groups scanned files by content hash and asks the user what to do with
each group of identical files: skip the whole group, or move every copy.
Copies are never deleted.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from category_sorter.utils.exceptions import InputError
from category_sorter.utils.logging_config import get_logger

if TYPE_CHECKING:
    from category_sorter.classification.scanner import FileRecord

logger = get_logger(__name__)

# Reads one line of user input for the given prompt text
PromptFn = Callable[[str], str]
# Writes one line of interactive output
OutputFn = Callable[[str], None]


class Disposition(Enum):
    """What happens to every member of a duplicate group."""
    SKIP = "skip"
    MOVE_ALL = "move_all"


RESPONSES: Dict[str, Disposition] = {
    "s": Disposition.SKIP,
    "skip": Disposition.SKIP,
    "m": Disposition.MOVE_ALL,
    "move": Disposition.MOVE_ALL,
}

PROMPT_TEXT = "[S]kip these files or [M]ove all of them? (s/m): "


def parse_disposition(response: str) -> Disposition:
    """Map a prompt response to a Disposition (case-insensitive).

    Raises:
        InputError: For anything other than s/skip or m/move.
    """
    disposition = RESPONSES.get((response or "").strip().lower())
    if disposition is None:
        raise InputError(
            f"Invalid choice {response!r}; enter 's' to skip or 'm' to move all",
            response=response
        )
    return disposition


@dataclass(frozen=True)
class DuplicateGroup:
    """Two or more records with identical content.

    Attributes:
        content_hash: Shared content digest.
        members: Records in scan order.
    """
    content_hash: str
    members: tuple

    def __post_init__(self):
        object.__setattr__(self, "members", tuple(self.members))
        if len(self.members) < 2:
            raise ValueError("A duplicate group needs at least two members")
        if any(m.content_hash != self.content_hash for m in self.members):
            raise ValueError("Duplicate group members must share the group hash")

    def __len__(self) -> int:
        return len(self.members)


@dataclass
class ResolutionResult:
    """Outcome of duplicate resolution.

    Attributes:
        records: Working set handed to the mover.
        decisions: Disposition chosen for each group, in group order.
        skipped: Records removed because their group was skipped.
    """
    records: List["FileRecord"] = field(default_factory=list)
    decisions: List[tuple] = field(default_factory=list)
    skipped: List["FileRecord"] = field(default_factory=list)


def find_duplicate_groups(records: Sequence["FileRecord"]) -> List[DuplicateGroup]:
    """Group records by hash, keeping groups with more than one member.

    Groups are ordered by the first appearance of their hash in ``records``.
    """
    by_hash: "OrderedDict[str, List[FileRecord]]" = OrderedDict()
    for record in records:
        by_hash.setdefault(record.content_hash, []).append(record)

    return [
        DuplicateGroup(content_hash=content_hash, members=tuple(members))
        for content_hash, members in by_hash.items()
        if len(members) > 1
    ]


class DuplicateResolver:
    """Interactive resolution of duplicate groups.

    The prompt and output functions are injectable; by default the
    resolver reads from stdin with ``input`` and writes with ``print``.
    The prompt repeats until a valid answer is given.
    """

    def __init__(self, prompt: Optional[PromptFn] = None, output: Optional[OutputFn] = None):
        """Initialize the resolver.

        Args:
            prompt: Function returning the user's answer to a prompt.
            output: Function displaying a line to the user.
        """
        self.prompt = prompt or input
        self.output = output or print

    def ask(self, group: DuplicateGroup, index: int, total: int) -> Disposition:
        """Show a group and block until the user picks a disposition."""
        self.output("")
        self.output(
            f"Duplicate group {index}/{total}: "
            f"{len(group)} files with identical content"
        )
        for member in group.members:
            self.output(f"  - {member.path}")

        while True:
            response = self.prompt(PROMPT_TEXT)
            try:
                return parse_disposition(response)
            except InputError as e:
                logger.debug(f"Rejected prompt response: {response!r}")
                self.output(e.message)

    def resolve(
        self,
        records: Sequence["FileRecord"],
        ignore_duplicates: bool = False
    ) -> ResolutionResult:
        """Resolve every duplicate group in ``records``.

        Args:
            records: Scanned records in scan order.
            ignore_duplicates: Return the records unchanged, without prompting.

        Returns:
            ResolutionResult whose ``records`` is a new list; the input
            sequence is not modified.
        """
        if ignore_duplicates:
            logger.debug("Duplicate detection disabled")
            return ResolutionResult(records=list(records))

        groups = find_duplicate_groups(records)
        if not groups:
            logger.info("No duplicate files found")
            return ResolutionResult(records=list(records))

        logger.info(f"Found {len(groups)} group(s) of duplicate files")

        skipped_hashes = set()
        decisions = []
        for index, group in enumerate(groups, start=1):
            disposition = self.ask(group, index, len(groups))
            decisions.append((group, disposition))
            if disposition is Disposition.SKIP:
                skipped_hashes.add(group.content_hash)
                logger.info(f"Skipping {len(group)} duplicate file(s)")
            else:
                logger.info(f"Moving all {len(group)} duplicate file(s)")

        kept = [r for r in records if r.content_hash not in skipped_hashes]
        skipped = [r for r in records if r.content_hash in skipped_hashes]
        return ResolutionResult(records=kept, decisions=decisions, skipped=skipped)
