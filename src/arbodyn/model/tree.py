import dataclasses
from typing import Iterator, List, Tuple


@dataclasses.dataclass(frozen=True)
class Tree:
    """The directed tree class.

    Joints are indexed 1..N, index 0 is the universe. The parents tuple holds the
    parent index of every joint (parents[0] == 0). Indices must be a topological
    order of the tree, so ascending visits parents before children and descending
    visits children before parents.
    """

    parents: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "parents", tuple(int(p) for p in self.parents))
        if len(self.parents) == 0 or self.parents[0] != 0:
            raise ValueError("The universe (index 0) must be its own parent")
        for i, parent in enumerate(self.parents[1:], start=1):
            if not 0 <= parent < i:
                raise ValueError(
                    f"Joint {i} has parent {parent}: the parent index must be smaller than the joint index"
                )

    def forward(self) -> range:
        """
        Returns:
            range: the joint indices from the root to the leaves, universe excluded
        """
        return range(1, len(self.parents))

    def backward(self) -> range:
        """
        Returns:
            range: the joint indices from the leaves to the root, universe excluded
        """
        return range(len(self.parents) - 1, 0, -1)

    def supports(self, i: int) -> List[int]:
        """
        Args:
            i (int): joint index

        Returns:
            List[int]: the joints from the universe to i, both included
        """
        chain = [i]
        while i != 0:
            i = self.parents[i]
            chain.insert(0, i)
        return chain

    def children(self, i: int) -> List[int]:
        return [j for j in self.forward() if self.parents[j] == i]

    def subtree(self, i: int) -> List[int]:
        """
        Args:
            i (int): joint index

        Returns:
            List[int]: i followed by all its descendants, in ascending order
        """
        inside = {i}
        for j in range(i + 1, len(self.parents)):
            if self.parents[j] in inside:
                inside.add(j)
        return sorted(inside)

    def __iter__(self) -> Iterator[int]:
        yield from self.forward()

    def __reversed__(self) -> Iterator[int]:
        yield from self.backward()

    def __len__(self) -> int:
        """
        Returns:
            int: the number of joints, universe included
        """
        return len(self.parents)
