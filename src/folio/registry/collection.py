"""Owner-bucketed descriptor collections.

A collection builder keeps descriptors grouped by the library that
contributed them.  Grouping is what makes owner-scoped removal and
difference possible; it is flattened away by ``to_collection()``.

Bucket order is library insertion order and is significant: the
flattened collection is ordered by bucket, then by declaration order
within the bucket, and the conflict policy resolves by that order.

Additions happen in two steps.  ``plan_library()`` / ``plan_union()``
validate the incoming descriptors and return the buckets to write,
without touching the builder; ``apply()`` writes them and cannot fail.
A key -> owners index keeps validation proportional to the incoming
descriptors rather than to everything already collected.
"""

import logging
from collections.abc import Iterable
from typing import Generic, TypeAlias, TypeVar

from folio.config import ConflictPolicy
from folio.errors import ConflictingDescriptorError
from folio.types import ComponentDescriptor, Keyed, PageDescriptor

logger = logging.getLogger("folio.registry")

D = TypeVar("D", bound=Keyed)

# Owner -> complete bucket to store for that owner
Plan: TypeAlias = dict[str, tuple[D, ...]]


class CollectionBuilder(Generic[D]):
    """Descriptors of one kind, grouped by owning library."""

    __slots__ = ("_buckets", "_owners_by_key", "_policy")

    # Used in log messages ("page", "component")
    kind = "descriptor"

    def __init__(self, policy: ConflictPolicy = ConflictPolicy.STRICT) -> None:
        self._buckets: dict[str, tuple[D, ...]] = {}
        # Ordered sets of owners per key
        self._owners_by_key: dict[str, dict[str, None]] = {}
        self._policy = policy

    @property
    def policy(self) -> ConflictPolicy:
        return self._policy

    @property
    def owners(self) -> tuple[str, ...]:
        """Owning library names in insertion order."""
        return tuple(self._buckets)

    def descriptors_of(self, owner: str) -> tuple[D, ...]:
        """Descriptors contributed by ``owner``, empty if it owns none."""
        return self._buckets.get(owner, ())

    def owner_of(self, key: str) -> tuple[str, ...]:
        """Every library contributing a descriptor with ``key``, in bucket order."""
        return self._in_bucket_order(self._owners_by_key.get(key, {}))

    def conflicts(self) -> dict[str, tuple[str, ...]]:
        """Keys contributed by more than one library, mapped to those libraries."""
        return {
            key: self._in_bucket_order(owners)
            for key, owners in self._owners_by_key.items()
            if len(owners) > 1
        }

    def copy(self) -> "CollectionBuilder[D]":
        """Return an independent builder with the same buckets and policy."""
        clone = type(self)(self._policy)
        clone._buckets = dict(self._buckets)
        clone._owners_by_key = {key: dict(owners) for key, owners in self._owners_by_key.items()}
        return clone

    # -- Planning --------------------------------------------------------

    def plan_library(self, name: str, descriptors: Iterable[D]) -> Plan[D]:
        """Validate appending ``descriptors`` to ``name``'s bucket.

        Raises:
            ConflictingDescriptorError: Two descriptors in ``descriptors``
                share a key, a descriptor differs from one ``name``
                already contributed under the same key, or (strict policy
                only) another library already contributed the key.
        """
        incoming = tuple(descriptors)
        seen: set[str] = set()
        for descriptor in incoming:
            if descriptor.key in seen:
                raise ConflictingDescriptorError(descriptor.key, (name, name))
            seen.add(descriptor.key)
        return self._plan([(name, incoming)])

    def plan_union(self, other: "CollectionBuilder[D]") -> Plan[D]:
        """Validate merging ``other``'s buckets into this builder.

        Buckets with the same owner are concatenated, skipping
        descriptors this builder already holds for that owner.  The
        receiver's conflict policy applies.
        """
        if other is self:
            return {}
        return self._plan(other._buckets.items())

    def _plan(self, incoming: Iterable[tuple[str, tuple[D, ...]]]) -> Plan[D]:
        plan: Plan[D] = {}
        # Keys gained by this plan -> owner gaining them
        claimed: dict[str, str] = {}
        strict = self._policy is ConflictPolicy.STRICT
        for owner, descriptors in incoming:
            existing = plan.get(owner, self._buckets.get(owner, ()))
            merged = _merge_bucket(owner, existing, descriptors)
            if strict:
                for descriptor in merged[len(existing) :]:
                    rivals = [o for o in self._owners_by_key.get(descriptor.key, ()) if o != owner]
                    claimant = claimed.setdefault(descriptor.key, owner)
                    if claimant != owner:
                        rivals.append(claimant)
                    if rivals:
                        raise ConflictingDescriptorError(descriptor.key, (*rivals, owner))
            plan[owner] = merged
        return plan

    # -- Mutation --------------------------------------------------------

    def apply(self, plan: Plan[D]) -> None:
        """Write buckets produced by ``plan_library()`` or ``plan_union()``.

        New owners are appended to the bucket order; existing owners keep
        their position.
        """
        for owner, bucket in plan.items():
            previous = self._buckets.get(owner, ())
            for descriptor in bucket[len(previous) :]:
                self._owners_by_key.setdefault(descriptor.key, {})[owner] = None
            self._buckets[owner] = bucket
            logger.debug("Stored %d %s(s) for %r", len(bucket) - len(previous), self.kind, owner)

    def add_from_library(self, name: str, descriptors: Iterable[D]) -> None:
        """Append ``descriptors`` to ``name``'s bucket.

        The bucket is created at the end of the bucket order when
        ``name`` is new, even when ``descriptors`` is empty, so the owner
        stays known to ``difference()`` and ``remove_owner()``.
        See :meth:`plan_library` for the errors raised.
        """
        self.apply(self.plan_library(name, descriptors))

    def union(self, other: "CollectionBuilder[D]") -> None:
        """Merge ``other``'s buckets into this builder. See :meth:`plan_union`."""
        self.apply(self.plan_union(other))

    def difference(self, other: "CollectionBuilder[D]") -> None:
        """Drop every bucket whose owner also owns a bucket in ``other``.

        Descriptor overlap is irrelevant: a key contributed by a library
        that ``other`` does not own survives.
        """
        for owner in list(other._buckets):
            self._drop(owner)

    def remove_owner(self, name: str) -> None:
        """Drop the bucket owned by ``name``. No-op if there is none."""
        if self._drop(name):
            logger.debug("Removed %s(s) owned by %r", self.kind, name)

    def _drop(self, owner: str) -> bool:
        bucket = self._buckets.pop(owner, None)
        if bucket is None:
            return False
        for descriptor in bucket:
            owners = self._owners_by_key[descriptor.key]
            del owners[owner]
            if not owners:
                del self._owners_by_key[descriptor.key]
        return True

    def _in_bucket_order(self, owners: Iterable[str]) -> tuple[str, ...]:
        position = {owner: i for i, owner in enumerate(self._buckets)}
        return tuple(sorted(owners, key=position.__getitem__))

    # -- Output ----------------------------------------------------------

    def to_collection(self) -> tuple[D, ...]:
        """Flatten buckets into one ordered tuple.

        Order is bucket insertion order, then declaration order.  Under
        ``FIRST_WINS`` only the first descriptor per key is kept; under
        ``LAST_WINS`` only the last one, at its own position.
        """
        flat = [(owner, d) for owner, bucket in self._buckets.items() for d in bucket]
        if self._policy is ConflictPolicy.STRICT:
            return tuple(d for _, d in flat)

        ordered = flat if self._policy is ConflictPolicy.FIRST_WINS else flat[::-1]
        winners: dict[str, str] = {}
        kept: list[D] = []
        for owner, descriptor in ordered:
            winner = winners.get(descriptor.key)
            if winner is not None:
                logger.warning(
                    "%s %r from %r dropped in favour of %r (%s)",
                    self.kind.capitalize(),
                    descriptor.key,
                    owner,
                    winner,
                    self._policy.value,
                )
                continue
            winners[descriptor.key] = owner
            kept.append(descriptor)

        if self._policy is ConflictPolicy.LAST_WINS:
            kept.reverse()
        return tuple(kept)

    # -- Protocol --------------------------------------------------------

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def __contains__(self, owner: object) -> bool:
        return owner in self._buckets

    def __repr__(self) -> str:
        return f"{type(self).__name__}(owners={list(self._buckets)!r}, policy={self._policy.value!r})"


class PageCollectionBuilder(CollectionBuilder[PageDescriptor]):
    """Pages grouped by owning library."""

    __slots__ = ()
    kind = "page"

    def to_page_collection(self) -> tuple[PageDescriptor, ...]:
        return self.to_collection()


class ComponentCollectionBuilder(CollectionBuilder[ComponentDescriptor]):
    """Components grouped by owning library."""

    __slots__ = ()
    kind = "component"

    def to_component_collection(self) -> tuple[ComponentDescriptor, ...]:
        return self.to_collection()


def _merge_bucket(
    owner: str,
    existing: tuple[D, ...],
    incoming: tuple[D, ...],
) -> tuple[D, ...]:
    """Concatenate two buckets of the same owner.

    A descriptor equal to one already present is skipped; a different
    descriptor under an existing key is a conflict within the owner.
    """
    known = {d.key: d for d in existing}
    added: list[D] = []
    for descriptor in incoming:
        prior = known.get(descriptor.key)
        if prior is None:
            known[descriptor.key] = descriptor
            added.append(descriptor)
        elif prior != descriptor:
            raise ConflictingDescriptorError(descriptor.key, (owner, owner))
    return (*existing, *added)
