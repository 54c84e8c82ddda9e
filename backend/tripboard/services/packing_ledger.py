"""
Packing ledger: the shared checklist, its progress, and who packed what.

An item has two people attached to it: whoever added it (created_by) and
whoever last ticked it off (packed_by). The two are never mixed up.
"""
import logging
from typing import Dict, Iterable, List, Optional
from tripboard.core.config import settings
from tripboard.core.errors import ValidationError, NotFoundError
from tripboard.core.utils import percent
from tripboard.models.packing import PackingCategory
from tripboard.schemas.packing import (
    PackingItem, PackingProgress, PackingCategoryGroup, PackingContributor
)
from tripboard.schemas.user import UserRef
from tripboard.services.gateway import TripGateway, persist

logger = logging.getLogger(__name__)

STANDARD_CATEGORIES = [c.value for c in PackingCategory]

MIN_QUANTITY = 1


def clamp_quantity(quantity) -> int:
    """Clamp to [1, PACKING_MAX_QUANTITY]; anything unparsable counts as 1."""
    try:
        quantity = int(quantity)
    except (TypeError, ValueError):
        return MIN_QUANTITY
    return max(MIN_QUANTITY, min(settings.PACKING_MAX_QUANTITY, quantity))


def packed_by_display(item: PackingItem) -> Optional[UserRef]:
    """The packer, but only while the item is actually packed."""
    return item.packed_by if item.is_packed else None


def compute_progress(items: Iterable[PackingItem]) -> PackingProgress:
    items = list(items)
    packed = sum(1 for i in items if i.is_packed)
    return PackingProgress(
        packed_count=packed,
        total_count=len(items),
        percentage=percent(packed, len(items)),
    )


def _category_key(item: PackingItem) -> str:
    return (item.category or "").strip().lower()


def group_by_category(
    items: Iterable[PackingItem],
    known_categories: Optional[List[str]] = None,
) -> List[PackingCategoryGroup]:
    """
    Checklist sections: every known category, even when empty, plus any
    other category found on the items.

    Extra categories follow the known ones in alphabetical order. Sections
    with items then move ahead of empty ones; relative order is otherwise
    kept, so the layout stays put while items are ticked off.
    """
    items = list(items)
    known = list(known_categories or STANDARD_CATEGORIES)
    extras = sorted({_category_key(i) for i in items} - set(known))

    groups = []
    for category in known + extras:
        members = [i for i in items if _category_key(i) == category]
        packed = sum(1 for i in members if i.is_packed)
        groups.append(PackingCategoryGroup(
            category=category,
            label=category[:1].upper() + category[1:],
            items=members,
            packed_count=packed,
            unpacked_count=len(members) - packed,
        ))

    return [g for g in groups if g.items] + [g for g in groups if not g.items]


def compute_contributors(items: Iterable[PackingItem]) -> List[PackingContributor]:
    """Items packed per packer, most first. Adders are not counted."""
    stats: Dict[str, PackingContributor] = {}
    for item in items:
        packer = packed_by_display(item)
        if packer is None:
            continue
        if packer.id not in stats:
            stats[packer.id] = PackingContributor(
                user_id=packer.id,
                name=packer.name,
                avatar_url=packer.avatar_url,
                count=0,
            )
        stats[packer.id].count += 1
    return sorted(stats.values(), key=lambda c: c.count, reverse=True)


def _check_category(category: str) -> str:
    category = (category or "").strip().lower()
    if category not in STANDARD_CATEGORIES:
        raise ValidationError(f"Unknown packing category '{category}'")
    return category


class PackingLedger:
    """Owns the packing item collection of one trip."""

    def __init__(self, trip_id: str, gateway: TripGateway, actor: UserRef, items: Optional[List[PackingItem]] = None):
        self.trip_id = trip_id
        self.gateway = gateway
        self.actor = actor
        self._items: List[PackingItem] = list(items or [])

    @property
    def items(self) -> List[PackingItem]:
        return list(self._items)

    def get(self, item_id: str) -> PackingItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise NotFoundError("Item not found")

    def _replace(self, updated: PackingItem):
        self._items = [updated if i.id == updated.id else i for i in self._items]

    async def add_item(
        self,
        name: str,
        category: str = PackingCategory.CLOTHING.value,
        quantity: int = 1,
        notes: Optional[str] = None,
    ) -> PackingItem:
        """Add an item to the checklist; the acting user is recorded as its adder."""
        attempted = {"name": name, "category": category, "quantity": quantity, "notes": notes}
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Please enter an item name", attempted=attempted)
        try:
            category = _check_category(category)
        except ValidationError as e:
            e.attempted = attempted
            raise

        fields = {
            "name": name.strip(),
            "category": category,
            "quantity": clamp_quantity(quantity),
            "notes": (notes or "").strip() or None,
            "created_by": self.actor.id,
        }
        created = await persist("add packing item", self.gateway.create_packing_item(self.trip_id, fields), attempted)
        self._items.append(created)
        logger.info(f"Added packing item {created.id} to trip {self.trip_id}")
        return created

    async def toggle_item(self, item_id: str) -> PackingItem:
        """
        Flip an item's packed state.

        Packing stamps the acting user as packer. Unpacking leaves the stamp
        in place; packed_by_display hides it until the item is packed again.
        """
        item = self.get(item_id)
        now_packed = not item.is_packed
        changes = {"is_packed": now_packed}
        if now_packed:
            changes["packed_by"] = self.actor.id

        await persist("update packing item", self.gateway.update_packing_item(item_id, changes), dict(changes, id=item_id))

        local = {"is_packed": now_packed}
        if now_packed:
            local["packed_by"] = self.actor
        updated = item.model_copy(update=local)
        self._replace(updated)
        logger.info(f"Packing item {item_id} {'packed' if now_packed else 'unpacked'} by {self.actor.id}")
        return updated

    async def update_quantity(self, item_id: str, quantity: int) -> PackingItem:
        """Set quantity. Below 1 nothing happens; above the maximum it is clamped."""
        item = self.get(item_id)
        try:
            requested = int(quantity)
        except (TypeError, ValueError):
            return item
        if requested < MIN_QUANTITY:
            return item

        value = clamp_quantity(requested)
        await persist(
            "update quantity",
            self.gateway.update_packing_item(item_id, {"quantity": value}),
            {"id": item_id, "quantity": quantity},
        )
        updated = item.model_copy(update={"quantity": value})
        self._replace(updated)
        return updated

    async def update_item(self, item_id: str, **changes) -> PackingItem:
        """Edit name, category, notes or quantity."""
        item = self.get(item_id)
        changes = {k: v for k, v in changes.items() if k in ("name", "category", "notes", "quantity") and v is not None}
        attempted = dict(changes, id=item_id)
        try:
            if "name" in changes:
                if not isinstance(changes["name"], str) or not changes["name"].strip():
                    raise ValidationError("Please enter an item name")
                changes["name"] = changes["name"].strip()
            if "category" in changes:
                changes["category"] = _check_category(changes["category"])
        except ValidationError as e:
            e.attempted = attempted
            raise
        if "quantity" in changes:
            changes["quantity"] = clamp_quantity(changes["quantity"])
        if not changes:
            return item

        record = await persist("update packing item", self.gateway.update_packing_item(item_id, changes), attempted)
        updated = item.model_copy(update=changes)
        if record is not None:
            updated = record.model_copy(update={"trip_id": record.trip_id or item.trip_id, **changes})
        self._replace(updated)
        return updated

    async def delete_item(self, item_id: str):
        """Delete an item. Callers confirm with the user first."""
        self.get(item_id)
        await persist("delete packing item", self.gateway.delete_packing_item(item_id), {"id": item_id})
        self._items = [i for i in self._items if i.id != item_id]
        logger.info(f"Deleted packing item {item_id} from trip {self.trip_id}")

    def compute_progress(self) -> PackingProgress:
        return compute_progress(self._items)

    def group_by_category(self) -> List[PackingCategoryGroup]:
        return group_by_category(self._items)

    def compute_contributors(self) -> List[PackingContributor]:
        return compute_contributors(self._items)
