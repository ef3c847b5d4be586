"""
Selection of orders queued for one pickup.

The kiosk keeps the selection out of the database: it travels between
screens in the URL (``?selected=12,15,40``) so back/forward, refresh and
deep links all rebuild the same set. Every view goes through
``Selection.parse`` and ``Selection.serialize`` instead of splitting query
strings itself.
"""
import re

from .exceptions import EmptySelectionError

_ID_TOKEN = re.compile(r'^\d+$')


class Selection:
    """Ordered set of order ids. Insertion order only keeps URLs stable."""

    def __init__(self, order_ids=()):
        self._ids = {}
        for order_id in order_ids:
            self.add(order_id)

    @classmethod
    def parse(cls, value):
        """
        Build a selection from a comma-separated URL parameter.

        Blank, non-numeric and zero tokens are dropped; duplicates collapse.
            Selection.parse("3,,abc,5,3").ids -> [3, 5]
        """
        selection = cls()
        if not value:
            return selection
        for token in str(value).split(','):
            token = token.strip()
            if not _ID_TOKEN.match(token):
                continue
            order_id = int(token)
            if order_id > 0:
                selection.add(order_id)
        return selection

    def serialize(self):
        return ','.join(str(order_id) for order_id in self._ids)

    def add(self, order_id):
        self._ids[int(order_id)] = None

    def remove(self, order_id):
        self._ids.pop(int(order_id), None)

    def toggle(self, order_id):
        """Add when absent, remove when present. Returns the new membership."""
        order_id = int(order_id)
        if order_id in self._ids:
            del self._ids[order_id]
            return False
        self._ids[order_id] = None
        return True

    def copy(self):
        return Selection(self._ids)

    def merge_open_item(self, open_order_id):
        """
        Selection used for a checkout started from an order's detail view.

        The open order joins the batch even if "add" was never tapped. The
        result is a new selection; this one is left as it was so cancelling
        the checkout keeps the user's own selection.
        """
        merged = self.copy()
        if open_order_id is not None:
            merged.add(open_order_id)
        return merged

    @property
    def ids(self):
        return list(self._ids)

    def __contains__(self, order_id):
        try:
            return int(order_id) in self._ids
        except (TypeError, ValueError):
            return False

    def __iter__(self):
        return iter(list(self._ids))

    def __len__(self):
        return len(self._ids)

    def __bool__(self):
        return bool(self._ids)

    def __eq__(self, other):
        if not isinstance(other, Selection):
            return NotImplemented
        return set(self._ids) == set(other._ids)

    def __repr__(self):
        return f"Selection([{self.serialize()}])"


def parse_open_order_id(value):
    """Order id from the ``open`` parameter, or None when missing or malformed."""
    if value is None:
        return None
    value = str(value).strip()
    if not _ID_TOKEN.match(value) or int(value) <= 0:
        return None
    return int(value)


def resolve_commit_batch(selection, open_order_id=None):
    """
    Order ids to send to the signature screen.

    The open order (single-order path) is folded in at this point only. An
    empty result blocks the checkout.
    """
    batch = selection.merge_open_item(open_order_id)
    if not batch:
        raise EmptySelectionError("No orders selected")
    return batch
