"""
Contract session - mutation dispatcher for ContractState

Every event replaces the whole snapshot. After each event the derived
finalPrice is reconciled: the snapshot is replaced a second time only when the
recomputed string differs from the stored one, so a change settles after at
most one extra update.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ...errors import ExportInProgress
from ..pricing.catalog import PricingCatalog
from ..pricing.engine import compute_final_price
from .state import CUSTOM_OPTION_EDITABLE_FIELDS, EDITABLE_FIELDS, ContractState, CustomOption

logger = logging.getLogger(__name__)


def new_contract_state(catalog: PricingCatalog) -> ContractState:
    """Fresh state with catalog defaults (first package, no option, nothing selected)"""
    state = ContractState(packageConfig=catalog.default_package_key)
    return reconcile_price(state, catalog)


def reconcile_price(state: ContractState, catalog: PricingCatalog) -> ContractState:
    """Store the recomputed price; returns the same snapshot when nothing changed"""
    final_price = compute_final_price(state, catalog)
    if final_price == state.finalPrice:
        return state
    return state.replace(finalPrice=final_price)


class ContractSession:
    """Holds the current snapshot of one contract and applies named events"""

    def __init__(self, catalog: PricingCatalog, state: Optional[ContractState] = None):
        self.catalog = catalog
        self.state = reconcile_price(state, catalog) if state else new_contract_state(catalog)
        self.price_updates = 0
        self._export_in_flight = False
        self._last_option_id = max((o.id for o in self.state.customOptions), default=0)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    @property
    def export_in_flight(self) -> bool:
        return self._export_in_flight

    def _commit(self, state: ContractState) -> ContractState:
        if self._export_in_flight:
            raise ExportInProgress()

        reconciled = reconcile_price(state, self.catalog)
        if reconciled is not state:
            self.price_updates += 1
            logger.debug(f"💰 finalPrice updated: {state.finalPrice!r} -> {reconciled.finalPrice!r}")
        self.state = reconciled
        return reconciled

    def update_field(self, field: str, value: Any) -> ContractState:
        """Replace a single form field (text, enum key or the custom-option gate)"""
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field '{field}' cannot be edited directly")
        return self._commit(self.state.replace(**{field: value}))

    def toggle_discount(self, discount_id: str) -> ContractState:
        current = list(self.state.discountItems)
        if discount_id in current:
            current = [d for d in current if d != discount_id]
        else:
            current.append(discount_id)
        return self._commit(
            self.state.replace(discountItems=self.catalog.order_discount_ids(current))
        )

    def _next_option_id(self) -> int:
        existing = max((o.id for o in self.state.customOptions), default=0)
        option_id = max(int(time.time() * 1000), self._last_option_id + 1, existing + 1)
        self._last_option_id = option_id
        return option_id

    def add_custom_option(self) -> ContractState:
        if self._export_in_flight:
            raise ExportInProgress()
        option = CustomOption(id=self._next_option_id())
        return self._commit(
            self.state.replace(customOptions=[*self.state.customOptions, option])
        )

    def remove_custom_option(self, option_id: int) -> ContractState:
        remaining = [o for o in self.state.customOptions if o.id != option_id]
        return self._commit(self.state.replace(customOptions=remaining))

    def update_custom_option(self, option_id: int, field: str, value: Any) -> ContractState:
        if field not in CUSTOM_OPTION_EDITABLE_FIELDS:
            raise ValueError(f"Custom option field '{field}' cannot be edited")
        if not any(o.id == option_id for o in self.state.customOptions):
            raise KeyError(f"Custom option {option_id} not found")

        updated = [
            o.model_copy(update={field: value}) if o.id == option_id else o
            for o in self.state.customOptions
        ]
        # model_copy skips validation; replace() re-validates the whole snapshot
        return self._commit(self.state.replace(customOptions=[o.model_dump() for o in updated]))

    def set_signature(self, payload: str) -> ContractState:
        """Store the image captured by the signature pad"""
        if not payload or not payload.strip():
            raise ValueError("서명을 입력해주세요.")
        return self._commit(self.state.replace(signature=payload))

    def clear_signature(self) -> ContractState:
        return self._commit(self.state.replace(signature=None))

    def set_logo(self, payload: Optional[str]) -> ContractState:
        return self._commit(self.state.replace(logoImage=payload or None))

    def replace(self, state: ContractState) -> ContractState:
        """Wholesale replacement, e.g. by a state received through a share link"""
        result = self._commit(state)
        self._last_option_id = max(
            self._last_option_id, max((o.id for o in result.customOptions), default=0)
        )
        return result

    # ------------------------------------------------------------------
    # Export guard
    # ------------------------------------------------------------------

    @contextmanager
    def exporting(self) -> Iterator[ContractState]:
        """Yield a point-in-time snapshot; mutating events fail until the block exits"""
        if self._export_in_flight:
            raise ExportInProgress()
        self._export_in_flight = True
        snapshot = self.state
        try:
            yield snapshot
        finally:
            self._export_in_flight = False
