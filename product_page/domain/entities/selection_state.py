from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from product_page.domain.entities.address import AddressRecord


@dataclass(frozen=True)
class SelectionState:
    main_image_id: int
    selected_size: str = ""  # "" means unselected
    selected_color: str = ""  # color code, e.g. "#000080"
    quantity: int = 1
    postal_code: str = ""  # raw digits as typed
    resolved_address: AddressRecord | None = None
    last_persisted_at: datetime | None = None
