from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import attrs


@attrs.frozen
class TicketConfirmation:
    """User-facing confirmation artifact for a confirmed reservation."""

    confirmation_code: str
    recipient_email: Optional[str]
    recipient_name: str
    film_title: str
    room: str
    start_time: datetime
    seat_labels: List[str]
    total_price: Decimal

    @property
    def seats_list(self) -> str:
        return ', '.join(self.seat_labels)
