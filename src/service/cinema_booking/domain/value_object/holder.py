from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError


@attrs.frozen
class Holder:
    """
    Who a reservation belongs to: a registered user or a guest.

    A guest must leave a name and an email so the ticket can be delivered.
    """

    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None

    @classmethod
    def create(
        cls,
        *,
        user_id: Optional[int] = None,
        guest_name: Optional[str] = None,
        guest_email: Optional[str] = None,
        guest_phone: Optional[str] = None,
    ) -> 'Holder':
        guest_name = (guest_name or '').strip() or None
        guest_email = (guest_email or '').strip() or None
        guest_phone = (guest_phone or '').strip() or None

        if user_id is None:
            if not guest_name:
                raise DomainError('guest_name is required when booking without an account')
            if not guest_email:
                raise DomainError('guest_email is required when booking without an account')
        elif user_id <= 0:
            raise DomainError('user_id must be positive')

        if guest_email and '@' not in guest_email:
            raise DomainError('guest_email is not a valid email address')
        if guest_phone and len(guest_phone) > 20:
            raise DomainError('guest_phone must be at most 20 characters')

        return cls(
            user_id=user_id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
        )

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def display_name(self) -> str:
        if self.guest_name:
            return self.guest_name
        return f'user#{self.user_id}'
