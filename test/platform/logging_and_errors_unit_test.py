"""
Unit tests for logging helpers and HTTP error mapping

Test Coverage:
1. Card numbers and sensitive keys are masked before logging
2. Long content is truncated
3. CustomBaseError subclasses render detail plus extra fields
"""

import json

import pytest

from src.platform.exception.exception_handlers import (
    custom_error_handler,
    general_500_exception_handler,
)
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import LoguruIO, Logger
from src.platform.logging.loguru_io_utils import MASK, mask_sensitive, truncate_content
from src.service.cinema_booking.domain.booking_errors import SeatsUnavailableError


pytestmark = pytest.mark.unit


class TestMasking:
    def test_bare_card_number_keeps_last_four(self):
        assert mask_sensitive('4242 4242 4242 4242') == f'{MASK}4242'
        assert mask_sensitive('12345') == '12345'
        assert mask_sensitive(42) == 42

    def test_sensitive_keys_are_masked_recursively(self):
        io = LoguruIO(Logger.base)

        masked = io.mask_sensitive(
            {
                'reservation_id': 'r1',
                'payment_details': {'card_number': '4242424242424242'},
                'notes': ['4000000000000002'],
            }
        )

        assert masked['reservation_id'] == 'r1'
        assert masked['payment_details'] == MASK
        assert masked['notes'] == [f'{MASK}0002']

    def test_truncate_long_content(self):
        text = 'x' * 600
        truncated = truncate_content(text)

        assert truncated.startswith('x' * 500)
        assert truncated.endswith('(+100 chars)')
        assert truncate_content('short') == 'short'


class TestErrorResponses:
    @pytest.mark.asyncio
    async def test_seats_unavailable_lists_seat_ids(self):
        response = await custom_error_handler(None, SeatsUnavailableError([5, 3]))

        assert response.status_code == 409
        body = json.loads(response.body)
        assert body['unavailable_seat_ids'] == [3, 5]
        assert 'no longer available' in body['detail']

    @pytest.mark.asyncio
    async def test_not_found(self):
        response = await custom_error_handler(None, NotFoundError('Reservation not found'))

        assert response.status_code == 404
        assert json.loads(response.body) == {'detail': 'Reservation not found'}

    @pytest.mark.asyncio
    async def test_unexpected_error_hides_details(self):
        response = await general_500_exception_handler(None, RuntimeError('secret'))

        assert response.status_code == 500
        assert json.loads(response.body) == {'detail': 'Internal server error'}
