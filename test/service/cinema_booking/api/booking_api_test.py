"""
API tests for the seat booking endpoints

Test Coverage:
1. Screening creation, listing and seat map
2. Hold, conflict (409 with unavailable seat ids) and cancel
3. Checkout with the mock gateway: success, decline, code lookup
4. Payment webhook redelivery
5. Admin repair and sweep endpoints
6. Health and metrics
"""

import pytest


pytestmark = pytest.mark.api

SCREENING = {
    'film_title': 'Spirited Away',
    'room': 'Hall 1',
    'start_time': '2026-11-01T19:30:00+08:00',
    'price': '12.50',
    'total_seats': 20,
}
GUEST = {'guest_name': 'Lin Mei', 'guest_email': 'lin.mei@example.com'}
GOOD_CARD = {'payment_method': 'credit_card', 'card_number': '4242424242424242'}
DECLINED_CARD = {'payment_method': 'credit_card', 'card_number': '4000000000000002'}


def create_screening(client, **overrides) -> dict:
    response = client.post('/api/screening', json={**SCREENING, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def seat_ids_by_label(screening: dict) -> dict[str, int]:
    return {seat['label']: seat['id'] for seat in screening['seats']}


def hold(client, screening: dict, labels: list[str], guest: dict = GUEST):
    seats = seat_ids_by_label(screening)
    return client.post(
        '/api/reservation',
        json={'screening_id': screening['id'], 'seat_ids': [seats[label] for label in labels], **guest},
    )


class TestScreeningApi:
    def test_create_screening_lays_out_seats(self, client):
        screening = create_screening(client)

        assert screening['total_seats'] == 20
        assert screening['available_seats'] == 20
        assert screening['is_fully_booked'] is False
        labels = [seat['label'] for seat in screening['seats']]
        assert labels[:3] == ['A1', 'A2', 'B1']
        assert len(set(labels)) == 20
        assert {seat['status'] for seat in screening['seats']} == {'available'}

    def test_invalid_screening_is_rejected(self, client):
        response = client.post('/api/screening', json={**SCREENING, 'total_seats': 0})
        assert response.status_code == 400

    def test_list_and_get(self, client):
        created = create_screening(client)
        create_screening(client, is_active=False, room='Hall 2')

        all_screenings = client.get('/api/screening').json()
        active = client.get('/api/screening', params={'active_only': True}).json()

        assert len(all_screenings) == 2
        assert [s['id'] for s in active] == [created['id']]
        assert client.get(f'/api/screening/{created["id"]}').json()['room'] == 'Hall 1'
        assert client.get('/api/screening/999').status_code == 404

    def test_seat_map_reflects_holds(self, client):
        screening = create_screening(client)
        assert hold(client, screening, ['A1', 'B2']).status_code == 201

        seat_map = client.get(f'/api/screening/{screening["id"]}/seats').json()

        assert seat_map['screening']['held_seats'] == 2
        assert seat_map['screening']['available_seats'] == 18
        row_a = {seat['label']: seat['status'] for seat in seat_map['rows']['A']}
        assert row_a == {'A1': 'held', 'A2': 'available'}
        assert seat_map['updated_at'] is not None


class TestReservationApi:
    def test_conflicting_hold_returns_409_with_seat_ids(self, client):
        # Given
        screening = create_screening(client)
        seats = seat_ids_by_label(screening)
        first = hold(client, screening, ['A1'])
        assert first.status_code == 201
        assert first.json()['status'] == 'holding'

        # When
        second = hold(
            client,
            screening,
            ['A1', 'A2'],
            guest={'guest_name': 'Chen Wei', 'guest_email': 'chen.wei@example.com'},
        )

        # Then
        assert second.status_code == 409
        assert second.json()['unavailable_seat_ids'] == [seats['A1']]
        seat_map = client.get(f'/api/screening/{screening["id"]}/seats').json()
        assert seat_map['screening']['held_seats'] == 1

    def test_guest_without_email_is_rejected(self, client):
        screening = create_screening(client)

        response = hold(client, screening, ['A1'], guest={'guest_name': 'Lin Mei'})

        assert response.status_code == 400
        assert 'guest_email' in response.json()['detail']

    def test_pay_confirms_and_code_lookup(self, client):
        # Given
        screening = create_screening(client)
        reservation = hold(client, screening, ['A1', 'A2']).json()

        # When
        paid = client.post(f'/api/reservation/{reservation["id"]}/pay', json=GOOD_CARD)

        # Then
        assert paid.status_code == 200, paid.text
        body = paid.json()
        assert body['status'] == 'confirmed'
        assert body['total_price'] == '25.00'
        assert body['confirmation_code'].startswith('CONF-')

        found = client.get(f'/api/reservation/code/{body["confirmation_code"].lower()}')
        assert found.status_code == 200
        assert found.json()['id'] == reservation['id']

        seat_map = client.get(f'/api/screening/{screening["id"]}/seats').json()
        assert seat_map['screening']['sold_seats'] == 2

    def test_declined_card_frees_seats(self, client):
        screening = create_screening(client)
        reservation = hold(client, screening, ['A1']).json()

        paid = client.post(f'/api/reservation/{reservation["id"]}/pay', json=DECLINED_CARD)

        assert paid.status_code == 200
        assert paid.json()['status'] == 'cancelled'
        assert paid.json()['cancellation_reason'] == 'Card declined'
        assert hold(client, screening, ['A1']).status_code == 201

    def test_begin_payment_then_cancel_is_refused(self, client):
        screening = create_screening(client)
        reservation = hold(client, screening, ['A1']).json()

        begun = client.post(
            f'/api/reservation/{reservation["id"]}/begin_payment',
            json={'payment_method': 'paypal'},
        )
        cancel = client.patch(f'/api/reservation/{reservation["id"]}/cancel', json={})

        assert begun.json()['status'] == 'awaiting_payment'
        assert cancel.status_code == 409

    def test_cancel_holding_reservation(self, client):
        screening = create_screening(client)
        reservation = hold(client, screening, ['A1']).json()

        response = client.patch(
            f'/api/reservation/{reservation["id"]}/cancel', json={'actor': 'admin'}
        )

        assert response.status_code == 200
        assert response.json()['status'] == 'cancelled'
        assert response.json()['cancellation_reason'] == 'Cancelled by admin'
        assert client.get(f'/api/reservation/{reservation["id"]}').json()['status'] == 'cancelled'

    def test_unknown_reservation(self, client):
        response = client.get('/api/reservation/01890a5d-ac96-774b-bcce-b302099a8057')
        assert response.status_code == 404
        assert client.get('/api/reservation/code/CONF-NOPE0000').status_code == 404


class TestPaymentWebhookApi:
    def test_duplicate_webhook_is_idempotent(self, client):
        screening = create_screening(client)
        reservation = hold(client, screening, ['A1']).json()
        client.post(
            f'/api/reservation/{reservation["id"]}/begin_payment',
            json={'payment_method': 'credit_card'},
        )
        payload = {
            'reservation_id': reservation['id'],
            'status': 'completed',
            'transaction_id': 'TXN-42',
            'amount': '12.50',
        }

        first = client.post('/api/payment/webhook', json=payload)
        second = client.post('/api/payment/webhook', json=payload)
        other = client.post('/api/payment/webhook', json={**payload, 'transaction_id': 'TXN-43'})

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()['confirmation_code'] == first.json()['confirmation_code']
        assert other.status_code == 409

    def test_unknown_status_is_rejected(self, client):
        response = client.post(
            '/api/payment/webhook',
            json={
                'reservation_id': '01890a5d-ac96-774b-bcce-b302099a8057',
                'status': 'refunded',
                'transaction_id': 'TXN-1',
            },
        )
        assert response.status_code == 400


class TestAdminApi:
    def test_repair_refused_while_seats_are_held(self, client):
        screening = create_screening(client)
        seats = seat_ids_by_label(screening)
        hold(client, screening, ['C1'])

        response = client.post(f'/api/screening/{screening["id"]}/repair_seats')

        assert response.status_code == 409
        assert response.json()['active_seat_ids'] == [seats['C1']]

    def test_repair_regenerates_idle_screening(self, client):
        screening = create_screening(client, total_seats=5)

        response = client.post(f'/api/screening/{screening["id"]}/repair_seats')

        assert response.status_code == 200
        assert response.json()['seat_count'] == 5
        assert [seat['label'] for seat in response.json()['seats']] == [
            seat['label'] for seat in screening['seats']
        ]

    def test_sweep_with_nothing_due(self, client):
        screening = create_screening(client)
        reservation = hold(client, screening, ['A1']).json()

        response = client.post('/api/screening/sweep_expired')

        assert response.status_code == 200
        assert response.json()['scanned'] == 0
        reservations = client.get(f'/api/screening/{screening["id"]}/reservations').json()
        assert [r['id'] for r in reservations] == [reservation['id']]


def test_health_and_metrics(client):
    assert client.get('/health').json()['status'] == 'healthy'

    metrics = client.get('/metrics')
    assert metrics.status_code == 200
    assert 'seat_hold_requests_total' in metrics.text
